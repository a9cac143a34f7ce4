"""
Command Line Interface for StackBuild.
"""
import click
import os
import sys
from dotenv import dotenv_values
from ..PARSERS.manifest_parser import ManifestParser
from ..MANAGERS.build_orchestrator import BuildOrchestrator
from ..MODELS.build_options import BuildOptions
from ..MODELS.settings import BuildSettings
from ..RUNNERS.command_runner import CommandRunner
from ..exceptions import StackBuildError

def load_environment(env_file=None, build_args=()):
    """
    Values available to Dockerfile ARG declarations: the process environment,
    then the dotenv file, then explicit NAME=VALUE pairs, later sources winning.
    """
    environment = dict(os.environ)
    if env_file:
        environment.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
    for pair in build_args:
        if '=' not in pair:
            raise click.BadParameter(f"expected NAME=VALUE, got {pair!r}", param_hint="--build-arg")
        name, value = pair.split('=', 1)
        environment[name] = value
    return environment

@click.group()
@click.option('--file', '-f', default=None, help='Manifest file path')
@click.pass_context
def cli(ctx, file):
    """
    StackBuild - builds, pulls and tags the images of every service
    declared in a docker-compose style manifest.
    """
    ctx.ensure_object(dict)
    settings = BuildSettings.from_env()
    ctx.obj.setdefault('settings', settings)
    ctx.obj['file'] = file or settings.manifest_file
    ctx.obj.setdefault('runner', CommandRunner())

def _load_manifest(ctx):
    """
    Parses the manifest, exiting with status 1 when it cannot be loaded.
    """
    if not os.path.exists(ctx.obj['file']):
        click.echo(f"Error: {ctx.obj['file']} not found.")
        ctx.exit(1)
    try:
        return ManifestParser().parse(ctx.obj['file'])
    except StackBuildError as e:
        click.echo(f"Error: {e}")
        ctx.exit(1)

@cli.command()
@click.argument('service', required=False)
@click.option('--app', '-a', default=None, help='Application name, defaults to the directory name')
@click.option('--no-cache', is_flag=True, help='Build without cache and always pull images')
@click.option('--env-file', type=click.Path(exists=True, dir_okay=False), default=None,
              help='Dotenv file with build argument values')
@click.option('--build-arg', 'build_args', multiple=True, help='Build argument NAME=VALUE')
@click.pass_context
def build(ctx, service, app, no_cache, env_file, build_args):
    """Build, pull and tag service images."""
    manifest = _load_manifest(ctx)
    working_dir = os.path.dirname(os.path.abspath(ctx.obj['file']))
    app_name = app or os.path.basename(working_dir)

    options = BuildOptions(
        cache=not no_cache,
        environment=load_environment(env_file, build_args),
        service=service
    )
    orchestrator = BuildOrchestrator(manifest, runner=ctx.obj['runner'], settings=ctx.obj['settings'])
    try:
        orchestrator.build(working_dir, app_name, sys.stdout, options)
    except StackBuildError as e:
        click.echo(f"Error: {e}")
        ctx.exit(1)
    click.echo("Build complete.")

@cli.command()
@click.argument('service', required=False)
@click.pass_context
def order(ctx, service):
    """Print the order services are processed in."""
    manifest = _load_manifest(ctx)
    try:
        services = manifest.run_order(service)
    except StackBuildError as e:
        click.echo(f"Error: {e}")
        ctx.exit(1)
    for svc in services:
        click.echo(svc.name)

def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})

if __name__ == '__main__':
    main()
