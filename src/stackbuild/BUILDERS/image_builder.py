"""
Builders for producing service images from local build contexts.
"""
import os
from typing import Dict, List, Optional, TextIO
from ..PARSERS.build_arg_parser import BuildArgParser
from ..MODELS.service_definition import ServiceDefinition
from ..MODELS.build_options import BuildOptions
from ..RUNNERS.command_runner import CommandRunner, docker_command, DEFAULT_DOCKER_BINARY
from ..exceptions import BuildError, CommandError
from .build_cache import BuildCache

DEFAULT_DOCKERFILE = "Dockerfile"


ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def quote_value(value: str) -> str:
    """
    Double-quotes a build argument value. Quotes, backslashes and
    non-printable characters are backslash-escaped, so the result is
    always a single printable line.
    """
    escaped = []
    for ch in value:
        if ch in ESCAPES:
            escaped.append(ESCAPES[ch])
        elif ch.isprintable():
            escaped.append(ch)
        elif ord(ch) < 0x80:
            escaped.append(f"\\x{ord(ch):02x}")
        elif ord(ch) < 0x10000:
            escaped.append(f"\\u{ord(ch):04x}")
        else:
            escaped.append(f"\\U{ord(ch):08x}")
    return '"' + "".join(escaped) + '"'


class ImageBuilder:
    """
    Builds service images in order, reusing an image already built
    during the run whenever two services share a build signature.
    """
    def __init__(self,
                 runner: CommandRunner,
                 base_dir: str = ".",
                 cache: Optional[BuildCache] = None,
                 docker_binary: str = DEFAULT_DOCKER_BINARY):
        """
        Initializes the ImageBuilder.

        :param runner: Executes the docker commands.
        :param base_dir: The working directory build contexts are relative to.
        :param cache: Images built so far in this run; a fresh cache if omitted.
        :param docker_binary: The docker executable to call.
        """
        self.runner = runner
        self.base_dir = base_dir
        self.cache = cache if cache is not None else BuildCache()
        self.docker_binary = docker_binary
        self.parser = BuildArgParser()

    def build_all(self,
                  services: List[ServiceDefinition],
                  app_name: str,
                  sink: TextIO,
                  options: BuildOptions):
        """
        Builds every service in order. The first failure aborts the run,
        since later services may rely on earlier images being present.

        :raises BuildError: If a build or tag command fails.
        :raises BuildFileError: If a Dockerfile cannot be read.
        """
        for service in services:
            self.build(service, app_name, sink, options)

    def build(self,
              service: ServiceDefinition,
              app_name: str,
              sink: TextIO,
              options: BuildOptions):
        """
        Builds a single service image, or re-tags a previously built identical image.

        :param service: The service to build.
        :param app_name: Application namespace for the destination tag.
        :param sink: Receives the command output.
        :param options: Cache and build argument settings.
        """
        tag = service.tag(app_name)
        signature = service.build.hash()

        cached = self.cache.get(signature)
        if cached:
            print(f"[{service.name}] Reusing {cached}", file=sink)
            self._run(sink, "tag", tag, docker_command("tag", cached, tag, binary=self.docker_binary))
            return

        context = self.context_path(service)
        dockerfile = self.dockerfile_path(service)
        print(f"[{service.name}] Building {tag} from {dockerfile}", file=sink)

        args = ["build"]
        if not options.cache:
            args.append("--no-cache")
        for name, value in self.build_args(dockerfile, options.environment, service.build.args).items():
            args.extend(["--build-arg", f"{name}={quote_value(value)}"])
        args.extend(["-f", dockerfile, "-t", tag, context])

        self._run(sink, "build", tag, docker_command(*args, binary=self.docker_binary))
        self.cache.record(signature, tag)

    def context_path(self, service: ServiceDefinition) -> str:
        """
        Effective build context: the working directory joined with the declared context.
        """
        return os.path.join(self.base_dir, service.build.context or ".")

    def dockerfile_path(self, service: ServiceDefinition) -> str:
        """
        Effective Dockerfile, relative to the build context. The build spec's
        dockerfile wins over the service-level one, which wins over the default.
        """
        dockerfile = service.build.dockerfile or service.dockerfile or DEFAULT_DOCKERFILE
        return os.path.join(self.context_path(service), dockerfile)

    def build_args(self,
                   dockerfile: str,
                   environment: Dict[str, str],
                   defaults: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """
        Values for the build arguments declared in a Dockerfile, in declaration
        order. The environment wins over the manifest's build args; names that
        are not declared are never passed.

        :raises BuildFileError: If the Dockerfile cannot be read.
        """
        values = dict(defaults or {})
        values.update(environment)
        return {name: values[name] for name in self.parser.parse(dockerfile) if name in values}

    def _run(self, sink: TextIO, operation: str, target: str, command: List[str]):
        try:
            self.runner.run(sink, command)
        except CommandError as e:
            raise BuildError(operation, target, e) from e
