"""
Pulling external images and tagging them for the services that use them.
"""
from typing import List, TextIO
from ..RUNNERS.command_runner import CommandRunner, docker_command, DEFAULT_DOCKER_BINARY
from ..exceptions import BuildError, CommandError, InspectionError
from .image_reference import PullSet


class PullOrchestrator:
    """
    Ensures each distinct external image is present locally exactly once,
    then points every consuming service's tag at it.
    """

    def __init__(self, runner: CommandRunner, docker_binary: str = DEFAULT_DOCKER_BINARY):
        """
        Args:
            runner: Executes the docker commands.
            docker_binary: The docker executable to call.
        """
        self.runner = runner
        self.docker_binary = docker_binary

    def pull_all(self, pulls: PullSet, sink: TextIO, cache: bool = True):
        """
        Pulls and tags every image of a PullSet, in first-seen order.

        Args:
            pulls: Images and their destination tags.
            sink: Receives the command output.
            cache: When False every image is pulled, even if present locally.

        Raises:
            InspectionError: If the local image check fails.
            BuildError: If a pull or tag command fails.
        """
        for image, tags in pulls.items():
            self.pull(image, tags, sink, cache)

    def pull(self, image: str, tags: List[str], sink: TextIO, cache: bool = True):
        """
        Pulls one image when needed, then applies each tag in order.
        """
        present = self.exists_locally(image)
        if not cache or not present:
            print(f"Pulling {image}", file=sink)
            self._run(sink, "pull", image, docker_command("pull", image, binary=self.docker_binary))
        else:
            print(f"Using local {image}", file=sink)

        for tag in tags:
            self._run(sink, "tag", tag, docker_command("tag", image, tag, binary=self.docker_binary))

    def exists_locally(self, image: str) -> bool:
        """
        Checks for a local copy of an image without modifying anything.

        Raises:
            InspectionError: If the check itself fails.
        """
        try:
            output = self.runner.combined_output(
                docker_command("images", "-q", image, binary=self.docker_binary))
        except CommandError as e:
            raise InspectionError(image, e) from e
        return bool(output.strip())

    def _run(self, sink: TextIO, operation: str, target: str, command: List[str]):
        try:
            self.runner.run(sink, command)
        except CommandError as e:
            raise BuildError(operation, target, e) from e
