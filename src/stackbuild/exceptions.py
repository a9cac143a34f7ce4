"""
Errors raised while resolving, building, pulling and tagging service images.

Any of these aborts the whole multi-service run.
"""
from typing import List, Optional


class StackBuildError(Exception):
    """
    Base class for every error raised by stackbuild.
    """


class ManifestError(StackBuildError):
    """
    The manifest file is missing or cannot be turned into services.
    """


class ResolutionError(StackBuildError):
    """
    A service name could not be resolved, or the dependency graph has a cycle.
    """


class BuildFileError(StackBuildError, OSError):
    """
    A Dockerfile could not be read.
    """
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot read build file {path}: {reason}")

    def __str__(self) -> str:
        return f"cannot read build file {self.path}: {self.reason}"


class CommandError(StackBuildError):
    """
    An external command exited with a non-zero status or could not be started.
    """
    def __init__(self, args: List[str], returncode: Optional[int], output: str = ""):
        self.command = list(args)
        self.returncode = returncode
        self.output = output
        if returncode is None:
            message = f"{' '.join(self.command)}: could not be started"
        else:
            message = f"{' '.join(self.command)}: exit status {returncode}"
        super().__init__(message)


class BuildError(StackBuildError):
    """
    A build, pull or tag invocation failed.

    :param operation: The failing operation (``build``, ``pull`` or ``tag``).
    :param target: The service tag or image the operation was working on.
    :param cause: The underlying error.
    """
    def __init__(self, operation: str, target: str, cause: Exception):
        self.operation = operation
        self.target = target
        self.cause = cause
        super().__init__(f"build error: {operation} {target}: {cause}")


class InspectionError(StackBuildError):
    """
    Checking whether an image is already present locally failed.
    """
    def __init__(self, target: str, cause: Exception):
        self.operation = "inspect"
        self.target = target
        self.cause = cause
        super().__init__(f"inspection error: {target}: {cause}")
