"""
Process-level settings read from the environment.
"""
import os
from typing import Mapping, Optional
from pydantic import BaseModel


class BuildSettings(BaseModel):
    """
    Settings shared by every build run of the process.
    """
    docker_binary: str = "docker"
    manifest_file: str = "docker-compose.yml"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "BuildSettings":
        """
        Reads ``STACKBUILD_DOCKER`` and ``STACKBUILD_FILE``, falling back to the defaults.

        :param environ: Environment to read, ``os.environ`` if omitted.
        """
        environ = os.environ if environ is None else environ
        values = {}
        if environ.get("STACKBUILD_DOCKER"):
            values["docker_binary"] = environ["STACKBUILD_DOCKER"]
        if environ.get("STACKBUILD_FILE"):
            values["manifest_file"] = environ["STACKBUILD_FILE"]
        return cls(**values)
