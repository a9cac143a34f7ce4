"""
Models for defining services, their build specification and destination tags.
"""
import hashlib
import json
from typing import List, Dict, Optional
from pydantic import BaseModel, Field


class BuildSpec(BaseModel):
    """
    How a service image is built from a local context.

    ``args`` are manifest defaults for Dockerfile ARGs; values from the build
    environment take precedence over them.
    """
    context: Optional[str] = None
    dockerfile: Optional[str] = None
    args: Dict[str, str] = {}

    def hash(self) -> str:
        """
        Returns the build signature: a digest of every build input.
        Two services with the same signature produce the same image.
        """
        canonical = json.dumps(self.model_dump(), sort_keys=True)
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class ServiceDefinition(BaseModel):
    """
    A single service of the manifest, either built locally or pulled from a registry.
    """
    name: str
    image: str = ""
    build: BuildSpec = Field(default_factory=BuildSpec)
    dockerfile: Optional[str] = None

    depends_on: List[str] = []
    links: List[str] = []

    environment: Dict[str, str] = {}

    @property
    def is_external(self) -> bool:
        """
        True when the service uses an external image. The image reference
        takes precedence over any build specification.
        """
        return bool(self.image)

    @property
    def dependencies(self) -> List[str]:
        """
        Names of the services this one must come after, in declaration order.
        Links may carry an alias (``db:database``); only the name counts.
        """
        names = []
        for dep in self.depends_on + [link.split(":", 1)[0] for link in self.links]:
            if dep not in names:
                names.append(dep)
        return names

    def tag(self, app_name: str) -> str:
        """
        Destination tag of this service's image within an application.

        :param app_name: Application namespace.
        :return: The tag, e.g. ``myapp/web``.
        """
        return f"{app_name}/{self.name}".lower().replace("_", "-")
