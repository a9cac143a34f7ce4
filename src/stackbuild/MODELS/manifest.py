"""
Models for the overall application manifest.
"""
from typing import Dict, List, Optional
from pydantic import BaseModel
from .service_definition import ServiceDefinition
from ..RUNNERS.dependency_resolver import DependencyResolver


class Manifest(BaseModel):
    """
    Every service of an application, in declaration order.
    Equivalent to a parsed docker-compose.yml file.
    """
    services: Dict[str, ServiceDefinition] = {}

    def run_order(self, service: Optional[str] = None) -> List[ServiceDefinition]:
        """
        Services ordered so that each one follows all of its dependencies.

        :param service: Restrict the result to this service and its transitive dependencies.
        :return: The ordered services.
        :raises ResolutionError: On an unknown service name or a dependency cycle.
        """
        names = DependencyResolver().resolve_order(self.services, service)
        return [self.services[name] for name in names]
