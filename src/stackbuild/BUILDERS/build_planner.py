"""
Classification of services into images to build and images to pull.
"""
from dataclasses import dataclass, field
from typing import List
from ..MODELS.service_definition import ServiceDefinition
from ..REGISTRY.image_reference import PullSet


@dataclass
class BuildPlan:
    """
    The work of a build run: services built locally, in order,
    and external images to pull and tag.
    """
    builds: List[ServiceDefinition] = field(default_factory=list)
    pulls: PullSet = field(default_factory=PullSet)


class BuildPlanner:
    """
    Splits resolved services into a BuildPlan. Has no external effects.
    """
    def plan(self, services: List[ServiceDefinition], app_name: str) -> BuildPlan:
        """
        Classifies each service. An external image takes precedence over a build spec.

        :param services: Services in resolved order.
        :param app_name: Application namespace used for destination tags.
        :return: The build plan.
        """
        plan = BuildPlan()
        for service in services:
            if service.is_external:
                plan.pulls.add(service.image, service.tag(app_name))
            else:
                plan.builds.append(service)
        return plan
