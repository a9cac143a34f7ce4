"""
Dependency resolution for services to determine build order.
"""
import heapq
from typing import List, Dict, Optional, Set
from ..MODELS.service_definition import ServiceDefinition
from ..exceptions import ResolutionError

class DependencyResolver:
    """
    Resolves the order in which services are processed based on their dependencies.
    """
    def resolve_order(self,
                      services: Dict[str, ServiceDefinition],
                      service: Optional[str] = None) -> List[str]:
        """
        Determines the processing order using a topological sort. Whenever
        several services are ready, the one declared first goes next, so
        identical input always yields the same order.

        :param services: Services by name, in declaration order.
        :param service: If given, only this service and its transitive dependencies are returned.
        :return: Service names, each one after all of its dependencies.
        :raises ResolutionError: If a name is unknown or a circular dependency is detected.
        """
        if service and service not in services:
            raise ResolutionError(f"no such service: {service}")

        selected = self._closure(services, [service] if service else list(services))
        position = {name: index for index, name in enumerate(services)}

        # Number of unresolved dependencies per service, and the reverse edges.
        pending = {name: len(services[name].dependencies) for name in selected}
        dependents: Dict[str, List[str]] = {name: [] for name in selected}
        for name in selected:
            for dep in services[name].dependencies:
                dependents[dep].append(name)

        ready = [position[name] for name in selected if pending[name] == 0]
        heapq.heapify(ready)
        names = list(services)
        ordered = []
        while ready:
            name = names[heapq.heappop(ready)]
            ordered.append(name)
            for dependent in dependents[name]:
                pending[dependent] -= 1
                if pending[dependent] == 0:
                    heapq.heappush(ready, position[dependent])

        if len(ordered) < len(selected):
            cycle = self._find_cycle(services, {name for name in selected if pending[name] > 0})
            raise ResolutionError(f"circular dependency detected: {' -> '.join(cycle)}")

        return ordered

    def _closure(self, services: Dict[str, ServiceDefinition], roots: List[str]) -> Set[str]:
        """
        The roots plus every service they transitively depend on.

        :raises ResolutionError: If a dependency names an undeclared service.
        """
        selected = set(roots)
        stack = list(roots)
        while stack:
            name = stack.pop()
            for dep in services[name].dependencies:
                if dep not in services:
                    raise ResolutionError(f"service {name} depends on unknown service {dep}")
                if dep not in selected:
                    selected.add(dep)
                    stack.append(dep)
        return selected

    def _find_cycle(self, services: Dict[str, ServiceDefinition], blocked: Set[str]) -> List[str]:
        """
        Walks unresolved dependencies from the first blocked service until a
        name repeats. Every blocked service has a blocked dependency, so the
        walk always closes a cycle.
        """
        name = next(name for name in services if name in blocked)
        path: List[str] = []
        while name not in path:
            path.append(name)
            name = next(dep for dep in services[name].dependencies if dep in blocked)
        return path[path.index(name):] + [name]
