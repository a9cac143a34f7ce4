# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Parsers for docker-compose style manifest files.
"""
import yaml
from typing import Dict, Any, List
from pydantic import ValidationError
from ..MODELS.manifest import Manifest
from ..MODELS.service_definition import ServiceDefinition, BuildSpec
from ..exceptions import ManifestError

class ManifestParser:
    """
    Parser for docker-compose.yml manifests.

    Version 2+ files declare services under ``services:``; version 1 files
    are a plain mapping of service names to definitions.
    """
    def parse(self, manifest_path: str) -> Manifest:
        """
        Parses a manifest from a path.

        :param manifest_path: Path to the manifest file.
        :return: Parsed manifest.
        :raises ManifestError: If the file is missing or malformed.
        """
        try:
            with open(manifest_path, 'r') as f:
                content = f.read()
        except OSError as e:
            raise ManifestError(f"cannot read manifest {manifest_path}: {e.strerror or e}") from e
        return self.parse_from_string(content)

    def parse_from_string(self, content: str) -> Manifest:
        """
        Parses a manifest from a string.

        :param content: YAML content of the manifest.
        :return: Parsed manifest.
        :raises ManifestError: If the content is not a valid manifest.
        """
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ManifestError(f"invalid manifest: {e}") from e
        if not data:
            data = {}
        if not isinstance(data, dict):
            raise ManifestError("invalid manifest: top level must be a mapping")

        if 'services' in data or 'version' in data:
            specs = data.get('services') or {}
        else:
            specs = data
        if not isinstance(specs, dict):
            raise ManifestError("invalid manifest: services must be a mapping")

        services = {}
        for name, spec in specs.items():
            services[str(name)] = self._parse_service(str(name), spec)

        return Manifest(services=services)

    def _parse_service(self, name: str, spec: Any) -> ServiceDefinition:
        """
        Parses a single service definition from a manifest.

        :param name: The name of the service.
        :param spec: The service specification dictionary.
        :return: A ServiceDefinition instance.
        """
        if spec is None:
            spec = {}
        if not isinstance(spec, dict):
            raise ManifestError(f"invalid manifest: service {name} must be a mapping")

        depends_on = spec.get('depends_on', [])
        if isinstance(depends_on, dict):
            depends_on = list(depends_on.keys())

        build = spec.get('build')
        try:
            if isinstance(build, dict):
                build_spec = BuildSpec(
                    context=build.get('context'),
                    dockerfile=build.get('dockerfile'),
                    args=self._to_dict(build.get('args'))
                )
            else:
                build_spec = BuildSpec(context=build)

            return ServiceDefinition(
                name=name,
                image=spec.get('image') or '',
                build=build_spec,
                dockerfile=spec.get('dockerfile'),
                depends_on=self._to_list(depends_on),
                links=self._to_list(spec.get('links')),
                environment=self._to_dict(spec.get('environment'))
            )
        except ValidationError as e:
            raise ManifestError(f"invalid service {name}: {e}") from e

    def _to_dict(self, val: Any) -> Dict[str, str]:
        """
        Helper for the two compose forms of key/value settings:
        a mapping, or a list of ``KEY=VALUE`` strings.

        :param val: The value to convert.
        :return: A dictionary of strings.
        """
        if not val:
            return {}
        if isinstance(val, dict):
            return {str(k): '' if v is None else str(v) for k, v in val.items()}
        result = {}
        for item in self._to_list(val):
            key, _, value = item.partition('=')
            result[key] = value
        return result

    def _to_list(self, val: Any) -> List[str]:
        """
        Helper to ensure a value is a list of strings.

        :param val: The value to convert.
        :return: A list of strings.
        """
        if val is None:
            return []
        if isinstance(val, str):
            return [val]
        if isinstance(val, (list, tuple, dict)):
            return [str(v) for v in val]
        raise ManifestError(f"invalid manifest: expected a list, got {val!r}")
