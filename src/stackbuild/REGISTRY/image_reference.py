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
Image reference normalization and pull aggregation.
"""

from typing import Dict, List, Tuple

DEFAULT_TAG = "latest"


def normalize_reference(reference: str) -> str:
    """
    Makes the implicit ``:latest`` tag of an image reference explicit.

    Only the last path segment is inspected, so a registry port
    (``localhost:5000/app``) is not mistaken for a tag.

    Examples:
        - nginx -> nginx:latest
        - nginx:1.21 -> nginx:1.21
        - localhost:5000/app -> localhost:5000/app:latest

    Args:
        reference: Image reference string.

    Returns:
        The reference with an explicit tag.
    """
    if not reference:
        raise ValueError("Empty image reference")

    last_segment = reference.split("/")[-1]
    if ":" not in last_segment:
        return f"{reference}:{DEFAULT_TAG}"
    return reference


class PullSet:
    """
    External images to pull, each with the destination tags that must point at it.

    Images and tags are kept in the order they were first added.
    """

    def __init__(self):
        self._tags: Dict[str, List[str]] = {}
        self._order: List[str] = []

    def add(self, reference: str, tag: str) -> str:
        """
        Records that ``tag`` must point at the image ``reference``.

        Args:
            reference: Image reference, normalized before use.
            tag: Destination tag.

        Returns:
            The normalized reference.
        """
        image = normalize_reference(reference)
        if image not in self._tags:
            self._tags[image] = []
            self._order.append(image)
        self._tags[image].append(tag)
        return image

    def tags(self, image: str) -> List[str]:
        """Destination tags recorded for a normalized image."""
        return list(self._tags.get(image, []))

    @property
    def images(self) -> List[str]:
        """Distinct normalized images, in first-seen order."""
        return list(self._order)

    def items(self) -> List[Tuple[str, List[str]]]:
        return [(image, list(self._tags[image])) for image in self._order]

    def __len__(self) -> int:
        return len(self._order)

    def __bool__(self) -> bool:
        return bool(self._order)

    def __repr__(self) -> str:
        return f"PullSet({self.items()!r})"
