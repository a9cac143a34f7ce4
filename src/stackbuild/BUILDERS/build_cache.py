"""
In-memory record of images already built during a run.
"""
from typing import Dict, List, Optional


class BuildCache:
    """
    Maps build signatures to the tag first produced for them.

    A cache lives for a single build run and is never persisted.
    """
    def __init__(self):
        self._tags: Dict[str, str] = {}
        self._order: List[str] = []

    def get(self, signature: str) -> Optional[str]:
        """
        Returns the tag already built for a signature, or None.
        """
        return self._tags.get(signature)

    def record(self, signature: str, tag: str):
        """
        Records the tag produced for a signature. The first tag recorded wins.
        """
        if signature in self._tags:
            return
        self._tags[signature] = tag
        self._order.append(signature)

    def __contains__(self, signature: str) -> bool:
        return signature in self._tags

    def __len__(self) -> int:
        return len(self._order)
