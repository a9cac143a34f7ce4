"""
Options controlling a single build run.
"""
from typing import Dict, Optional
from pydantic import BaseModel


class BuildOptions(BaseModel):
    """
    Options for one build run.

    ``cache=False`` forces ``--no-cache`` builds and pulls every external
    image even when a local copy exists.
    """
    cache: bool = True
    environment: Dict[str, str] = {}
    service: Optional[str] = None
