"""
Resource types.

Each kind declares its attribute schema, validators, upgrade chain, generator
and import parser.
"""

from __future__ import annotations

from .base import ResourceType
from .bytes import BytesResource
from .id import IdResource
from .integer import IntegerResource
from .ip import IPResource
from .password import PasswordResource
from .pet import PetResource
from .shuffle import ShuffleResource
from .string import StringResource
from .uuid import UUIDResource


RESOURCE_TYPES: dict[str, ResourceType] = {
    "string": StringResource(),
    "password": PasswordResource(),
    "integer": IntegerResource(),
    "uuid": UUIDResource(),
    "bytes": BytesResource(),
    "id": IdResource(),
    "pet": PetResource(),
    "ip": IPResource(),
    "shuffle": ShuffleResource(),
}


def get_resource_type(kind: str) -> ResourceType | None:
    """Get resource type by kind (case-insensitive, None-safe)."""
    return RESOURCE_TYPES.get((kind or "").strip().lower())


def list_resource_types() -> list[str]:
    """List all registered kinds."""
    return sorted(RESOURCE_TYPES.keys())
