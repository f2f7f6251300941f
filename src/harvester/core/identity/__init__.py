"""Entity identity: lightweight, generation-checked handles."""

from harvester.core.identity.models import EntityId

__all__ = [
    "EntityId",
]
