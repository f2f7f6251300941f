"""Entity identity models.

Usage:
    entity = EntityId(index=42, generation=1)
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class EntityId:
    """Lightweight entity identifier with generation for safe handle reuse.

    Pooled bodies are recycled, so a body that is released and acquired again
    receives a new generation. Anything keyed on the old handle (claims,
    delivery subscriptions) goes stale instead of following the body.
    """

    index: int = 0
    generation: int = 0

    def __hash__(self) -> int:
        return hash((self.index, self.generation))

    def __str__(self) -> str:
        return f"{self.index}v{self.generation}"
