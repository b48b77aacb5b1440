"""Result models returned by the Brandfolder client."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class LabelNode:
    """A label placed in the label hierarchy.

    ``label`` is the label resource exactly as returned by the API
    (``id``, ``type``, ``attributes``); ``children`` maps child label IDs
    to their nodes in sibling order.
    """

    label: dict[str, Any]
    children: dict[str, "LabelNode"] = field(default_factory=dict)

    @property
    def id(self) -> str:
        return str(self.label.get("id", ""))

    @property
    def name(self) -> Optional[str]:
        return (self.label.get("attributes") or {}).get("name")

    def walk(self, depth: int = 0) -> Iterator[tuple["LabelNode", int]]:
        """Iterate this node and its descendants depth-first.

        Yields:
            Tuples of (node, depth relative to this node)
        """
        yield self, depth
        for child in self.children.values():
            yield from child.walk(depth + 1)

    def to_dict(self) -> dict[str, Any]:
        """Convert to plain dicts; ``children`` is omitted on leaves."""
        result: dict[str, Any] = {"label": self.label}
        if self.children:
            result["children"] = {
                child_id: child.to_dict() for child_id, child in self.children.items()
            }
        return result


@dataclass
class CustomFieldUpdateResult:
    """Outcome of adding several custom field values to one asset.

    ``success`` is False if any field could not be resolved or written;
    the fields that could be written still are.
    """

    success: bool = True
    messages: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        return " ".join(self.messages)

    def add(self, message: str, ok: bool = True) -> None:
        self.messages.append(message)
        if not ok:
            self.success = False

    def __bool__(self) -> bool:
        return self.success
