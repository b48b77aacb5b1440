"""Label hierarchy reconstruction.

Labels are listed by the API as a flat sequence. Each label carries its
``depth`` (0 for top-level labels), its ``position`` among its siblings,
and its ``path``: the IDs of its ancestors from the top down, ending with
the label's own ID.
"""

import logging
from collections.abc import Iterable
from typing import Any

from .models import LabelNode
from .utils import natural_sort_key

logger = logging.getLogger(__name__)


def _attributes(label: dict[str, Any]) -> dict[str, Any]:
    return label.get("attributes") or {}


def _depth(label: dict[str, Any]) -> int:
    try:
        return int(_attributes(label).get("depth") or 0)
    except (TypeError, ValueError):
        return 0


def _sibling_sort_key(label: dict[str, Any]) -> list[Any]:
    position = _attributes(label).get("position")
    return natural_sort_key(f"{position}_{label.get('id')}")


def build_label_tree(labels: Iterable[dict[str, Any]]) -> dict[str, LabelNode]:
    """Build the nested label hierarchy from a flat label list.

    Labels are placed one depth tier at a time, so every ancestor is in the
    tree before its descendants. Within a tier labels are ordered by
    position, then ID. If an ancestor named in a label's path is not in
    the tree, the label is attached to the deepest ancestor that is.

    Args:
        labels: Label resources, e.g. the ``data`` of an aggregated listing

    Returns:
        Top-level label nodes keyed by label ID, in sibling order
    """
    tiers: dict[int, list[dict[str, Any]]] = {}
    for label in labels:
        tiers.setdefault(_depth(label), []).append(label)

    root = LabelNode(label={})
    for depth in sorted(tiers):
        for label in sorted(tiers[depth], key=_sibling_sort_key):
            lineage = list(_attributes(label).get("path") or [])[:-1]
            parent = root
            for ancestor_id in lineage:
                child = parent.children.get(str(ancestor_id))
                if child is None:
                    logger.debug(
                        f"Ancestor {ancestor_id} of label {label.get('id')} "
                        f"not found, attaching to nearest placed ancestor"
                    )
                    break
                parent = child
            parent.children[str(label.get("id"))] = LabelNode(label=label)

    return root.children


def label_names(labels: Iterable[dict[str, Any]]) -> dict[str, str]:
    """Map label IDs to label names, in listing order."""
    return {
        str(label.get("id")): _attributes(label).get("name", "") for label in labels
    }


def flatten_label_tree(tree: dict[str, LabelNode]) -> list[tuple[LabelNode, int]]:
    """List every node of a label tree depth-first with its depth."""
    flattened: list[tuple[LabelNode, int]] = []
    for node in tree.values():
        flattened.extend(node.walk())
    return flattened
