"""Denormalization of JSON:API responses.

The API returns related resources in a side table (``included``) and only
``{"type", "id"}`` references on each primary resource. This module folds
the side table back into each primary resource so related data can be
read directly:

    asset["attachments"]["att1"]["filename"]
    asset["custom_field_values"]["color"]

Unresolvable references are skipped silently.
"""

import copy
import logging
from typing import Any, Callable, Optional

from .exceptions import BrandfolderError
from .utils import natural_sort_key

logger = logging.getLogger(__name__)

CUSTOM_FIELD_VALUES = "custom_field_values"
CUSTOM_FIELD_VALUES_BY_ID = "custom_field_values_by_id"
ATTACHMENTS = "attachments"

IncludedIndex = dict[str, dict[str, dict[str, Any]]]
CustomFieldResolver = Callable[[], dict[str, str]]


def build_included_index(included: list[dict[str, Any]]) -> IncludedIndex:
    """Group included resources by type and ID, keeping only attributes.

    Args:
        included: The ``included`` list of a response

    Returns:
        Mapping of type -> id -> attributes
    """
    index: IncludedIndex = {}
    for item in included:
        item_type = item.get("type")
        item_id = item.get("id")
        if item_type is None or item_id is None:
            continue
        index.setdefault(item_type, {})[str(item_id)] = item.get("attributes") or {}
    return index


def merge_included_index(target: IncludedIndex, source: IncludedIndex) -> None:
    """Merge one included index into another, in place."""
    for item_type, items in source.items():
        target.setdefault(item_type, {}).update(items)


def _add_value(values: dict[str, Any], key: str, value: Any) -> None:
    # Stored values are copies, never objects held by the included index.
    # A second value for the same key turns the slot into a list
    value = copy.deepcopy(value)
    if key in values:
        existing = values[key]
        if isinstance(existing, list):
            values[key] = list(existing) + [value]
        else:
            values[key] = [existing, value]
    else:
        values[key] = value


def _relationship_references(relationship: Any) -> list[dict[str, Any]]:
    if not isinstance(relationship, dict):
        return []
    data = relationship.get("data")
    if data is None:
        return []
    if isinstance(data, list):
        return [ref for ref in data if isinstance(ref, dict)]
    if isinstance(data, dict):
        return [data]
    return []


def process_relationships(
    entity: dict[str, Any],
    index: IncludedIndex,
    custom_field_ids: Optional[dict[str, str]] = None,
) -> None:
    """Attach included attributes to one primary resource, in place.

    Custom field values are gathered into ``custom_field_values`` (keyed by
    field name) and ``custom_field_values_by_id`` (keyed by custom field
    key ID, when ``custom_field_ids`` maps the name). Every other related
    resource is stored under a key named after its type, keyed by its ID.

    Args:
        entity: A resource from the response's ``data``
        index: Included index built by build_included_index()
        custom_field_ids: Mapping of custom field name -> custom field key ID
    """
    relationships = entity.get("relationships")
    if not relationships or not isinstance(relationships, dict):
        return

    for relationship in relationships.values():
        for ref in _relationship_references(relationship):
            ref_type = ref.get("type")
            ref_id = ref.get("id")
            if ref_type is None or ref_id is None:
                continue
            ref_id = str(ref_id)
            attributes = index.get(ref_type, {}).get(ref_id)
            if attributes is None:
                continue

            if ref_type == CUSTOM_FIELD_VALUES:
                key = attributes.get("key")
                if key is None:
                    continue
                value = attributes.get("value")
                _add_value(entity.setdefault(CUSTOM_FIELD_VALUES, {}), key, value)
                if custom_field_ids and key in custom_field_ids:
                    _add_value(
                        entity.setdefault(CUSTOM_FIELD_VALUES_BY_ID, {}),
                        custom_field_ids[key],
                        value,
                    )
            else:
                entity.setdefault(ref_type, {})[ref_id] = dict(attributes, id=ref_id)

    sort_attachments(entity)


def _attachment_sort_key(item: tuple[str, dict[str, Any]]) -> tuple[Any, ...]:
    attachment_id, attachment = item
    position = attachment.get("position")
    if position is None:
        return (1, [], natural_sort_key(attachment_id))
    return (0, natural_sort_key(position), natural_sort_key(attachment_id))


def sort_attachments(entity: dict[str, Any]) -> None:
    """Reorder an entity's attachments map by attachment position.

    Attachments without a position go last. Keys stay attachment IDs.
    """
    attachments = entity.get(ATTACHMENTS)
    if not attachments or not isinstance(attachments, dict):
        return
    entity[ATTACHMENTS] = dict(sorted(attachments.items(), key=_attachment_sort_key))


def is_normalized(page: dict[str, Any]) -> bool:
    """Check whether a page's included data has already been indexed."""
    return isinstance(page.get("included"), dict)


def normalize_page(
    page: dict[str, Any],
    custom_field_resolver: Optional[CustomFieldResolver] = None,
) -> dict[str, Any]:
    """Denormalize a response page in place.

    The ``included`` list is replaced by its index (type -> id ->
    attributes) and each resource in ``data`` gets its relationships
    resolved. Pages without included data, and pages that were already
    normalized, are returned unchanged.

    Args:
        page: Decoded response body
        custom_field_resolver: Called at most once, and only when the page
            includes custom field values, to map custom field names to IDs

    Returns:
        The same page object
    """
    included = page.get("included")
    if not included or not isinstance(included, list):
        return page

    index = build_included_index(included)
    page["included"] = index

    data = page.get("data")
    if not data:
        return page

    custom_field_ids: Optional[dict[str, str]] = None
    if custom_field_resolver is not None and index.get(CUSTOM_FIELD_VALUES):
        try:
            custom_field_ids = custom_field_resolver()
        except BrandfolderError as e:
            logger.warning(
                f"Could not look up custom field IDs, "
                f"values will only be keyed by name: {e}"
            )

    entities = data if isinstance(data, list) else [data]
    for entity in entities:
        if isinstance(entity, dict):
            process_relationships(entity, index, custom_field_ids)

    return page
