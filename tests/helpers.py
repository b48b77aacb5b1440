"""Helpers for building JSON:API documents in tests."""

import json
from typing import Any, Optional

import httpx


def json_body(request: httpx.Request) -> Optional[Any]:
    """Decode the JSON body of a recorded request, or None if empty."""
    if not request.content:
        return None
    return json.loads(request.content)


def resource(
    resource_type: str,
    resource_id: str,
    attributes: Optional[dict[str, Any]] = None,
    relationships: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    """Build a JSON:API resource."""
    item: dict[str, Any] = {
        "id": resource_id,
        "type": resource_type,
        "attributes": attributes or {},
    }
    if relationships is not None:
        item["relationships"] = relationships
    return item


def ref(resource_type: str, resource_id: str) -> dict[str, str]:
    """Build a resource reference."""
    return {"type": resource_type, "id": resource_id}
