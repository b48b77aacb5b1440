"""API client for Brandfolder."""

from __future__ import annotations

import json
import logging
from typing import Any, Literal

import httpx

from .config import config
from .exceptions import (
    BrandfolderAPIError,
    BrandfolderAuthenticationError,
    BrandfolderConfigError,
    BrandfolderError,
    BrandfolderInvalidResponseError,
    BrandfolderNetworkError,
    BrandfolderNotFoundError,
    BrandfolderPermissionError,
    BrandfolderRateLimitError,
    BrandfolderValidationError,
)
from .labels import build_label_tree, label_names
from .models import CustomFieldUpdateResult, LabelNode
from .normalizer import (
    CustomFieldResolver,
    IncludedIndex,
    merge_included_index,
    normalize_page,
)
from .utils import DEFAULT_TIMEOUT, format_datetime, redact

logger = logging.getLogger(__name__)

HttpMethod = Literal["GET", "POST", "PUT", "DELETE"]

PRIVACY_VALUES = ("private", "public")
SECTION_ASSET_TYPES = (
    "GenericFile",
    "Color",
    "Font",
    "ExternalMedium",
    "Person",
    "Press",
    "Text",
)
ATTACHMENT_CONTEXTS = {
    "organization": "organizations",
    "brandfolder": "brandfolders",
    "collection": "collections",
    "section": "sections",
    "asset": "assets",
}
INVITATION_ENTITIES = {
    "organization": "organizations",
    "brandfolder": "brandfolders",
    "collection": "collections",
    "portal": "portals",
    "brandguide": "brandguides",
}
PERMISSION_LEVELS = ("guest", "collaborator", "admin", "owner")
COLLECTION_ATTRIBUTES = ("name", "tagline", "slug")
CUSTOM_FIELD_KEY_ATTRIBUTES = ("name", "allowed_values")


def _names_by_id(page: dict[str, Any]) -> dict[str, str]:
    return {
        str(item.get("id")): (item.get("attributes") or {}).get("name", "")
        for item in page.get("data") or []
    }


def _wants_single_page(query_params: dict[str, Any] | None) -> bool:
    return bool(query_params) and ("page" in query_params or "per" in query_params)


class BrandfolderClient:
    """Client for interacting with the Brandfolder API.

    Read operations return the decoded JSON:API document as a dict, with
    included resources folded into each primary resource (see
    :mod:`pybrandfolder.normalizer`). Every failure is raised as a
    :class:`~pybrandfolder.exceptions.BrandfolderError`; nothing is
    retried.
    """

    def __init__(
        self,
        api_key: str | None = None,
        brandfolder_id: str | None = None,
        collection_id: str | None = None,
        api_url: str | None = None,
        http_client: httpx.Client | None = None,
        per_page: int | None = None,
        request_limit: int | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """Initialize Brandfolder API client.

        Args:
            api_key: Optional API key (uses config if not provided)
            brandfolder_id: Brandfolder used when a call does not name one
                (uses config if not provided)
            collection_id: Collection used when a call does not name one
            api_url: Optional API URL (uses config if not provided)
            http_client: Optional preconfigured httpx client
            per_page: Items per page when aggregating (default: 100)
            request_limit: Maximum requests per aggregation (default: 100)
            timeout: Request timeout in seconds (default: 30.0)
        """
        self.api_key = api_key or config.api_key
        self.api_url = (api_url or config.api_url).rstrip("/")
        self.default_brandfolder_id = brandfolder_id or config.get_default_brandfolder()
        self.default_collection_id = collection_id or config.get_default_collection()
        self.per_page = per_page or config.per_page
        self.request_limit = request_limit or config.request_limit
        self.timeout = timeout

        if not self.api_key:
            raise BrandfolderConfigError(
                "API key not configured. "
                "Please set BRANDFOLDER_API_KEY environment variable."
            )

        self._client: httpx.Client | None = http_client
        self._owns_client = http_client is None
        self._verbose_logging = False
        self._log_data: list[str] = []

    def _get_client(self) -> httpx.Client:
        """Get or create the httpx client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
            )
            self._owns_client = True
        return self._client

    def close(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._owns_client and self._client is not None and not self._client.is_closed:
            self._client.close()
            self._client = None

    def __enter__(self) -> BrandfolderClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    def _require_brandfolder(self, brandfolder_id: str | None) -> str:
        brandfolder_id = brandfolder_id or self.default_brandfolder_id
        if not brandfolder_id:
            raise BrandfolderConfigError(
                "A Brandfolder ID must be provided or a default Brandfolder must be set."
            )
        return brandfolder_id

    def _require_collection(self, collection_id: str | None) -> str:
        collection_id = collection_id or self.default_collection_id
        if not collection_id:
            raise BrandfolderConfigError(
                "A Collection ID must be provided or a default Collection must be set."
            )
        return collection_id

    # =========================
    # Verbose Logging
    # =========================

    def enable_verbose_logging(self) -> None:
        """Record a log entry for every request made by this client."""
        self._verbose_logging = True

    def disable_verbose_logging(self) -> None:
        self._verbose_logging = False

    def verbose_logging_is_enabled(self) -> bool:
        return self._verbose_logging

    def _log(self, entry: str) -> None:
        entry = redact(entry, self.api_key)
        self._log_data.append(entry)
        logger.debug(entry)

    def get_log_data(self) -> list[str]:
        """Get recorded log entries, with the API key redacted."""
        self._log_data = [entry for entry in self._log_data if entry]
        return list(self._log_data)

    def clear_log_data(self) -> None:
        self._log_data = []

    # =========================
    # Requests
    # =========================

    def _error_for_response(self, response: httpx.Response) -> BrandfolderAPIError:
        """Build the exception matching a non-2xx response."""
        status_code = response.status_code
        reason = response.reason_phrase

        if status_code == 401:
            return BrandfolderAuthenticationError(
                "Invalid API key or unauthorized access", status_code, reason
            )
        if status_code == 403:
            return BrandfolderPermissionError(
                "Access forbidden - check your permissions", status_code, reason
            )
        if status_code == 404:
            return BrandfolderNotFoundError("Resource not found", status_code, reason)
        if status_code == 429:
            return BrandfolderRateLimitError(
                "Rate limit exceeded - please try again later", status_code, reason
            )

        error_msg = f"API request failed with status {status_code}"
        if reason:
            error_msg = f"{error_msg} ({reason})"

        # Brandfolder reports errors as {"errors": [{"title": ..., "detail": ...}]}
        try:
            if response.content:
                error_data = response.json()
                if isinstance(error_data, dict):
                    errors = error_data.get("errors")
                    detail = None
                    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
                        detail = errors[0].get("detail") or errors[0].get("title")
                    detail = detail or error_data.get("message") or error_data.get("error")
                    if detail:
                        error_msg = f"{error_msg}: {detail}"
        except ValueError:
            pass

        return BrandfolderAPIError(error_msg, status_code, reason)

    def request(
        self,
        method: HttpMethod,
        path: str,
        query_params: dict[str, Any] | None = None,
        body: Any = None,
    ) -> dict[str, Any]:
        """Make a single API request.

        Args:
            method: HTTP method
            path: Endpoint path relative to the API URL (e.g. "/assets/123")
            query_params: Query string parameters (sent only if non-empty)
            body: JSON body (sent whenever it is not None, even if empty)

        Returns:
            Decoded response body; an empty dict if the body is empty

        Raises:
            BrandfolderNetworkError: If the request could not be completed
            BrandfolderAPIError: If the API answers with a non-2xx status
            BrandfolderInvalidResponseError: If the body is not valid JSON
        """
        url = f"{self.api_url}/{path.lstrip('/')}"
        options: dict[str, Any] = {"headers": self._headers()}
        if query_params:
            options["params"] = query_params
        if body is not None:
            options["json"] = body

        options_string = ""
        if self._verbose_logging:
            options_string = json.dumps(options, default=str)

        try:
            response = self._get_client().request(method, url, **options)
        except httpx.RequestError as e:
            if self._verbose_logging:
                self._log(
                    f"Exception occurred during Brandfolder request. Method: {method}. "
                    f"Requested URL: {url}. Options: {options_string}. "
                    f"Exception: {type(e).__name__}. Exception message: {e}."
                )
            raise BrandfolderNetworkError(f"Network error: {e}") from e

        status_code = response.status_code
        if self._verbose_logging:
            self._log(
                f"Brandfolder request. Method: {method}. Requested URL: {url}. "
                f"Options: {options_string}. Response code: {status_code}."
            )

        if not 200 <= status_code < 300:
            raise self._error_for_response(response)

        if not response.content:
            return {}

        try:
            result = response.json()
        except ValueError as e:
            if self._verbose_logging:
                self._log(
                    f"Brandfolder request. Could not JSON-decode response body. "
                    f"Method: {method}. Requested URL: {url}. "
                    f"Options: {options_string}. Response code: {status_code}."
                )
            raise BrandfolderInvalidResponseError(
                "Invalid JSON response from server", status_code
            ) from e

        if not isinstance(result, dict):
            raise BrandfolderInvalidResponseError(
                f"Unexpected response document: {type(result).__name__}", status_code
            )
        return result

    def _normalize(
        self,
        page: dict[str, Any],
        custom_field_resolver: CustomFieldResolver | None = None,
    ) -> dict[str, Any]:
        return normalize_page(
            page, custom_field_resolver or self._custom_field_ids_by_name
        )

    def _cached_custom_field_resolver(self) -> CustomFieldResolver:
        """Build a resolver that looks up custom field IDs only once."""
        cache: dict[str, dict[str, str]] = {}

        def resolve() -> dict[str, str]:
            if "ids" not in cache:
                cache["ids"] = self._custom_field_ids_by_name()
            return cache["ids"]

        return resolve

    def _get(self, path: str, query_params: dict[str, Any] | None = None) -> Any:
        """GET a single page and denormalize it."""
        return self._normalize(self.request("GET", path, query_params))

    def get_all(
        self, path: str, query_params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """GET every page of a list endpoint and merge them.

        Each page is denormalized as it arrives. Pages are requested in
        order, following ``meta.next_page``, until it is absent or the
        client's request limit is reached. In the latter case the result
        carries ``meta.truncated = True``.

        Use with caution on endpoints with many results.

        Args:
            path: Endpoint path
            query_params: Query parameters; ``per`` defaults to the client's
                page size and ``page`` is always started at 1

        Returns:
            Dict with a ``data`` list and, if any page had included
            resources, an ``included`` index (type -> id -> attributes)

        Raises:
            BrandfolderError: If any page fails; no partial result is returned
        """
        params = dict(query_params or {})
        params.setdefault("per", self.per_page)
        params["page"] = 1

        data: list[Any] = []
        included: IncludedIndex = {}
        request_count = 0
        truncated = False
        custom_field_resolver = self._cached_custom_field_resolver()

        while True:
            page = self.request("GET", path, dict(params))
            request_count += 1

            page_data = page.get("data")
            if not isinstance(page_data, list):
                raise BrandfolderInvalidResponseError(
                    f"Expected a list of resources from {path}"
                )

            self._normalize(page, custom_field_resolver)
            if isinstance(page.get("included"), dict):
                merge_included_index(included, page["included"])
            data.extend(page_data)

            next_page = (page.get("meta") or {}).get("next_page")
            if not next_page:
                break
            if request_count >= self.request_limit:
                logger.warning(
                    f"Stopped paging {path} after {request_count} requests; "
                    f"results are truncated"
                )
                truncated = True
                break
            params["page"] = next_page

        logger.debug(f"Fetched {len(data)} items from {path} in {request_count} requests")

        result: dict[str, Any] = {"data": data}
        if included:
            result["included"] = included
        if truncated:
            result["meta"] = {"truncated": True}
        return result

    # =========================
    # Organizations
    # =========================

    def list_organizations(
        self, query_params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """List all organizations the current user belongs to.

        Example:
            >>> orgs = client.list_organizations({"include": "brandfolders"})
            >>> for org in orgs["data"]:
            ...     for bf_id, bf in org.get("brandfolders", {}).items():
            ...         print(bf["name"], bf_id)
        """
        return self.get_all("/organizations", query_params)

    def fetch_organization(
        self, organization_id: str, query_params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return self._get(f"/organizations/{organization_id}", query_params)

    # =========================
    # Brandfolders
    # =========================

    def list_brandfolders(
        self, query_params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """List one page of brandfolders accessible to the current user."""
        return self._get("/brandfolders", query_params)

    def list_all_brandfolder_names(self) -> dict[str, str]:
        """Get the names of all accessible brandfolders, keyed by ID."""
        return _names_by_id(self.get_all("/brandfolders"))

    def get_brandfolders(
        self,
        query_params: dict[str, Any] | None = None,
        simple_format: bool = True,
    ) -> dict[str, Any]:
        """Get all accessible brandfolders.

        Args:
            query_params: Query parameters
            simple_format: If True, return names keyed by ID instead of the
                aggregated document

        Returns:
            Brandfolder names by ID, or the aggregated document
        """
        result = self.get_all("/brandfolders", query_params)
        if simple_format:
            return _names_by_id(result)
        return result

    def fetch_brandfolder(
        self, brandfolder_id: str, query_params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return self._get(f"/brandfolders/{brandfolder_id}", query_params)

    def create_brandfolder_in_organization(
        self,
        organization_id: str,
        name: str,
        tagline: str | None = None,
        privacy: str | None = "private",
        slug: str | None = None,
    ) -> dict[str, Any]:
        """Create a brandfolder in an organization.

        Args:
            organization_id: ID of the organization
            name: Brandfolder name
            tagline: Optional tagline
            privacy: "private" (default) or "public"
            slug: Optional URL slug

        Raises:
            BrandfolderValidationError: If privacy is not an allowed value
        """
        attributes: dict[str, Any] = {"name": name}
        if tagline is not None:
            attributes["tagline"] = tagline
        if slug is not None:
            attributes["slug"] = slug
        if privacy is not None:
            if privacy not in PRIVACY_VALUES:
                raise BrandfolderValidationError(
                    'Invalid privacy value. Valid options are "private" and "public".'
                )
            attributes["privacy"] = privacy

        return self.request(
            "POST",
            f"/organizations/{organization_id}/brandfolders",
            body={"data": {"attributes": attributes}},
        )

    # =========================
    # Collections
    # =========================

    def list_collections_for_user(
        self, query_params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return self.get_all("/collections", query_params)

    def list_collections_in_brandfolder(
        self,
        brandfolder_id: str | None = None,
        query_params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        brandfolder_id = self._require_brandfolder(brandfolder_id)
        return self._get(f"/brandfolders/{brandfolder_id}/collections", query_params)

    def list_all_collection_names_in_brandfolder(
        self, brandfolder_id: str | None = None
    ) -> dict[str, str]:
        brandfolder_id = self._require_brandfolder(brandfolder_id)
        return _names_by_id(self.get_all(f"/brandfolders/{brandfolder_id}/collections"))

    def create_collection_in_brandfolder(
        self,
        name: str,
        brandfolder_id: str | None = None,
        tagline: str | None = None,
        slug: str | None = None,
    ) -> dict[str, Any]:
        brandfolder_id = self._require_brandfolder(brandfolder_id)
        attributes: dict[str, Any] = {"name": name}
        if tagline is not None:
            attributes["tagline"] = tagline
        if slug is not None:
            attributes["slug"] = slug
        return self.request(
            "POST",
            f"/brandfolders/{brandfolder_id}/collections",
            body={"data": {"attributes": attributes}},
        )

    def fetch_collection(
        self, collection_id: str, query_params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return self._get(f"/collections/{collection_id}", query_params)

    def update_collection(
        self, collection_id: str, attributes: dict[str, Any]
    ) -> dict[str, Any]:
        """Update a collection.

        Args:
            collection_id: ID of the collection
            attributes: New values; only name, tagline and slug are sent

        Raises:
            BrandfolderValidationError: If no valid attribute was given
        """
        attributes = {k: v for k, v in attributes.items() if k in COLLECTION_ATTRIBUTES}
        if not attributes:
            raise BrandfolderValidationError(
                "No valid attributes provided for updating the Collection."
            )
        return self.request(
            "PUT",
            f"/collections/{collection_id}",
            body={"data": {"attributes": attributes}},
        )

    def delete_collection(self, collection_id: str) -> bool:
        self.request("DELETE", f"/collections/{collection_id}")
        return True

    # =========================
    # Sections
    # =========================

    def list_sections_in_brandfolder(
        self,
        brandfolder_id: str | None = None,
        query_params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        brandfolder_id = self._require_brandfolder(brandfolder_id)
        return self._get(f"/brandfolders/{brandfolder_id}/sections", query_params)

    def list_all_sections_in_brandfolder(
        self, brandfolder_id: str | None = None
    ) -> dict[str, Any]:
        brandfolder_id = self._require_brandfolder(brandfolder_id)
        return self.get_all(f"/brandfolders/{brandfolder_id}/sections")

    def list_all_section_names_in_brandfolder(
        self, brandfolder_id: str | None = None
    ) -> dict[str, str]:
        return _names_by_id(self.list_all_sections_in_brandfolder(brandfolder_id))

    def fetch_section(
        self, section_id: str, query_params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return self._get(f"/sections/{section_id}", query_params)

    def create_section_in_brandfolder(
        self,
        name: str,
        default_asset_type: str | None = "GenericFile",
        brandfolder_id: str | None = None,
        position: int | None = None,
    ) -> dict[str, Any]:
        """Create a section in a brandfolder.

        Args:
            name: Section name
            default_asset_type: One of GenericFile, Color, Font,
                ExternalMedium, Person, Press, Text (default: GenericFile)
            brandfolder_id: Brandfolder ID (uses the default if not provided)
            position: Optional position among the brandfolder's sections

        Raises:
            BrandfolderValidationError: If the asset type is not allowed
        """
        brandfolder_id = self._require_brandfolder(brandfolder_id)
        default_asset_type = default_asset_type or "GenericFile"
        if default_asset_type not in SECTION_ASSET_TYPES:
            raise BrandfolderValidationError(
                "Invalid default asset type. Valid options are "
                + ", ".join(f'"{t}"' for t in SECTION_ASSET_TYPES)
                + "."
            )
        attributes: dict[str, Any] = {
            "name": name,
            "default_asset_type": default_asset_type,
        }
        if isinstance(position, int):
            attributes["position"] = position
        return self.request(
            "POST",
            f"/brandfolders/{brandfolder_id}/sections",
            body={"data": {"attributes": attributes}},
        )

    # =========================
    # Assets
    # =========================

    def list_assets(
        self,
        query_params: dict[str, Any] | None = None,
        collection: str | None = None,
        should_get_all: bool = False,
    ) -> dict[str, Any]:
        """List assets in the default brandfolder or in a collection.

        Args:
            query_params: Query parameters (e.g. {"include": "attachments"})
            collection: Collection ID, or "all" for the whole default
                brandfolder (uses the default collection if not provided)
            should_get_all: Aggregate every page instead of returning one

        Raises:
            BrandfolderConfigError: If neither a brandfolder nor a
                collection can be determined
        """
        collection = collection or self.default_collection_id
        if collection in (None, "all") and self.default_brandfolder_id:
            endpoint = f"/brandfolders/{self.default_brandfolder_id}/assets"
        elif collection not in (None, "all"):
            endpoint = f"/collections/{collection}/assets"
        else:
            raise BrandfolderConfigError(
                "Could not determine endpoint for listing assets. "
                "Please set a default Brandfolder or provide a Collection ID."
            )

        if should_get_all:
            return self.get_all(endpoint, query_params)
        return self._get(endpoint, query_params)

    def list_assets_in_organization(
        self, organization_id: str, query_params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return self._get(f"/organizations/{organization_id}/assets", query_params)

    def list_assets_in_brandfolder(
        self, brandfolder_id: str, query_params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return self._get(f"/brandfolders/{brandfolder_id}/assets", query_params)

    def list_assets_in_collection(
        self, collection_id: str, query_params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return self._get(f"/collections/{collection_id}/assets", query_params)

    def list_assets_in_label(
        self, label_id: str, query_params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return self._get(f"/labels/{label_id}/assets", query_params)

    def fetch_asset(
        self, asset_id: str, query_params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Fetch a single asset.

        Example:
            >>> result = client.fetch_asset(
            ...     asset_id, {"include": "custom_fields,attachments"}
            ... )
            >>> asset = result["data"]
            >>> asset["custom_field_values"].get("color")
            'red'
        """
        return self._get(f"/assets/{asset_id}", query_params)

    def create_asset(
        self,
        name: str,
        attachments: list[dict[str, Any]],
        section: str,
        description: str | None = None,
        brandfolder: str | None = None,
        collection: str | None = None,
        availability_start: Any = None,
        availability_end: Any = None,
    ) -> list[dict[str, Any]]:
        """Create a single asset. See create_assets()."""
        asset: dict[str, Any] = {"name": name, "attachments": attachments}
        if description is not None:
            asset["description"] = description
        if availability_start is not None:
            asset["availability_start"] = availability_start
        if availability_end is not None:
            asset["availability_end"] = availability_end
        return self.create_assets([asset], section, brandfolder, collection)

    def create_assets(
        self,
        assets: list[dict[str, Any]],
        section: str,
        brandfolder: str | None = None,
        collection: str | None = None,
    ) -> list[dict[str, Any]]:
        """Create assets in a brandfolder or collection section.

        Args:
            assets: Asset attribute dicts (name, attachments, description,
                availability_start, availability_end)
            section: Section ID the assets go into
            brandfolder: Brandfolder ID (default brandfolder if neither
                brandfolder nor collection is given)
            collection: Collection ID

        Returns:
            The created asset resources

        Raises:
            BrandfolderConfigError: If no brandfolder or collection is known
            BrandfolderInvalidResponseError: If the API returns no assets
        """
        if brandfolder is None and collection is None:
            if self.default_brandfolder_id:
                brandfolder = self.default_brandfolder_id
            elif self.default_collection_id:
                collection = self.default_collection_id

        if brandfolder is not None:
            endpoint = f"/brandfolders/{brandfolder}/assets"
        elif collection is not None:
            endpoint = f"/collections/{collection}/assets"
        else:
            raise BrandfolderConfigError(
                "A Brandfolder or a Collection must be specified when creating an asset."
            )

        prepared = []
        for asset in assets:
            asset = dict(asset)
            for date_field in ("availability_start", "availability_end"):
                if asset.get(date_field):
                    formatted = format_datetime(asset[date_field])
                    if formatted:
                        asset[date_field] = formatted
                    else:
                        logger.warning(
                            f"Dropping unparseable {date_field}: {asset[date_field]!r}"
                        )
                        del asset[date_field]
            prepared.append(asset)

        result = self.request(
            "POST",
            endpoint,
            body={"data": {"attributes": prepared}, "section_key": section},
        )
        data = result.get("data")
        if not data:
            raise BrandfolderInvalidResponseError("No assets returned after creation")
        return data if isinstance(data, list) else [data]

    def update_asset(
        self,
        asset_id: str,
        name: str | None = None,
        description: str | None = None,
        attachments: list[dict[str, Any]] | None = None,
        availability_start: Any = None,
        availability_end: Any = None,
    ) -> dict[str, Any]:
        """Update an asset.

        Availability dates may be anything format_datetime() accepts, or
        "none" to clear the date.

        Returns:
            The updated asset resource
        """
        attributes: dict[str, Any] = {}
        if name is not None:
            attributes["name"] = name
        if description is not None:
            attributes["description"] = description
        if attachments is not None:
            attributes["attachments"] = attachments
        for date_field, value in (
            ("availability_start", availability_start),
            ("availability_end", availability_end),
        ):
            if value is None:
                continue
            if value == "none":
                attributes[date_field] = None
                continue
            formatted = format_datetime(value)
            if formatted:
                attributes[date_field] = formatted
            else:
                logger.warning(f"Dropping unparseable {date_field}: {value!r}")

        result = self.request(
            "PUT", f"/assets/{asset_id}", body={"data": {"attributes": attributes}}
        )
        data = result.get("data")
        if not data:
            raise BrandfolderInvalidResponseError(f"No asset returned for {asset_id}")
        return data

    def delete_asset(self, asset_id: str) -> bool:
        self.request("DELETE", f"/assets/{asset_id}")
        return True

    # =========================
    # Attachments
    # =========================

    def list_attachments(
        self,
        context: str,
        context_id: str,
        query_params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """List attachments within an organization, brandfolder,
        collection, section or asset.

        Raises:
            BrandfolderValidationError: If the context is not recognized
        """
        endpoint_name = ATTACHMENT_CONTEXTS.get(context)
        if endpoint_name is None:
            raise BrandfolderValidationError("Invalid context for listing attachments.")
        return self._get(f"/{endpoint_name}/{context_id}/attachments", query_params)

    def list_attachments_for_asset(
        self, asset_id: str, query_params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return self.list_attachments("asset", asset_id, query_params)

    def fetch_attachment(
        self, attachment_id: str, query_params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return self._get(f"/attachments/{attachment_id}", query_params)

    def update_attachment(
        self,
        attachment_id: str,
        url: str | None = None,
        filename: str | None = None,
    ) -> dict[str, Any]:
        attributes: dict[str, Any] = {}
        if url is not None:
            attributes["url"] = url
        if filename is not None:
            attributes["filename"] = filename
        return self.request(
            "PUT",
            f"/attachments/{attachment_id}",
            body={"data": {"attributes": attributes}},
        )

    def delete_attachment(self, attachment_id: str) -> bool:
        self.request("DELETE", f"/attachments/{attachment_id}")
        return True

    # =========================
    # Custom Fields
    # =========================

    def list_custom_fields(
        self,
        brandfolder_id: str | None = None,
        include_values: bool = False,
        simple_format: bool = False,
    ) -> dict[str, Any]:
        """List the custom field keys of a brandfolder.

        Args:
            brandfolder_id: Brandfolder ID (uses the default if not provided)
            include_values: Also request the values in use for each field
            simple_format: Return a flat dict instead of the document. With
                include_values, field names map to their lists of values;
                otherwise custom field key IDs map to field names.

        Returns:
            Aggregated document, or the flat dict described above
        """
        brandfolder_id = self._require_brandfolder(brandfolder_id)
        query_params: dict[str, Any] = {}
        if include_values:
            query_params["fields"] = "values"
            query_params["include"] = "custom_field_values"

        result = self.get_all(
            f"/brandfolders/{brandfolder_id}/custom_field_keys", query_params
        )
        if not simple_format:
            return result
        if include_values:
            return {
                (item.get("attributes") or {}).get("name"): (
                    item.get("attributes") or {}
                ).get("values")
                for item in result["data"]
            }
        return _names_by_id(result)

    def resolve_custom_field_ids(self, brandfolder_id: str | None = None) -> dict[str, str]:
        """Map custom field names to custom field key IDs."""
        ids_and_names = self.list_custom_fields(brandfolder_id, simple_format=True)
        return {name: field_id for field_id, name in ids_and_names.items()}

    def _custom_field_ids_by_name(self) -> dict[str, str]:
        return self.resolve_custom_field_ids()

    def create_custom_field_keys_for_brandfolder(
        self,
        custom_field_data: list[dict[str, Any]],
        brandfolder_id: str | None = None,
    ) -> dict[str, Any]:
        """Create custom field keys, optionally restricting their values.

        Example:
            >>> client.create_custom_field_keys_for_brandfolder([
            ...     {"name": "coffee", "allowed_values": ["Peruvian", "Sumatran"]},
            ...     {"name": "vortex_strength"},
            ... ])
        """
        brandfolder_id = self._require_brandfolder(brandfolder_id)
        fields = []
        for field in custom_field_data:
            if "name" not in field:
                raise BrandfolderValidationError("Custom field key name is required.")
            allowed = field.get("allowed_values")
            if allowed is not None and not isinstance(allowed, list):
                raise BrandfolderValidationError(
                    "Allowed values must be an array of strings."
                )
            fields.append(
                {k: v for k, v in field.items() if k in CUSTOM_FIELD_KEY_ATTRIBUTES}
            )
        return self.request(
            "POST",
            f"/brandfolders/{brandfolder_id}/custom_field_keys",
            body={"data": {"attributes": fields}},
        )

    def update_custom_field_key(
        self, custom_field_id: str, attributes: dict[str, Any]
    ) -> dict[str, Any]:
        attributes = {
            k: v for k, v in attributes.items() if k in CUSTOM_FIELD_KEY_ATTRIBUTES
        }
        if not attributes:
            raise BrandfolderValidationError(
                "No valid attributes provided for updating the Custom Field Key."
            )
        return self.request(
            "PUT",
            f"/custom_field_keys/{custom_field_id}",
            body={"data": {"attributes": attributes}},
        )

    def delete_custom_field_key(self, custom_field_key_id: str) -> bool:
        """Delete a custom field key and every value stored for it."""
        self.request("DELETE", f"/custom_field_keys/{custom_field_key_id}")
        return True

    def _custom_field_value_body(
        self, values_by_asset: dict[str, Any]
    ) -> dict[str, Any]:
        return {
            "data": [
                {
                    "attributes": {"value": value},
                    "relationships": {
                        "asset": {"data": {"type": "assets", "id": asset_id}}
                    },
                }
                for asset_id, value in values_by_asset.items()
            ]
        }

    def add_custom_fields_to_asset(
        self,
        asset_id: str,
        custom_field_values: dict[str, Any],
        field_key_type: Literal["name", "id"] = "name",
        brandfolder_id: str | None = None,
    ) -> CustomFieldUpdateResult:
        """Add custom field values to an asset.

        With field_key_type "name", field names are first translated to
        custom field key IDs, which costs one extra listing and breaks if a
        field is later renamed. Names that no longer exist are reported in
        the result; every field that can be resolved is still written.

        Args:
            asset_id: ID of the asset
            custom_field_values: Mapping of field name (or key ID) to value
            field_key_type: "name" (default) or "id"
            brandfolder_id: Brandfolder holding the fields; only needed for
                name lookups (uses the default if not provided)

        Returns:
            CustomFieldUpdateResult with per-field messages

        Raises:
            BrandfolderError: If the custom field names could not be looked up
        """
        outcome = CustomFieldUpdateResult()

        if field_key_type == "name":
            try:
                names_and_ids = self.resolve_custom_field_ids(brandfolder_id)
            except BrandfolderError as e:
                raise type(e)(
                    f"Could not retrieve custom fields from Brandfolder: {e.message}",
                    e.status,
                ) from e

            values_by_id: dict[str, Any] = {}
            for field_name, value in custom_field_values.items():
                if field_name in names_and_ids:
                    values_by_id[names_and_ids[field_name]] = value
                else:
                    outcome.add(
                        f"Custom field '{field_name}' appears to no longer exist in "
                        f"Brandfolder, so we cannot add a value for it.",
                        ok=False,
                    )
            custom_field_values = values_by_id

        for custom_field_key_id, value in custom_field_values.items():
            try:
                self.request(
                    "POST",
                    f"/custom_field_keys/{custom_field_key_id}/custom_field_values",
                    body=self._custom_field_value_body({asset_id: value}),
                )
            except BrandfolderError as e:
                logger.warning(
                    f"Failed to add value for custom field key {custom_field_key_id} "
                    f"to asset {asset_id}: {e}"
                )
                outcome.add(
                    f"Failed to add custom field value for custom field key ID "
                    f"{custom_field_key_id} to asset {asset_id}.",
                    ok=False,
                )
            else:
                outcome.add(
                    f"Successfully added custom field value for custom field key ID "
                    f"{custom_field_key_id} to asset {asset_id}."
                )

        return outcome

    def set_custom_field_values_for_assets(
        self, custom_field_key_id: str, custom_field_values_per_asset: dict[str, Any]
    ) -> dict[str, Any]:
        """Set one custom field on several assets (asset ID -> value)."""
        return self.request(
            "POST",
            f"/custom_field_keys/{custom_field_key_id}/custom_field_values",
            body=self._custom_field_value_body(custom_field_values_per_asset),
        )

    def list_custom_field_values_for_asset(
        self, asset_id: str, query_params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return self._get(f"/assets/{asset_id}/custom_field_values", query_params)

    def update_custom_field_value(
        self, custom_field_value_id: str, value: str
    ) -> dict[str, Any]:
        # Value IDs identify one value instance, not the custom field key
        return self.request(
            "PUT",
            f"/custom_field_values/{custom_field_value_id}",
            body={"data": {"attributes": {"value": value}}},
        )

    def delete_custom_field_value(self, custom_field_value_id: str) -> bool:
        self.request("DELETE", f"/custom_field_values/{custom_field_value_id}")
        return True

    # =========================
    # Labels
    # =========================

    def list_labels_in_brandfolder(
        self,
        brandfolder_id: str | None = None,
        simple_format: bool = False,
    ) -> dict[str, LabelNode] | dict[str, str]:
        """List the labels of a brandfolder.

        Args:
            brandfolder_id: Brandfolder ID (uses the default if not provided)
            simple_format: Return label names keyed by ID instead of the tree

        Returns:
            Top-level LabelNodes keyed by label ID (each with nested
            children), or a flat dict of label names

        Example:
            >>> for label_id, node in client.list_labels_in_brandfolder().items():
            ...     print(node.name)
            ...     for child_id, child in node.children.items():
            ...         print("  ", child.name)
        """
        brandfolder_id = self._require_brandfolder(brandfolder_id)
        result = self.get_all(f"/brandfolders/{brandfolder_id}/labels")
        if simple_format:
            return label_names(result["data"])
        return build_label_tree(result["data"])

    def fetch_label(self, label_id: str) -> dict[str, Any]:
        return self.request("GET", f"/labels/{label_id}")

    def create_label_in_brandfolder(
        self,
        name: str,
        brandfolder_id: str | None = None,
        parent_id: str | None = None,
    ) -> dict[str, Any]:
        brandfolder_id = self._require_brandfolder(brandfolder_id)
        attributes: dict[str, Any] = {"name": name}
        if parent_id is not None:
            attributes["parent_key"] = parent_id
        return self.request(
            "POST",
            f"/brandfolders/{brandfolder_id}/labels",
            body={"data": {"attributes": attributes}},
        )

    def update_label(self, label_id: str, new_name: str) -> dict[str, Any]:
        return self.request(
            "PUT",
            f"/labels/{label_id}",
            body={"data": {"attributes": {"name": new_name}}},
        )

    def move_label(self, label_id: str, new_parent_id: str) -> dict[str, Any]:
        """Move a label under another label, or to the top level with "root"."""
        parent_key = None if new_parent_id == "root" else new_parent_id
        return self.request(
            "PUT",
            f"/labels/{label_id}/move",
            body={"data": {"attributes": {"parent_key": parent_key}}},
        )

    def delete_label(self, label_id: str) -> bool:
        self.request("DELETE", f"/labels/{label_id}")
        return True

    def add_assets_to_label(self, asset_ids: list[str], label: str) -> dict[str, Any]:
        return self.request(
            "POST",
            "/bulk_actions/assets/add_to_label",
            body={"data": {"asset_keys": asset_ids, "label_key": label}},
        )

    # =========================
    # Tags
    # =========================

    def list_tags_in_brandfolder(
        self,
        brandfolder_id: str | None = None,
        query_params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        brandfolder_id = self._require_brandfolder(brandfolder_id)
        # Tag listings never carry included data
        return self.request("GET", f"/brandfolders/{brandfolder_id}/tags", query_params)

    def list_tags_in_collection(
        self,
        collection_id: str | None = None,
        query_params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        collection_id = self._require_collection(collection_id)
        return self.request("GET", f"/collections/{collection_id}/tags", query_params)

    def get_tags(
        self,
        query_params: dict[str, Any] | None = None,
        collection: str | None = None,
        data_only: bool = True,
    ) -> Any:
        """Get tags of a collection or of the default brandfolder.

        All pages are aggregated unless query_params names a page or page
        size.

        Args:
            query_params: Query parameters
            collection: Collection ID (default brandfolder if not provided)
            data_only: Return only the list of tag resources

        Returns:
            List of tags, or the full document if data_only is False
        """
        if collection is not None:
            endpoint = f"/collections/{collection}/tags"
        elif self.default_brandfolder_id:
            endpoint = f"/brandfolders/{self.default_brandfolder_id}/tags"
        else:
            raise BrandfolderConfigError(
                "Could not determine endpoint for listing tags. "
                "Please set a default Brandfolder or provide a Collection ID."
            )

        if _wants_single_page(query_params):
            result = self.request("GET", endpoint, query_params)
        else:
            result = self.get_all(endpoint, query_params)

        if data_only:
            return result.get("data", [])
        return result

    def list_tags_for_asset(
        self, asset_id: str, query_params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return self._get(f"/assets/{asset_id}/tags", query_params)

    def create_tags_for_asset(self, asset_id: str, tag_names: list[str]) -> dict[str, Any]:
        return self.request(
            "POST",
            f"/assets/{asset_id}/tags",
            body={"data": {"attributes": [{"name": name} for name in tag_names]}},
        )

    def update_tag(self, tag_id: str, tag_name: str) -> dict[str, Any]:
        return self.request(
            "PUT",
            f"/tags/{tag_id}",
            body={"data": {"attributes": {"name": tag_name}}},
        )

    def delete_tags_on_asset(self, asset_id: str, tag_names: list[str]) -> bool:
        self.request("DELETE", f"/async/tags/assets/{asset_id}", body={"tags": tag_names})
        return True

    # =========================
    # Invitations
    # =========================

    def _invitation_endpoint(self, entity_type: str, entity_id: str) -> str:
        endpoint_name = INVITATION_ENTITIES.get(entity_type)
        if endpoint_name is None:
            raise BrandfolderValidationError(
                "Invalid entity type for invitations. Please specify an "
                "Organization, Brandfolder, Collection, Portal, or Brandguide."
            )
        return f"/{endpoint_name}/{entity_id}/invitations"

    def list_invitations(
        self,
        entity_type: str,
        entity_id: str,
        query_params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """List invitations to an entity; all pages unless page/per given."""
        endpoint = self._invitation_endpoint(entity_type, entity_id)
        if _wants_single_page(query_params):
            return self._get(endpoint, query_params)
        return self.get_all(endpoint, query_params)

    def fetch_invitation(
        self, invitation_id: str, query_params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return self._get(f"/invitations/{invitation_id}", query_params)

    def create_invitation(
        self,
        entity_type: str,
        entity_id: str,
        email: str,
        permission_level: str,
        personal_message: str = "",
        prevent_email: bool = False,
    ) -> dict[str, Any]:
        """Invite someone to an organization, brandfolder, collection,
        portal or brandguide.

        Raises:
            BrandfolderValidationError: If the entity type or permission
                level is not allowed ("owner" is only valid for
                organizations)
        """
        endpoint = self._invitation_endpoint(entity_type, entity_id)
        if permission_level not in PERMISSION_LEVELS:
            raise BrandfolderValidationError("Invalid permission level.")
        if entity_type != "organization" and permission_level == "owner":
            raise BrandfolderValidationError(
                'The "owner" permission level is only valid when inviting '
                "someone to an Organization."
            )
        result = self.request(
            "POST",
            endpoint,
            body={
                "data": {
                    "attributes": {
                        "email": email,
                        "permission_level": permission_level,
                        "personal_message": personal_message,
                        "prevent_email": prevent_email,
                    }
                }
            },
        )
        return self._normalize(result)

    def delete_invitation(self, invitation_id: str) -> bool:
        self.request("DELETE", f"/invitations/{invitation_id}")
        return True

    # =========================
    # User Permissions
    # =========================

    def list_user_permissions_for_organization(
        self, organization_id: str, query_params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return self._get(f"/organizations/{organization_id}/user_permissions", query_params)

    def list_user_permissions_for_brandfolder(
        self, brandfolder_id: str, query_params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return self._get(f"/brandfolders/{brandfolder_id}/user_permissions", query_params)

    def list_user_permissions_for_collection(
        self, collection_id: str, query_params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return self._get(f"/collections/{collection_id}/user_permissions", query_params)

    def fetch_user_permission(self, user_permission_id: str) -> dict[str, Any]:
        return self._get(f"/user_permissions/{user_permission_id}")

    def delete_user_permission(self, user_permission_id: str) -> bool:
        self.request("DELETE", f"/user_permissions/{user_permission_id}")
        return True
