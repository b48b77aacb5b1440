"""Unit tests for the Brandfolder resource endpoints."""

import logging
from datetime import datetime
from unittest.mock import patch

import pytest

from pybrandfolder.exceptions import (
    BrandfolderConfigError,
    BrandfolderInvalidResponseError,
    BrandfolderValidationError,
)
from tests.helpers import resource


@pytest.fixture
def mock_request(client):
    """Patch the client's request method."""
    with patch.object(client, "request", return_value={"data": []}) as mock:
        yield mock


class TestBrandfolders:
    """Tests for brandfolder endpoints."""

    def test_create_brandfolder(self, client, mock_request):
        """Test the create request body."""
        client.create_brandfolder_in_organization("org1", "Marketing", tagline="Hi")

        mock_request.assert_called_once_with(
            "POST",
            "/organizations/org1/brandfolders",
            body={
                "data": {
                    "attributes": {
                        "name": "Marketing",
                        "tagline": "Hi",
                        "privacy": "private",
                    }
                }
            },
        )

    def test_create_brandfolder_rejects_bad_privacy(self, client, mock_request):
        """Test that privacy must be private or public."""
        with pytest.raises(BrandfolderValidationError, match="Invalid privacy value"):
            client.create_brandfolder_in_organization("org1", "Marketing", privacy="secret")
        mock_request.assert_not_called()

    def test_get_brandfolders_full_document(self, client, mock_request):
        """Test that simple_format=False returns the aggregated document."""
        mock_request.return_value = {"data": [resource("brandfolders", "bf1")]}

        result = client.get_brandfolders(simple_format=False)

        assert result["data"][0]["id"] == "bf1"


class TestCollectionsAndSections:
    """Tests for collection and section endpoints."""

    def test_update_collection_filters_attributes(self, client, mock_request):
        """Test that only name, tagline and slug are sent."""
        client.update_collection("c1", {"name": "New", "color": "red"})

        assert mock_request.call_args.kwargs["body"] == {
            "data": {"attributes": {"name": "New"}}
        }

    def test_update_collection_needs_valid_attribute(self, client, mock_request):
        """Test that an update with nothing valid is rejected."""
        with pytest.raises(BrandfolderValidationError):
            client.update_collection("c1", {"color": "red"})
        mock_request.assert_not_called()

    def test_create_collection_uses_default_brandfolder(self, client, mock_request):
        """Test the fallback to the default brandfolder."""
        client.default_brandfolder_id = "bf1"

        client.create_collection_in_brandfolder("Launch", slug="launch")

        assert mock_request.call_args.args == ("POST", "/brandfolders/bf1/collections")
        assert mock_request.call_args.kwargs["body"] == {
            "data": {"attributes": {"name": "Launch", "slug": "launch"}}
        }

    def test_create_section(self, client, mock_request):
        """Test the default asset type and position."""
        client.create_section_in_brandfolder("Logos", None, "bf1", position=2)

        assert mock_request.call_args.kwargs["body"] == {
            "data": {
                "attributes": {
                    "name": "Logos",
                    "default_asset_type": "GenericFile",
                    "position": 2,
                }
            }
        }

    def test_create_section_rejects_unknown_type(self, client, mock_request):
        """Test that asset types are validated."""
        with pytest.raises(BrandfolderValidationError, match="default asset type"):
            client.create_section_in_brandfolder("Logos", "Spreadsheet", "bf1")

    def test_section_names(self, client, mock_request):
        """Test section names keyed by ID."""
        mock_request.return_value = {
            "data": [resource("sections", "s1", {"name": "Logos"})]
        }

        assert client.list_all_section_names_in_brandfolder("bf1") == {"s1": "Logos"}


class TestAssets:
    """Tests for asset endpoints."""

    @pytest.mark.parametrize(
        "collection, default_brandfolder, expected",
        [
            (None, "bf1", "/brandfolders/bf1/assets"),
            ("all", "bf1", "/brandfolders/bf1/assets"),
            ("c1", "bf1", "/collections/c1/assets"),
            ("c1", None, "/collections/c1/assets"),
        ],
    )
    def test_list_assets_endpoint(
        self, client, mock_request, collection, default_brandfolder, expected
    ):
        """Test how the listing endpoint is chosen."""
        client.default_brandfolder_id = default_brandfolder

        client.list_assets(collection=collection)

        assert mock_request.call_args.args[1] == expected

    def test_list_assets_without_target(self, client, mock_request):
        """Test that a brandfolder or collection is needed."""
        with pytest.raises(BrandfolderConfigError):
            client.list_assets(collection="all")

    def test_list_assets_get_all(self, client):
        """Test that should_get_all aggregates the listing."""
        with patch.object(client, "get_all", return_value={"data": []}) as mock:
            client.list_assets({"include": "attachments"}, "c1", should_get_all=True)

        mock.assert_called_once_with("/collections/c1/assets", {"include": "attachments"})

    def test_create_assets_formats_dates(self, client, mock_request):
        """Test the create body, date formatting and returned list."""
        mock_request.return_value = {"data": resource("generic_files", "a1")}

        created = client.create_assets(
            [
                {
                    "name": "Logo",
                    "attachments": [{"url": "https://example.test/logo.png"}],
                    "availability_start": datetime(2024, 5, 1, 10, 30),
                    "availability_end": "someday",
                }
            ],
            section="s1",
            brandfolder="bf1",
        )

        assert created == [resource("generic_files", "a1")]
        assert mock_request.call_args.args == ("POST", "/brandfolders/bf1/assets")
        assert mock_request.call_args.kwargs["body"] == {
            "data": {
                "attributes": [
                    {
                        "name": "Logo",
                        "attachments": [{"url": "https://example.test/logo.png"}],
                        "availability_start": "2024-05-01T10:30:00.000Z",
                    }
                ]
            },
            "section_key": "s1",
        }

    def test_create_asset_in_default_collection(self, client, mock_request):
        """Test the fallback to the default collection."""
        client.default_collection_id = "c1"
        mock_request.return_value = {"data": [resource("generic_files", "a1")]}

        client.create_asset("Logo", [], "s1", description="Main logo")

        assert mock_request.call_args.args == ("POST", "/collections/c1/assets")

    def test_create_assets_without_target(self, client, mock_request):
        """Test that a brandfolder or collection is needed."""
        with pytest.raises(BrandfolderConfigError):
            client.create_assets([{"name": "Logo"}], section="s1")

    def test_create_assets_with_empty_response(self, client, mock_request):
        """Test that a response without assets is an error."""
        with pytest.raises(BrandfolderInvalidResponseError):
            client.create_assets([{"name": "Logo"}], section="s1", brandfolder="bf1")

    def test_update_asset_clears_and_formats_dates(self, client, mock_request):
        """Test that "none" clears a date and other dates are formatted."""
        mock_request.return_value = {"data": resource("generic_files", "a1")}

        updated = client.update_asset(
            "a1",
            name="Logo",
            availability_start="none",
            availability_end="2024-05-01T10:30:00Z",
        )

        assert updated["id"] == "a1"
        assert mock_request.call_args.args == ("PUT", "/assets/a1")
        assert mock_request.call_args.kwargs["body"] == {
            "data": {
                "attributes": {
                    "name": "Logo",
                    "availability_start": None,
                    "availability_end": "2024-05-01T10:30:00.000Z",
                }
            }
        }

    def test_update_asset_warns_on_unparseable_date(self, client, mock_request, caplog):
        """Test that a bad date is logged and left out of the update."""
        mock_request.return_value = {"data": resource("generic_files", "a1")}

        with caplog.at_level(logging.WARNING, logger="pybrandfolder.api"):
            client.update_asset("a1", availability_end="someday")

        assert mock_request.call_args.kwargs["body"] == {"data": {"attributes": {}}}
        assert "Dropping unparseable availability_end" in caplog.text


class TestAttachments:
    """Tests for attachment endpoints."""

    def test_list_attachments_for_section(self, client, mock_request):
        """Test the context endpoint mapping."""
        client.list_attachments("section", "s1")

        assert mock_request.call_args.args[1] == "/sections/s1/attachments"

    def test_list_attachments_rejects_unknown_context(self, client, mock_request):
        """Test that the context is validated."""
        with pytest.raises(BrandfolderValidationError, match="Invalid context"):
            client.list_attachments("label", "l1")

    def test_update_attachment(self, client, mock_request):
        """Test that only given attributes are sent."""
        client.update_attachment("att1", filename="logo.png")

        assert mock_request.call_args.kwargs["body"] == {
            "data": {"attributes": {"filename": "logo.png"}}
        }


class TestLabelsAndTags:
    """Tests for label and tag mutations."""

    def test_create_label_with_parent(self, client, mock_request):
        """Test that the parent is sent as parent_key."""
        client.create_label_in_brandfolder("Child", "bf1", parent_id="l0")

        assert mock_request.call_args.kwargs["body"] == {
            "data": {"attributes": {"name": "Child", "parent_key": "l0"}}
        }

    @pytest.mark.parametrize("parent, expected", [("root", None), ("l2", "l2")])
    def test_move_label(self, client, mock_request, parent, expected):
        """Test moving under a label or to the top level."""
        client.move_label("l1", parent)

        assert mock_request.call_args.args == ("PUT", "/labels/l1/move")
        assert mock_request.call_args.kwargs["body"] == {
            "data": {"attributes": {"parent_key": expected}}
        }

    def test_add_assets_to_label(self, client, mock_request):
        """Test the bulk action body."""
        client.add_assets_to_label(["a1", "a2"], "l1")

        assert mock_request.call_args.kwargs["body"] == {
            "data": {"asset_keys": ["a1", "a2"], "label_key": "l1"}
        }

    def test_create_tags_for_asset(self, client, mock_request):
        """Test that each tag name becomes an attribute entry."""
        client.create_tags_for_asset("a1", ["summer", "beach"])

        assert mock_request.call_args.kwargs["body"] == {
            "data": {"attributes": [{"name": "summer"}, {"name": "beach"}]}
        }

    def test_delete_tags_on_asset(self, client, mock_request):
        """Test the asynchronous tag removal request."""
        assert client.delete_tags_on_asset("a1", ["summer"]) is True

        mock_request.assert_called_once_with(
            "DELETE", "/async/tags/assets/a1", body={"tags": ["summer"]}
        )

    def test_get_tags_without_target(self, client, mock_request):
        """Test that tags need a brandfolder or collection."""
        with pytest.raises(BrandfolderConfigError):
            client.get_tags()

    def test_tags_in_collection_requires_collection(self, client, mock_request):
        """Test that a collection is needed."""
        with pytest.raises(BrandfolderConfigError, match="Collection ID"):
            client.list_tags_in_collection()


class TestInvitations:
    """Tests for invitation endpoints."""

    def test_create_invitation(self, client, mock_request):
        """Test the invitation body."""
        client.create_invitation("brandfolder", "bf1", "a@example.test", "guest")

        assert mock_request.call_args.args == ("POST", "/brandfolders/bf1/invitations")
        assert mock_request.call_args.kwargs["body"] == {
            "data": {
                "attributes": {
                    "email": "a@example.test",
                    "permission_level": "guest",
                    "personal_message": "",
                    "prevent_email": False,
                }
            }
        }

    def test_owner_only_for_organizations(self, client, mock_request):
        """Test that owner invitations are limited to organizations."""
        with pytest.raises(BrandfolderValidationError, match="owner"):
            client.create_invitation("collection", "c1", "a@example.test", "owner")

        client.create_invitation("organization", "o1", "a@example.test", "owner")
        assert mock_request.call_count == 1

    @pytest.mark.parametrize(
        "entity_type, level",
        [("team", "guest"), ("brandfolder", "superuser")],
    )
    def test_invalid_invitations(self, client, mock_request, entity_type, level):
        """Test that entity types and permission levels are validated."""
        with pytest.raises(BrandfolderValidationError):
            client.create_invitation(entity_type, "x1", "a@example.test", level)
        mock_request.assert_not_called()

    def test_list_invitations_single_page(self, client, mock_request):
        """Test that paging params request one page."""
        client.list_invitations("portal", "p1", {"per": 5})

        mock_request.assert_called_once_with("GET", "/portals/p1/invitations", {"per": 5})


class TestDeletes:
    """Tests for delete operations."""

    @pytest.mark.parametrize(
        "method, path",
        [
            ("delete_collection", "/collections/x1"),
            ("delete_asset", "/assets/x1"),
            ("delete_attachment", "/attachments/x1"),
            ("delete_custom_field_key", "/custom_field_keys/x1"),
            ("delete_custom_field_value", "/custom_field_values/x1"),
            ("delete_label", "/labels/x1"),
            ("delete_invitation", "/invitations/x1"),
            ("delete_user_permission", "/user_permissions/x1"),
        ],
    )
    def test_delete_returns_true(self, client, mock_request, method, path):
        """Test that deletes issue a DELETE and report success."""
        mock_request.return_value = {}

        assert getattr(client, method)("x1") is True
        mock_request.assert_called_once_with("DELETE", path)
