"""Shared fixtures for the Brandfolder client tests."""

from typing import Any, Callable

import httpx
import pytest

from pybrandfolder.api import BrandfolderClient
from pybrandfolder.config import Config

ENV_VARS = (
    "BRANDFOLDER_API_KEY",
    "BRANDFOLDER_API_URL",
    "BRANDFOLDER_ID",
    "BRANDFOLDER_COLLECTION_ID",
    "BRANDFOLDER_PER_PAGE",
    "BRANDFOLDER_REQUEST_LIMIT",
)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep tests independent of the user's environment and config file."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    test_config = Config(config_dir=tmp_path / "config")
    monkeypatch.setattr("pybrandfolder.api.config", test_config)
    monkeypatch.setattr("pybrandfolder.cli.config", test_config)
    return test_config


@pytest.fixture
def client():
    """Provide a client with no default brandfolder."""
    return BrandfolderClient(api_key="test_key")


@pytest.fixture
def make_client():
    """Build a client whose HTTP traffic goes to a handler function.

    The handler receives each httpx.Request and returns an httpx.Response.
    Every request is also recorded on the returned client as ``sent``.
    """

    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
        **kwargs: Any,
    ) -> BrandfolderClient:
        sent: list[httpx.Request] = []

        def recording_handler(request: httpx.Request) -> httpx.Response:
            sent.append(request)
            return handler(request)

        http_client = httpx.Client(transport=httpx.MockTransport(recording_handler))
        bf_client = BrandfolderClient(api_key="test_key", http_client=http_client, **kwargs)
        bf_client.sent = sent  # type: ignore[attr-defined]
        return bf_client

    return factory
