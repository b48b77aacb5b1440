"""PyBrandfolder - Python client for the Brandfolder API."""

from .api import BrandfolderClient
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
from .labels import build_label_tree
from .models import CustomFieldUpdateResult, LabelNode
from .normalizer import normalize_page

__all__ = [
    "BrandfolderClient",
    "BrandfolderAPIError",
    "BrandfolderAuthenticationError",
    "BrandfolderConfigError",
    "BrandfolderError",
    "BrandfolderInvalidResponseError",
    "BrandfolderNetworkError",
    "BrandfolderNotFoundError",
    "BrandfolderPermissionError",
    "BrandfolderRateLimitError",
    "BrandfolderValidationError",
    "CustomFieldUpdateResult",
    "LabelNode",
    "build_label_tree",
    "normalize_page",
]
