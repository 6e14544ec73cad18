"""
==============================================================================
Security Module - API Key Authentication
==============================================================================

Shared-secret gate protecting catalog mutations.

This module implements:
- ApiKeyManager: verifies the x-api-key header against the configured secret

Key Handling:
------------
- Header name: x-api-key
- Secret comes from the API_KEY setting
- Comparison runs in constant time

==============================================================================
"""

from __future__ import annotations

import hmac
import logging
from typing import Optional

from app.config import Settings
from app.core import exceptions


# Module logger
logger = logging.getLogger(__name__)


API_KEY_HEADER = "x-api-key"


class ApiKeyManager:
    """
    Verifies API keys presented by clients.

    Example:
        >>> manager = ApiKeyManager(settings)
        >>> manager.verify("your-secret-api-key-123")
    """

    def __init__(self, settings: Settings) -> None:
        self._expected = settings.api_key

    def is_valid(self, api_key: str) -> bool:
        """Constant-time comparison against the configured key."""
        return hmac.compare_digest(api_key.encode("utf-8"), self._expected.encode("utf-8"))

    def verify(self, api_key: Optional[str]) -> None:
        """
        Check a presented key.

        Raises:
            AppException: AUTHENTICATION when the key is missing or wrong
        """
        if not api_key:
            logger.debug("Request without API key")
            raise exceptions.api_key_missing()

        if not self.is_valid(api_key):
            logger.warning("Rejected request with invalid API key")
            raise exceptions.api_key_invalid()
