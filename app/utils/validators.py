"""
==============================================================================
Validation Utilities Module
==============================================================================

Validation classes for product payloads and listing query parameters.

This module implements:
- ProductValidator: field rules for create (full) and update (partial)
- QueryParamsValidator: page/limit/price-range rules for listings

Reporting Rules:
---------------
- Product payloads: every violation is collected, in field order, so the
  caller sees all problems at once.
- Query parameters: checking stops at the first violated rule.

Field Rules:
-----------
- name: string, at least 2 characters after trimming
- description: string, at least 5 characters after trimming
- price: number (not boolean), >= 0
- category: string, at least 2 characters after trimming
- inStock: boolean, optional

==============================================================================
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Mapping, Optional, Tuple


def _is_text(value: Any, min_length: int) -> bool:
    return isinstance(value, str) and len(value.strip()) >= min_length


def _is_price(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value) and value >= 0
    except OverflowError:
        return False


class ProductValidator:
    """
    Validator for product create/update payloads.

    Example:
        >>> validator = ProductValidator()
        >>> validator.validate_full({"name": "X", "price": -1})
        ['Name is required and must be at least 2 characters long', ...]
        >>> validator.validate_partial({"price": 5})
        []
    """

    NAME_MIN_LENGTH = 2
    DESCRIPTION_MIN_LENGTH = 5
    CATEGORY_MIN_LENGTH = 2

    def validate_full(self, data: Mapping[str, Any]) -> List[str]:
        """
        Check a creation payload; every field is required.

        Args:
            data: Raw JSON object

        Returns:
            Violations in field order (empty when valid)
        """
        errors: List[str] = []

        if not _is_text(data.get("name"), self.NAME_MIN_LENGTH):
            errors.append(
                f"Name is required and must be at least {self.NAME_MIN_LENGTH} characters long"
            )
        if not _is_text(data.get("description"), self.DESCRIPTION_MIN_LENGTH):
            errors.append(
                "Description is required and must be at least "
                f"{self.DESCRIPTION_MIN_LENGTH} characters long"
            )
        if not _is_price(data.get("price")):
            errors.append("Price is required and must be a positive number")
        if not _is_text(data.get("category"), self.CATEGORY_MIN_LENGTH):
            errors.append(
                f"Category is required and must be at least {self.CATEGORY_MIN_LENGTH} characters long"
            )
        errors.extend(self._check_in_stock(data))

        return errors

    def validate_partial(self, data: Mapping[str, Any]) -> List[str]:
        """
        Check an update payload; only supplied fields are examined.

        Args:
            data: Raw JSON object

        Returns:
            Violations in field order (empty when valid)
        """
        errors: List[str] = []

        if "name" in data and not _is_text(data["name"], self.NAME_MIN_LENGTH):
            errors.append(f"Name must be at least {self.NAME_MIN_LENGTH} characters long")
        if "description" in data and not _is_text(
            data["description"], self.DESCRIPTION_MIN_LENGTH
        ):
            errors.append(
                f"Description must be at least {self.DESCRIPTION_MIN_LENGTH} characters long"
            )
        if "price" in data and not _is_price(data["price"]):
            errors.append("Price must be a positive number")
        if "category" in data and not _is_text(data["category"], self.CATEGORY_MIN_LENGTH):
            errors.append(
                f"Category must be at least {self.CATEGORY_MIN_LENGTH} characters long"
            )
        errors.extend(self._check_in_stock(data))

        return errors

    @staticmethod
    def _check_in_stock(data: Mapping[str, Any]) -> List[str]:
        if "inStock" in data and not isinstance(data["inStock"], bool):
            return ["inStock must be a boolean"]
        return []


class QueryParamsValidator:
    """
    Validator for listing query parameters.

    Parameters arrive as raw strings; empty strings count as absent.
    Only the first violated rule is reported.

    Example:
        >>> validator = QueryParamsValidator()
        >>> is_valid, parsed, error = validator.validate({"minPrice": "100", "maxPrice": "50"})
        >>> print(error)
        'Minimum price cannot be greater than maximum price'
    """

    MIN_LIMIT = 1
    MAX_LIMIT = 100

    def validate(
        self,
        params: Mapping[str, Optional[str]]
    ) -> Tuple[bool, Dict[str, Any], Optional[str]]:
        """
        Validate and parse listing parameters.

        Args:
            params: Raw values keyed by page, limit, minPrice, maxPrice

        Returns:
            Tuple of (is_valid, parsed_values, error_message)
            - If valid: (True, {"page": 2, ...}, None)
            - If invalid: (False, {}, "Error description")
        """
        parsed: Dict[str, Any] = {}

        page = self._parse_int(params.get("page"))
        if params.get("page") and (page is None or page < 1):
            return False, {}, "Page must be a positive integer"
        if page is not None:
            parsed["page"] = page

        limit = self._parse_int(params.get("limit"))
        if params.get("limit") and (
            limit is None or limit < self.MIN_LIMIT or limit > self.MAX_LIMIT
        ):
            return (
                False,
                {},
                f"Limit must be a positive integer between {self.MIN_LIMIT} and {self.MAX_LIMIT}",
            )
        if limit is not None:
            parsed["limit"] = limit

        min_price = self._parse_price(params.get("minPrice"))
        if params.get("minPrice") and min_price is None:
            return False, {}, "Minimum price must be a positive number"

        max_price = self._parse_price(params.get("maxPrice"))
        if params.get("maxPrice") and max_price is None:
            return False, {}, "Maximum price must be a positive number"

        if min_price is not None and max_price is not None and min_price > max_price:
            return False, {}, "Minimum price cannot be greater than maximum price"

        if min_price is not None:
            parsed["min_price"] = min_price
        if max_price is not None:
            parsed["max_price"] = max_price

        return True, parsed, None

    @staticmethod
    def _parse_int(raw: Optional[str]) -> Optional[int]:
        if not raw:
            return None
        try:
            return int(raw)
        except ValueError:
            return None

    @staticmethod
    def _parse_price(raw: Optional[str]) -> Optional[float]:
        if not raw:
            return None
        try:
            value = float(raw)
        except ValueError:
            return None
        if not math.isfinite(value) or value < 0:
            return None
        return value
