"""Product domain exceptions."""

from __future__ import annotations

from shared.domain.exceptions import InvalidArgument


class InvalidPrice(InvalidArgument):
    """A product price is missing, non-positive or above the ceiling."""

    code = "invalid_price"
