"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.  These are
the contracts between the API layer (DRF Serializers) and the Service
layer.  DTOs are immutable (``frozen=True``).

Quantities are *not* range-checked here: the service owns that rule and
reports it as ``InvalidQuantity`` no matter who the caller is.
"""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict


class OrderItemRequestDTO(BaseModel):
    """One candidate line: a product and how many of it."""

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    quantity: int
