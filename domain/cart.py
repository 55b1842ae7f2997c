"""Cart aggregate and its persisted-row view.

The wire format uses the camelCase keys of the carts service
(``customerId``, ``itemId``, ``unitPrice``). Keys this module does not know
about are kept in ``extra`` and written back unchanged.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class CartItem:
    """Line item inside a cart.

    Fields left out of a stored payload stay ``None`` and are not written back.
    """

    id: Optional[str] = None
    item_id: Optional[str] = None
    quantity: Optional[int] = None
    unit_price: Optional[float] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    _KNOWN_KEYS = ("id", "itemId", "quantity", "unitPrice")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(self.extra)
        for key, value in (
            ("id", self.id),
            ("itemId", self.item_id),
            ("quantity", self.quantity),
            ("unitPrice", self.unit_price),
        ):
            if value is not None:
                data[key] = value
            else:
                data.pop(key, None)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartItem":
        if not isinstance(data, dict):
            raise TypeError(f"cart item must be an object, got {type(data).__name__}")
        return cls(
            id=data.get("id"),
            item_id=data.get("itemId"),
            quantity=data.get("quantity"),
            unit_price=data.get("unitPrice"),
            extra={k: v for k, v in data.items() if k not in cls._KNOWN_KEYS},
        )


@dataclass
class Cart:
    """Shopping cart aggregate.

    Attributes:
        id: Cart identifier, also the primary key of the stored row
        customer_id: Owning customer, indexed for lookup (optional)
        items: Line items
        extra: Payload keys passed through untouched
    """

    id: str
    customer_id: Optional[str] = None
    items: List[CartItem] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    _KNOWN_KEYS = ("id", "customerId", "items")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(self.extra)
        data.update(
            {
                "id": self.id,
                "customerId": self.customer_id,
                "items": [item.to_dict() for item in self.items],
            }
        )
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Cart":
        if not isinstance(data, dict):
            raise TypeError(f"cart payload must be an object, got {type(data).__name__}")
        if "id" not in data:
            raise KeyError("cart payload has no 'id'")
        items = data.get("items") or []
        if not isinstance(items, list):
            raise TypeError("cart 'items' must be a list")
        return cls(
            id=data["id"],
            customer_id=data.get("customerId"),
            items=[CartItem.from_dict(item) for item in items],
            extra={k: v for k, v in data.items() if k not in cls._KNOWN_KEYS},
        )


@dataclass(frozen=True)
class CartRecord:
    """A stored cart row together with its bookkeeping columns."""

    id: str
    cart: Cart
    version: str
    last_modified: datetime
    created_on: datetime


__all__ = ["Cart", "CartItem", "CartRecord"]
