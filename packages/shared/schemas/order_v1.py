"""Shared order schema (v1).

Wire values shared between the API and the student/vendor web clients.
They should remain stable once shipped.
"""

from __future__ import annotations

from enum import Enum


class OrderStatusV1(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    PRINTING = "printing"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"


class ColorTypeV1(str, Enum):
    BW = "bw"
    COLOR = "color"


# Fulfillment pipeline order. Also the vendor queue ranking.
STATUS_SEQUENCE: tuple[OrderStatusV1, ...] = (
    OrderStatusV1.PENDING,
    OrderStatusV1.ACCEPTED,
    OrderStatusV1.PRINTING,
    OrderStatusV1.OUT_FOR_DELIVERY,
    OrderStatusV1.DELIVERED,
)

# Statuses a vendor may request through the status endpoint.
VENDOR_SETTABLE_STATUSES: frozenset[OrderStatusV1] = frozenset(
    {
        OrderStatusV1.PRINTING,
        OrderStatusV1.OUT_FOR_DELIVERY,
        OrderStatusV1.DELIVERED,
    }
)


def status_rank(status: OrderStatusV1 | str) -> int:
    return STATUS_SEQUENCE.index(OrderStatusV1(status))
