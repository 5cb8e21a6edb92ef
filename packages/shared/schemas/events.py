"""Shared event schema (v1).

The backend stores an append-only order event log. Clients can consume these events to
render an order timeline.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ActorTypeV1(str, Enum):
    USER = "user"
    VENDOR = "vendor"


class EventTypeV1(str, Enum):
    ORDER_CREATED = "ORDER_CREATED"
    ORDER_ACCEPTED = "ORDER_ACCEPTED"
    ORDER_STATUS_CHANGED = "ORDER_STATUS_CHANGED"


class OrderEventV1(BaseModel):
    id: str
    order_id: str

    actor_type: ActorTypeV1
    actor_id: str

    event_type: EventTypeV1
    payload: dict[str, Any] = Field(default_factory=dict)
    created_at: str
