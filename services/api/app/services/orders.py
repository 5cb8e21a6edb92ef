"""Order lifecycle.

pending -> accepted -> printing -> out_for_delivery -> delivered

Accepting is the only way out of ``pending`` and is claimed with a conditional update,
so two vendors racing for the same order cannot both win. Later moves may skip stages
but never go backward.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any
from uuid import uuid4

from packages.shared.schemas.events import ActorTypeV1, EventTypeV1
from packages.shared.schemas.order_v1 import (
    STATUS_SEQUENCE,
    VENDOR_SETTABLE_STATUSES,
    ColorTypeV1,
    OrderStatusV1,
    status_rank,
)
from services.api.app.db.models import Order, OrderEvent, OrderFile, User, Vendor, utcnow
from services.api.app.services.errors import (
    AlreadyAccepted,
    InvalidTransition,
    NotYourOrder,
    OrderNotFound,
    UserNotFound,
    ValidationError,
)
from services.api.app.services.files import is_owned_by
from services.api.app.services.pricing import latest_pricing, price
from sqlalchemy import case, or_, update
from sqlalchemy.orm import Session, selectinload

logger = logging.getLogger(__name__)

_ORDER_LOADS = (
    selectinload(Order.files),
    selectinload(Order.user),
    selectinload(Order.vendor),
)


@dataclass(frozen=True, slots=True)
class OrderFileSpec:
    file_key: str
    original_filename: str
    page_count: int
    color_type: ColorTypeV1
    is_double_sided: bool
    pages_per_side: int = 1
    copies: int = 1
    comments: str | None = None


@dataclass(frozen=True, slots=True)
class DeliveryDetails:
    hostel: str
    gate: str
    phone: str
    expected_time: str | None = None
    notes: str | None = None


@dataclass(frozen=True, slots=True)
class CreatedOrder:
    order_id: str
    total_price_paise: int
    status: OrderStatusV1
    vendor_id: str | None


def _log_event(
    db: Session,
    *,
    order_id: str,
    actor_type: ActorTypeV1,
    actor_id: str,
    event_type: EventTypeV1,
    payload: dict[str, Any],
) -> None:
    db.add(
        OrderEvent(
            id=uuid4().hex,
            order_id=order_id,
            actor_type=actor_type.value,
            actor_id=actor_id,
            event_type=event_type.value,
            payload_json=payload,
        )
    )


def _validate_files(files: Sequence[OrderFileSpec], provider_user_id: str) -> None:
    if not files:
        raise ValidationError("At least one file is required")

    for f in files:
        if not f.file_key or not f.original_filename:
            raise ValidationError("Each file needs a fileKey and originalFilename")
        if not is_owned_by(f.file_key, provider_user_id):
            raise ValidationError(f"File does not belong to you: {f.file_key}")
        if f.page_count < 1:
            raise ValidationError("pageCount must be at least 1")
        if f.pages_per_side not in {1, 2, 4}:
            raise ValidationError("pagesPerSide must be 1, 2 or 4")
        if not 1 <= f.copies <= 100:
            raise ValidationError("copies must be between 1 and 100")


def _validate_delivery(delivery: DeliveryDetails) -> None:
    missing = [
        name
        for name, value in (
            ("deliveryHostel", delivery.hostel),
            ("deliveryGate", delivery.gate),
            ("deliveryPhone", delivery.phone),
        )
        if not (value or "").strip()
    ]
    if missing:
        raise ValidationError(f"Missing delivery fields: {', '.join(missing)}")


def suggest_vendor(db: Session) -> Vendor | None:
    return (
        db.query(Vendor)
        .filter(Vendor.is_active.is_(True))
        .order_by(Vendor.current_load.asc(), Vendor.created_at.asc())
        .first()
    )


def create_order(
    db: Session,
    *,
    provider_user_id: str,
    files: Sequence[OrderFileSpec],
    delivery: DeliveryDetails,
) -> CreatedOrder:
    """Price and persist an order with its files in a single transaction."""

    _validate_files(files, provider_user_id)
    _validate_delivery(delivery)

    user = db.query(User).filter(User.provider_user_id == provider_user_id).first()
    if user is None:
        raise UserNotFound()

    total = price(files, latest_pricing(db))
    vendor = suggest_vendor(db)

    order_id = uuid4().hex
    try:
        db.add(
            Order(
                id=order_id,
                user_id=user.id,
                vendor_id=vendor.id if vendor else None,
                status=OrderStatusV1.PENDING.value,
                total_price_paise=total,
                delivery_hostel=delivery.hostel.strip(),
                delivery_gate=delivery.gate.strip(),
                delivery_phone=delivery.phone.strip(),
                expected_time=delivery.expected_time or None,
                notes=delivery.notes or None,
            )
        )
        # Parent row first so the file foreign keys resolve on flush.
        db.flush()
        for position, f in enumerate(files):
            db.add(
                OrderFile(
                    id=uuid4().hex,
                    order_id=order_id,
                    position=position,
                    file_key=f.file_key,
                    original_filename=f.original_filename,
                    page_count=f.page_count,
                    color_type=ColorTypeV1(f.color_type).value,
                    is_double_sided=f.is_double_sided,
                    pages_per_side=f.pages_per_side,
                    copies=f.copies,
                    comments=f.comments or None,
                )
            )
        _log_event(
            db,
            order_id=order_id,
            actor_type=ActorTypeV1.USER,
            actor_id=user.id,
            event_type=EventTypeV1.ORDER_CREATED,
            payload={"total_price_paise": total, "file_count": len(files)},
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Order %s created user=%s files=%d total_paise=%d suggested_vendor=%s",
        order_id,
        user.id,
        len(files),
        total,
        vendor.id if vendor else None,
    )
    return CreatedOrder(
        order_id=order_id,
        total_price_paise=total,
        status=OrderStatusV1.PENDING,
        vendor_id=vendor.id if vendor else None,
    )


def accept_order(db: Session, *, order_id: str, vendor_id: str) -> None:
    result = db.execute(
        update(Order)
        .where(Order.id == order_id, Order.status == OrderStatusV1.PENDING.value)
        .values(status=OrderStatusV1.ACCEPTED.value, vendor_id=vendor_id, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )

    if result.rowcount == 0:
        db.rollback()
        if db.get(Order, order_id) is None:
            raise OrderNotFound(order_id)
        logger.info("Vendor %s lost accept race or re-accepted order %s", vendor_id, order_id)
        raise AlreadyAccepted(order_id)

    db.execute(
        update(Vendor)
        .where(Vendor.id == vendor_id)
        .values(current_load=Vendor.current_load + 1)
        .execution_options(synchronize_session=False)
    )
    _log_event(
        db,
        order_id=order_id,
        actor_type=ActorTypeV1.VENDOR,
        actor_id=vendor_id,
        event_type=EventTypeV1.ORDER_ACCEPTED,
        payload={"status": OrderStatusV1.ACCEPTED.value},
    )
    db.commit()
    logger.info("Order %s accepted by vendor %s", order_id, vendor_id)


def advance_status(
    db: Session, *, order_id: str, vendor_id: str, status: OrderStatusV1 | str
) -> None:
    """Move an accepted order forward. Skipping stages is allowed; going back is not."""

    try:
        requested = OrderStatusV1(status)
    except ValueError as e:
        raise ValidationError(f"Unknown status: {status}") from e
    if requested not in VENDOR_SETTABLE_STATUSES:
        raise ValidationError(f"Status cannot be set directly: {requested.value}")

    order = db.get(Order, order_id)
    if order is None:
        raise OrderNotFound(order_id)

    if order.vendor_id != vendor_id:
        logger.warning("Vendor %s tried to update order %s", vendor_id, order_id)
        raise NotYourOrder(order_id)

    current = OrderStatusV1(order.status)
    if current == OrderStatusV1.PENDING or status_rank(requested) <= status_rank(current):
        raise InvalidTransition(current.value, requested.value)

    result = db.execute(
        update(Order)
        .where(
            Order.id == order_id,
            Order.vendor_id == vendor_id,
            Order.status == current.value,
        )
        .values(status=requested.value, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        # Someone moved it between our read and write.
        db.rollback()
        refreshed = db.get(Order, order_id)
        raise InvalidTransition(refreshed.status if refreshed else current.value, requested.value)

    if requested == OrderStatusV1.DELIVERED:
        db.execute(
            update(Vendor)
            .where(Vendor.id == vendor_id, Vendor.current_load > 0)
            .values(current_load=Vendor.current_load - 1)
            .execution_options(synchronize_session=False)
        )

    _log_event(
        db,
        order_id=order_id,
        actor_type=ActorTypeV1.VENDOR,
        actor_id=vendor_id,
        event_type=EventTypeV1.ORDER_STATUS_CHANGED,
        payload={"from": current.value, "to": requested.value},
    )
    db.commit()
    logger.info("Order %s moved %s -> %s", order_id, current.value, requested.value)


def list_user_orders(db: Session, *, user_id: str) -> list[Order]:
    return (
        db.query(Order)
        .options(*_ORDER_LOADS)
        .filter(Order.user_id == user_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


def get_user_order(db: Session, *, user_id: str, order_id: str) -> Order:
    order = (
        db.query(Order)
        .options(*_ORDER_LOADS)
        .filter(Order.id == order_id, Order.user_id == user_id)
        .first()
    )
    if order is None:
        raise OrderNotFound(order_id)
    return order


def _vendor_visible(vendor_id: str):
    return or_(Order.vendor_id == vendor_id, Order.status == OrderStatusV1.PENDING.value)


_STATUS_RANK = case(
    {s.value: i for i, s in enumerate(STATUS_SEQUENCE)},
    value=Order.status,
    else_=len(STATUS_SEQUENCE),
)


def list_vendor_orders(db: Session, *, vendor_id: str) -> list[Order]:
    """Claimable queue plus the vendor's own orders, pending first, oldest first per status."""

    return (
        db.query(Order)
        .options(*_ORDER_LOADS)
        .filter(_vendor_visible(vendor_id))
        .order_by(_STATUS_RANK.asc(), Order.created_at.asc(), Order.id.asc())
        .all()
    )


def get_vendor_order(db: Session, *, vendor_id: str, order_id: str) -> Order:
    order = (
        db.query(Order)
        .options(*_ORDER_LOADS)
        .filter(Order.id == order_id, _vendor_visible(vendor_id))
        .first()
    )
    if order is None:
        raise OrderNotFound(order_id)
    return order


def list_order_events(db: Session, *, order_id: str) -> list[OrderEvent]:
    return (
        db.query(OrderEvent)
        .filter(OrderEvent.order_id == order_id)
        .order_by(OrderEvent.created_at.asc(), OrderEvent.id.asc())
        .all()
    )
