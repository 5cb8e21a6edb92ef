from __future__ import annotations

from fastapi import APIRouter, Depends
from packages.shared.schemas.events import OrderEventV1
from services.api.app.db.deps import get_db
from services.api.app.db.models import Order, User
from services.api.app.identity.base import Identity
from services.api.app.identity.deps import current_identity, current_user
from services.api.app.models.order import (
    OrderCreateRequest,
    OrderCreateResponse,
    OrderFileInput,
    OrderFileOut,
    OrderOut,
    OrderQuoteRequest,
    OrderQuoteResponse,
)
from services.api.app.services import orders
from services.api.app.services.pricing import latest_pricing, paise_to_rupees, price
from sqlalchemy.orm import Session

router = APIRouter(prefix="/api")


def order_to_out(order: Order, *, for_vendor: bool = False) -> OrderOut:
    out = OrderOut(
        id=order.id,
        status=order.status,
        total_price=paise_to_rupees(order.total_price_paise),
        delivery_hostel=order.delivery_hostel,
        delivery_gate=order.delivery_gate,
        delivery_phone=order.delivery_phone,
        expected_time=order.expected_time,
        notes=order.notes,
        created_at=order.created_at.isoformat(),
        updated_at=order.updated_at.isoformat(),
        files=[
            OrderFileOut(
                id=f.id,
                file_key=f.file_key,
                original_filename=f.original_filename,
                page_count=f.page_count,
                color_type=f.color_type,
                is_double_sided=f.is_double_sided,
                pages_per_side=f.pages_per_side,
                copies=f.copies,
                comments=f.comments,
            )
            for f in order.files
        ],
    )

    if for_vendor:
        if order.user is not None:
            out.user_email = order.user.email
            out.user_name = order.user.name
    elif order.vendor is not None:
        out.vendor_name = order.vendor.shop_name
        out.vendor_phone = order.vendor.contact_phone

    return out


def _file_spec(f: OrderFileInput) -> orders.OrderFileSpec:
    return orders.OrderFileSpec(
        file_key=f.file_key,
        original_filename=f.original_filename,
        page_count=f.page_count,
        color_type=f.color_type,
        is_double_sided=f.is_double_sided,
        pages_per_side=f.pages_per_side,
        copies=f.copies,
        comments=f.comments,
    )


@router.post("/orders/quote", response_model=OrderQuoteResponse)
def quote_order(
    payload: OrderQuoteRequest,
    identity: Identity = Depends(current_identity),
    db: Session = Depends(get_db),
) -> OrderQuoteResponse:
    del identity
    total = price(payload.files, latest_pricing(db))
    return OrderQuoteResponse(total_price=paise_to_rupees(total))


@router.post("/orders", response_model=OrderCreateResponse)
def create_order(
    payload: OrderCreateRequest,
    identity: Identity = Depends(current_identity),
    db: Session = Depends(get_db),
) -> OrderCreateResponse:
    created = orders.create_order(
        db,
        provider_user_id=identity.id,
        files=[_file_spec(f) for f in payload.files],
        delivery=orders.DeliveryDetails(
            hostel=payload.delivery_hostel,
            gate=payload.delivery_gate,
            phone=payload.delivery_phone,
            expected_time=payload.expected_time,
            notes=payload.notes,
        ),
    )

    return OrderCreateResponse(
        order_id=created.order_id,
        total_price=paise_to_rupees(created.total_price_paise),
        status=created.status,
    )


@router.get("/orders", response_model=list[OrderOut])
def list_orders(user: User = Depends(current_user), db: Session = Depends(get_db)) -> list[OrderOut]:
    return [order_to_out(o) for o in orders.list_user_orders(db, user_id=user.id)]


@router.get("/orders/{order_id}", response_model=OrderOut)
def get_order(
    order_id: str, user: User = Depends(current_user), db: Session = Depends(get_db)
) -> OrderOut:
    return order_to_out(orders.get_user_order(db, user_id=user.id, order_id=order_id))


@router.get("/orders/{order_id}/events", response_model=list[OrderEventV1])
def get_order_events(
    order_id: str, user: User = Depends(current_user), db: Session = Depends(get_db)
) -> list[OrderEventV1]:
    order = orders.get_user_order(db, user_id=user.id, order_id=order_id)

    return [
        OrderEventV1(
            id=e.id,
            order_id=e.order_id,
            actor_type=e.actor_type,
            actor_id=e.actor_id,
            event_type=e.event_type,
            payload=e.payload_json,
            created_at=e.created_at.isoformat(),
        )
        for e in orders.list_order_events(db, order_id=order.id)
    ]
