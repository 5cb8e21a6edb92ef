from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response
from services.api.app.db.deps import get_db
from services.api.app.db.models import Vendor
from services.api.app.identity.deps import (
    clear_vendor_cookie,
    current_vendor_id,
    set_vendor_cookie,
)
from services.api.app.models.order import OrderOut, OrderStatusUpdateRequest, SuccessResponse
from services.api.app.models.vendor import VendorLoginRequest, VendorProfile
from services.api.app.routers.order import order_to_out
from services.api.app.services import orders, vendor_auth
from services.api.app.services.errors import VendorNotFound
from sqlalchemy.orm import Session

router = APIRouter(prefix="/api/vendor")


@router.post("/login", response_model=SuccessResponse)
def login(
    payload: VendorLoginRequest, response: Response, db: Session = Depends(get_db)
) -> SuccessResponse:
    token = vendor_auth.login(db, payload.username, payload.password)
    set_vendor_cookie(response, token)
    return SuccessResponse()


@router.post("/logout", response_model=SuccessResponse)
def logout(request: Request, response: Response, db: Session = Depends(get_db)) -> SuccessResponse:
    vendor_auth.logout(db, request.cookies.get(vendor_auth.VENDOR_SESSION_COOKIE))
    clear_vendor_cookie(response)
    return SuccessResponse()


@router.get("/me", response_model=VendorProfile)
def me(vendor_id: str = Depends(current_vendor_id), db: Session = Depends(get_db)) -> VendorProfile:
    vendor = db.get(Vendor, vendor_id)
    if vendor is None:
        raise VendorNotFound()

    return VendorProfile(
        id=vendor.id,
        shop_name=vendor.shop_name,
        contact_email=vendor.contact_email,
        contact_phone=vendor.contact_phone,
    )


@router.get("/orders", response_model=list[OrderOut])
def list_orders(
    vendor_id: str = Depends(current_vendor_id), db: Session = Depends(get_db)
) -> list[OrderOut]:
    return [
        order_to_out(o, for_vendor=True)
        for o in orders.list_vendor_orders(db, vendor_id=vendor_id)
    ]


@router.get("/orders/{order_id}", response_model=OrderOut)
def get_order(
    order_id: str, vendor_id: str = Depends(current_vendor_id), db: Session = Depends(get_db)
) -> OrderOut:
    order = orders.get_vendor_order(db, vendor_id=vendor_id, order_id=order_id)
    return order_to_out(order, for_vendor=True)


@router.post("/orders/{order_id}/accept", response_model=SuccessResponse)
def accept_order(
    order_id: str, vendor_id: str = Depends(current_vendor_id), db: Session = Depends(get_db)
) -> SuccessResponse:
    orders.accept_order(db, order_id=order_id, vendor_id=vendor_id)
    return SuccessResponse()


@router.patch("/orders/{order_id}/status", response_model=SuccessResponse)
def update_status(
    order_id: str,
    payload: OrderStatusUpdateRequest,
    vendor_id: str = Depends(current_vendor_id),
    db: Session = Depends(get_db),
) -> SuccessResponse:
    orders.advance_status(db, order_id=order_id, vendor_id=vendor_id, status=payload.status)
    return SuccessResponse()
