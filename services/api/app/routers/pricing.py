from __future__ import annotations

from fastapi import APIRouter, Depends
from services.api.app.db.deps import get_db
from services.api.app.models.pricing import PricingOut
from services.api.app.services.pricing import latest_pricing, paise_to_rupees
from sqlalchemy.orm import Session

router = APIRouter(prefix="/api")


@router.get("/pricing", response_model=PricingOut)
def get_pricing(db: Session = Depends(get_db)) -> PricingOut:
    rates = latest_pricing(db)
    return PricingOut(
        bw_single_page=paise_to_rupees(rates.bw_single),
        bw_double_page=paise_to_rupees(rates.bw_double),
        color_single_page=paise_to_rupees(rates.color_single),
        color_double_page=paise_to_rupees(rates.color_double),
        delivery_fee=paise_to_rupees(rates.delivery_fee),
    )
