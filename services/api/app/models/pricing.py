from __future__ import annotations

from pydantic import BaseModel


class PricingOut(BaseModel):
    """Current per-page rates and delivery fee, in rupees."""

    bw_single_page: float
    bw_double_page: float
    color_single_page: float
    color_double_page: float
    delivery_fee: float
