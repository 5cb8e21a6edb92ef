"""Order pricing.

Amounts are integer paise. The client-side estimate applies the same rounding (duplex
rounds half the page count up), so quotes and charges agree for identical inputs.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from packages.shared.schemas.order_v1 import ColorTypeV1
from services.api.app.db.models import PricingConfig
from services.api.app.services.errors import PricingUnavailable
from sqlalchemy.orm import Session

# Rates matching the web client's built-in estimate, used by the seed script.
DEFAULT_RATES_PAISE = {
    "bw_single": 200,
    "bw_double": 150,
    "color_single": 1000,
    "color_double": 800,
    "delivery_fee": 2000,
}


class PricedFile(Protocol):
    page_count: int
    color_type: ColorTypeV1 | str
    is_double_sided: bool
    copies: int


@dataclass(frozen=True, slots=True)
class PricingRates:
    bw_single: int
    bw_double: int
    color_single: int
    color_double: int
    delivery_fee: int

    @classmethod
    def from_row(cls, row: PricingConfig) -> PricingRates:
        return cls(
            bw_single=row.bw_single_page_paise,
            bw_double=row.bw_double_page_paise,
            color_single=row.color_single_page_paise,
            color_double=row.color_double_page_paise,
            delivery_fee=row.delivery_fee_paise,
        )

    def page_rate(self, color_type: ColorTypeV1 | str, double_sided: bool) -> int:
        if ColorTypeV1(color_type) == ColorTypeV1.COLOR:
            return self.color_double if double_sided else self.color_single
        return self.bw_double if double_sided else self.bw_single


def effective_pages(page_count: int, double_sided: bool) -> int:
    return math.ceil(page_count / 2) if double_sided else page_count


def file_cost(file: PricedFile, rates: PricingRates) -> int:
    pages = effective_pages(file.page_count, file.is_double_sided)
    return pages * rates.page_rate(file.color_type, file.is_double_sided) * file.copies


def price(files: Iterable[PricedFile], rates: PricingRates) -> int:
    return sum(file_cost(f, rates) for f in files) + rates.delivery_fee


def latest_pricing(db: Session) -> PricingRates:
    row = db.query(PricingConfig).order_by(PricingConfig.id.desc()).first()
    if row is None:
        raise PricingUnavailable()
    return PricingRates.from_row(row)


def set_pricing(db: Session, rates: PricingRates) -> PricingConfig:
    """Append a pricing row. Orders created afterwards use it; existing totals are untouched."""

    row = PricingConfig(
        bw_single_page_paise=rates.bw_single,
        bw_double_page_paise=rates.bw_double,
        color_single_page_paise=rates.color_single,
        color_double_page_paise=rates.color_double,
        delivery_fee_paise=rates.delivery_fee,
    )
    db.add(row)
    db.commit()
    return row


def paise_to_rupees(amount_paise: int) -> float:
    return amount_paise / 100
