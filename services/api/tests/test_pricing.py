from __future__ import annotations

import pytest
from conftest import seed_pricing
from packages.shared.schemas.order_v1 import ColorTypeV1
from services.api.app.services.errors import PricingUnavailable
from services.api.app.services.orders import OrderFileSpec
from services.api.app.services.pricing import (
    PricingRates,
    effective_pages,
    latest_pricing,
    price,
)


def _file(pages: int, color: str = "bw", duplex: bool = False, copies: int = 1) -> OrderFileSpec:
    return OrderFileSpec(
        file_key="uploads/u-1/1-a-doc.pdf",
        original_filename="doc.pdf",
        page_count=pages,
        color_type=ColorTypeV1(color),
        is_double_sided=duplex,
        copies=copies,
    )


RATES = PricingRates(bw_single=2, bw_double=1, color_single=10, color_double=8, delivery_fee=20)


def test_single_sided_bw_example() -> None:
    assert price([_file(10)], RATES) == 40


def test_double_sided_color_with_copies_example() -> None:
    assert price([_file(10, color="color", duplex=True, copies=2)], RATES) == 100


@pytest.mark.parametrize(
    ("pages", "duplex", "expected"),
    [(1, False, 1), (1, True, 1), (7, True, 4), (8, True, 4), (7, False, 7)],
)
def test_effective_pages_rounds_duplex_up(pages: int, duplex: bool, expected: int) -> None:
    assert effective_pages(pages, duplex) == expected


def test_price_sums_files_and_adds_delivery_once() -> None:
    files = [
        _file(3, duplex=True),  # 2 sheets * 1
        _file(5, color="color"),  # 5 * 10
        _file(2, copies=3),  # 2 * 2 * 3
    ]
    assert price(files, RATES) == 2 + 50 + 12 + 20


def test_price_is_deterministic() -> None:
    files = [_file(11, color="color", duplex=True, copies=4), _file(9)]
    assert price(files, RATES) == price(list(files), RATES)


def test_default_rates_match_client_estimate() -> None:
    # Client estimate: bw 2 / 1.5, color 10 / 8 rupees, delivery 20.
    rates = PricingRates(
        bw_single=200, bw_double=150, color_single=1000, color_double=800, delivery_fee=2000
    )
    assert price([_file(3, duplex=True)], rates) == 2 * 150 + 2000


def test_latest_pricing_requires_a_row(db) -> None:
    with pytest.raises(PricingUnavailable):
        latest_pricing(db)


def test_latest_pricing_uses_newest_row(db) -> None:
    seed_pricing(db, bw_single=200)
    seed_pricing(db, bw_single=300)

    assert latest_pricing(db).bw_single == 300


def test_pricing_endpoint_reports_rupees(client, db) -> None:
    seed_pricing(db)

    response = client.get("/api/pricing")
    assert response.status_code == 200
    assert response.json() == {
        "bw_single_page": 2.0,
        "bw_double_page": 1.5,
        "color_single_page": 10.0,
        "color_double_page": 8.0,
        "delivery_fee": 20.0,
    }


def test_pricing_endpoint_without_config_is_500(client) -> None:
    response = client.get("/api/pricing")
    assert response.status_code == 500
    assert response.json() == {"error": "Pricing not configured"}
