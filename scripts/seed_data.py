from __future__ import annotations

import argparse

from services.api.app.db.database import db_session
from services.api.app.db.init_db import init_db
from services.api.app.db.models import PricingConfig, Vendor
from services.api.app.services.pricing import DEFAULT_RATES_PAISE, PricingRates, set_pricing
from services.api.app.services.vendor_auth import create_vendor


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed minimal Printdrop data")
    parser.add_argument("--vendor-username", default="campus-print")
    parser.add_argument("--vendor-password", default="change-me")
    parser.add_argument("--vendor-shop-name", default="Campus Print Shop")
    parser.add_argument("--vendor-email", default=None)
    parser.add_argument("--vendor-phone", default=None)
    args = parser.parse_args()

    init_db()

    db = db_session()
    try:
        if db.query(PricingConfig).limit(1).count() == 0:
            set_pricing(
                db,
                PricingRates(
                    bw_single=DEFAULT_RATES_PAISE["bw_single"],
                    bw_double=DEFAULT_RATES_PAISE["bw_double"],
                    color_single=DEFAULT_RATES_PAISE["color_single"],
                    color_double=DEFAULT_RATES_PAISE["color_double"],
                    delivery_fee=DEFAULT_RATES_PAISE["delivery_fee"],
                ),
            )
            print("Seeded default pricing")

        if db.query(Vendor).filter(Vendor.username == args.vendor_username).first() is None:
            vendor = create_vendor(
                db,
                username=args.vendor_username,
                password=args.vendor_password,
                shop_name=args.vendor_shop_name,
                contact_email=args.vendor_email,
                contact_phone=args.vendor_phone,
            )
            print(f"Seeded vendor={vendor.username} id={vendor.id}")
    finally:
        db.close()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
