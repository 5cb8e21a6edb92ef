from __future__ import annotations

import argparse
import getpass

from services.api.app.db.database import db_session
from services.api.app.db.init_db import init_db
from services.api.app.services.errors import ValidationError
from services.api.app.services.vendor_auth import create_vendor


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a Printdrop vendor account")
    parser.add_argument("username")
    parser.add_argument("--shop-name", required=True)
    parser.add_argument("--email", default=None)
    parser.add_argument("--phone", default=None)
    parser.add_argument("--inactive", action="store_true")
    args = parser.parse_args()

    password = getpass.getpass("Vendor password: ")
    if password != getpass.getpass("Repeat password: "):
        print("Passwords do not match.")
        return 1

    init_db()

    db = db_session()
    try:
        vendor = create_vendor(
            db,
            username=args.username,
            password=password,
            shop_name=args.shop_name,
            contact_email=args.email,
            contact_phone=args.phone,
            is_active=not args.inactive,
        )
        print(f"Created vendor={vendor.username} id={vendor.id}")
    except ValidationError as e:
        print(e.message)
        return 1
    finally:
        db.close()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
