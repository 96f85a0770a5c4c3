#!/usr/bin/env python3
"""Create the first StockNexus administrator, or promote an existing account.

    python create_admin.py admin@example.com --name "Lab Admin" --password s3cret
    python create_admin.py existing@example.com
"""

import argparse
import getpass
import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from app.db.database import SessionLocal
from app.models.department import Department
from app.services.admin_bootstrap import AdminBootstrapError, bootstrap_admin


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("email")
    parser.add_argument("--name", dest="full_name")
    parser.add_argument("--password", help="create the account with this password")
    parser.add_argument("--prompt-password", action="store_true", help="read the password from the terminal")
    parser.add_argument("--department", choices=[d.value for d in Department])
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    password = args.password
    if args.prompt_password:
        password = getpass.getpass("Password: ")

    db = SessionLocal()
    try:
        result = bootstrap_admin(
            db,
            email=args.email,
            full_name=args.full_name,
            password=password,
            department=Department(args.department) if args.department else None,
        )
    except AdminBootstrapError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        db.close()

    action = "Created" if result.account_created else "Promoted"
    print(f"{action} admin {result.email} (id {result.user_id})")
    if result.requests_approved:
        print(f"Marked {result.requests_approved} registration request(s) approved")
    return 0


if __name__ == "__main__":
    sys.exit(main())
