"""Marketplace management CLI.

Creates and drops the database schema for SQL-backed providers and loads the
demo data set (two suppliers, one vendor, four products).

Usage:
    python src/manage.py setup-db    # Create all tables
    python src/manage.py drop-db     # Drop all tables
    python src/manage.py seed-demo   # Register demo users and list their products
"""

import argparse
import sys

DEMO_SUPPLIERS = [
    {
        "email": "rajesh@freshveggies.com",
        "name": "Rajesh Kumar",
        "phone": "+91 98765 43210",
        "location": "Azadpur Mandi, Delhi",
        "business_type": "wholesaler",
        "products": [
            {
                "name": "Fresh Tomatoes",
                "category": "Vegetables",
                "description": "Farm fresh red tomatoes, perfect for cooking",
                "unit_price": 25.0,
                "unit": "kg",
                "available_quantity": 500.0,
                "minimum_order": 10.0,
            },
            {
                "name": "Yellow Onions",
                "category": "Vegetables",
                "description": "Fresh yellow onions, ideal for cooking",
                "unit_price": 20.0,
                "unit": "kg",
                "available_quantity": 300.0,
                "minimum_order": 5.0,
            },
        ],
    },
    {
        "email": "priya@organicfarm.com",
        "name": "Priya Sharma",
        "phone": "+91 87654 32109",
        "location": "Gurgaon, Haryana",
        "business_type": "farm",
        "products": [
            {
                "name": "Organic Spinach",
                "category": "Leafy Greens",
                "description": "Fresh organic spinach leaves",
                "unit_price": 40.0,
                "unit": "kg",
                "available_quantity": 100.0,
                "minimum_order": 2.0,
            },
            {
                "name": "Green Chilies",
                "category": "Spices",
                "description": "Fresh green chilies for that perfect spice",
                "unit_price": 60.0,
                "unit": "kg",
                "available_quantity": 50.0,
                "minimum_order": 1.0,
            },
        ],
    },
]

DEMO_VENDORS = [
    {
        "email": "ravi@chatstall.com",
        "name": "Ravi Patel",
        "phone": "+91 76543 21098",
        "location": "Connaught Place, Delhi",
        "stall_name": "Ravi's Chat Corner",
    },
]


def setup_database():
    """Create the database schema for the marketplace domain."""
    from marketplace.domain import marketplace
    from marketplace.utils.db import setup_db

    print("Initializing marketplace domain...")
    marketplace.init()
    print("Creating marketplace database schema...")
    setup_db(marketplace)
    print("Done.")


def drop_database():
    """Drop the database schema for the marketplace domain."""
    from marketplace.domain import marketplace
    from marketplace.utils.db import drop_db

    print("Initializing marketplace domain...")
    marketplace.init()
    print("Dropping marketplace database schema...")
    drop_db(marketplace)
    print("Done.")


def _register(repo, role, **details):
    from marketplace.accounts.registration import RegisterUser
    from protean.utils.globals import current_domain

    existing = repo.find_by_email(details["email"])
    if existing is not None:
        print(f"  {details['email']} already registered, skipping.")
        return None

    user_id = current_domain.process(RegisterUser(role=role, **details), asynchronous=False)
    print(f"  Registered {role} {details['name']} ({user_id})")
    return user_id


def seed_demo():
    """Register the demo suppliers and vendor and list the suppliers' products."""
    from marketplace.accounts.user import User
    from marketplace.catalogue.creation import CreateProduct
    from marketplace.domain import marketplace
    from protean.utils.globals import current_domain

    print("Initializing marketplace domain...")
    marketplace.init()

    with marketplace.domain_context():
        users = current_domain.repository_for(User)

        print("Seeding suppliers...")
        for supplier in DEMO_SUPPLIERS:
            details = {k: v for k, v in supplier.items() if k != "products"}
            supplier_id = _register(users, "supplier", **details)
            if supplier_id is None:
                continue
            for product in supplier["products"]:
                current_domain.process(CreateProduct(supplier_id=supplier_id, **product), asynchronous=False)
                print(f"    Listed {product['name']}")

        print("Seeding vendors...")
        for vendor in DEMO_VENDORS:
            _register(users, "vendor", **vendor)

    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Marketplace management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("seed-demo", help="Load the demo suppliers, vendor and products")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed-demo":
        seed_demo()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
