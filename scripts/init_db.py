#!/usr/bin/env python
"""Initialize database with the standard tariff registries."""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from exceptions import TariffValidationError
from models import ContainerClass, TariffTier, init_db
from models.database import SessionLocal
from repositories import TariffRepository

COST_TARIFFS = [
    ("Maersk", ContainerClass.DRY, [(1, 5, 75.0), (6, 10, 150.0), (11, None, 300.0)]),
    ("Maersk", ContainerClass.REEFER, [(1, 3, 150.0), (4, 7, 300.0), (8, None, 600.0)]),
    ("MSC", ContainerClass.DRY, [(1, 4, 80.0), (5, 9, 160.0), (10, None, 320.0)]),
]

SALE_TARIFFS = [
    (ContainerClass.DRY, [(1, 5, 100.0), (6, 10, 200.0), (11, None, 400.0)]),
    (ContainerClass.REEFER, [(1, 3, 200.0), (4, 7, 400.0), (8, None, 800.0)]),
    (ContainerClass.SPECIAL, [(1, 3, 250.0), (4, 7, 500.0), (8, None, 1000.0)]),
]


def _tiers(rows):
    return [TariffTier(start=start, end=end, rate=rate) for start, end, rate in rows]


def seed_tariffs():
    """Register the standard cost and sale tariffs, skipping existing ones."""
    db = SessionLocal()
    try:
        repository = TariffRepository(db)

        for carrier, container_class, rows in COST_TARIFFS:
            try:
                repository.create_cost_tariff(carrier, container_class, _tiers(rows))
                print(f"✅ Cost tariff {carrier}/{container_class.value}")
            except TariffValidationError as e:
                print(f"Skipped cost tariff {carrier}/{container_class.value}: {e}")

        for container_class, rows in SALE_TARIFFS:
            try:
                repository.create_sale_tariff(container_class, _tiers(rows))
                print(f"✅ Sale tariff {container_class.value}")
            except TariffValidationError as e:
                print(f"Skipped sale tariff {container_class.value}: {e}")
    finally:
        db.close()


def main():
    """Initialize database."""
    print("🗄️  Initializing database...")

    try:
        init_db()
        print("✅ Database tables created")

        seed_tariffs()

        print("✅ Database initialization complete!")

    except Exception as e:
        print(f"❌ Error initializing database: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
