"""Seed demo data into the Dress Rental SQLite database."""

from __future__ import annotations

import argparse
import random
import sys
from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = REPO_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from dress_rental.db.connection import get_connection  # noqa: E402
from dress_rental.db.migrations import apply_migrations  # noqa: E402
from dress_rental.domain.models import ConditionStatus, PaymentMethod  # noqa: E402
from dress_rental.logging_config import configure_logging, get_logger  # noqa: E402
from dress_rental.paths import get_db_path  # noqa: E402
from dress_rental.services.auth_service import AuthService  # noqa: E402
from dress_rental.services.customer_service import CustomerService  # noqa: E402
from dress_rental.services.dress_service import DressService  # noqa: E402
from dress_rental.services.errors import ServiceError  # noqa: E402
from dress_rental.services.payment_service import PaymentService  # noqa: E402
from dress_rental.services.rental_service import RentalService  # noqa: E402

DEFAULT_SEED = 42

FIRST_NAMES = [
    "Aisyah", "Nurul", "Siti", "Mei Ling", "Priya", "Farah", "Hui Min",
    "Kavitha", "Amira", "Wei Ying", "Lakshmi", "Zara", "Chloe", "Sofia",
]
LAST_NAMES = [
    "Abdullah", "Tan", "Lim", "Raj", "Ismail", "Wong", "Kumar", "Hassan",
    "Lee", "Ahmad", "Chong", "Nair",
]


@dataclass(frozen=True)
class DressSeed:
    name: str
    category: str
    size: str
    color: str
    rental_price: float


DRESS_SEEDS = [
    DressSeed("Ivory Lace Gown", "Wedding", "M", "Ivory", 120.0),
    DressSeed("Pearl Mermaid Gown", "Wedding", "S", "White", 150.0),
    DressSeed("Champagne Ball Gown", "Wedding", "L", "Champagne", 140.0),
    DressSeed("Emerald Satin Baju Kurung", "Traditional", "M", "Emerald", 60.0),
    DressSeed("Royal Blue Kebaya", "Traditional", "S", "Blue", 55.0),
    DressSeed("Crimson Cheongsam", "Traditional", "M", "Red", 50.0),
    DressSeed("Gold Saree Set", "Traditional", "Free", "Gold", 70.0),
    DressSeed("Black Velvet Evening Dress", "Evening", "M", "Black", 80.0),
    DressSeed("Silver Sequin Gown", "Evening", "L", "Silver", 90.0),
    DressSeed("Blush Chiffon Dress", "Evening", "S", "Pink", 65.0),
    DressSeed("Lilac Bridesmaid Dress", "Bridesmaid", "M", "Lilac", 45.0),
    DressSeed("Sage Bridesmaid Dress", "Bridesmaid", "L", "Green", 45.0),
    DressSeed("Navy Cocktail Dress", "Cocktail", "S", "Navy", 40.0),
    DressSeed("Coral Cocktail Dress", "Cocktail", "M", "Coral", 40.0),
    DressSeed("Burgundy Prom Gown", "Prom", "M", "Burgundy", 75.0),
]


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed demo data for Dress Rental Manager")
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Database file to seed (defaults to the application database).",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Delete the database first and recreate it before seeding.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=DEFAULT_SEED,
        help="Random seed.",
    )
    parser.add_argument(
        "--customers",
        type=int,
        default=25,
        help="Number of customers to create.",
    )
    parser.add_argument(
        "--rentals",
        type=int,
        default=60,
        help="Number of rentals to attempt.",
    )
    return parser.parse_args()


def _ic_number(rng: random.Random, birth: date) -> str:
    return f"{birth:%y%m%d}-{rng.randint(1, 16):02d}-{rng.randint(0, 9999):04d}"


def _random_birth(rng: random.Random, today: date) -> date:
    years = rng.randint(19, 55)
    return today - timedelta(days=years * 365 + rng.randint(0, 300))


def _seed_customers(
    service: CustomerService, rng: random.Random, count: int, today: date
) -> list[int]:
    ids: list[int] = []
    while len(ids) < count:
        first = rng.choice(FIRST_NAMES)
        last = rng.choice(LAST_NAMES)
        birth = _random_birth(rng, today)
        try:
            customer = service.create_customer(
                name=f"{first} {last}",
                ic_number=_ic_number(rng, birth),
                date_of_birth=birth,
                phone=f"01{rng.randint(0, 9)}-{rng.randint(100, 999)} {rng.randint(1000, 9999)}",
                email=f"{first.lower().replace(' ', '')}.{last.lower()}{rng.randint(1, 99)}@example.com",
                address=f"{rng.randint(1, 200)} Jalan Demo {rng.randint(1, 30)}, Kuala Lumpur",
            )
        except ServiceError:
            # IC collision; draw again
            continue
        ids.append(customer.id)
    return ids


def _seed_dresses(service: DressService, rng: random.Random) -> list[int]:
    ids = []
    conditions = list(ConditionStatus)
    for seed in DRESS_SEEDS:
        dress = service.create_dress(
            name=seed.name,
            rental_price=seed.rental_price,
            category=seed.category,
            size=seed.size,
            color=seed.color,
            condition_status=rng.choice(conditions[:3]),
        )
        ids.append(dress.id)
    return ids


def main() -> None:
    args = _parse_args()
    configure_logging()
    logger = get_logger("seed_demo_data")
    rng = random.Random(args.seed)

    db_path = args.db or get_db_path()
    if args.reset and db_path.exists():
        db_path.unlink()
        print(f"Database removed: {db_path}")
    print(f"Using database: {db_path}")

    connection = get_connection(db_path)
    try:
        apply_migrations(connection)
        AuthService(connection).ensure_default_admin()
        customer_service = CustomerService(connection)
        dress_service = DressService(connection)
        rental_service = RentalService(connection)
        payment_service = PaymentService(connection)

        if customer_service.list_customers() and not args.reset:
            print("Database already has customers. Use --reset to recreate it.")
            return

        today = date.today()
        customer_ids = _seed_customers(customer_service, rng, args.customers, today)
        dress_ids = _seed_dresses(dress_service, rng)

        created = returned = payments = skipped = 0
        rules = rental_service.rules
        # oldest first so returned dresses can be booked again
        rental_dates = sorted(
            today - timedelta(days=rng.randint(0, 90)) for _ in range(args.rentals)
        )
        for rental_date in rental_dates:
            duration = rng.randint(rules.min_rental_days, rules.max_rental_days)
            picks = rng.sample(dress_ids, rng.randint(1, 3))
            try:
                rental = rental_service.create_rental(
                    rng.choice(customer_ids), rental_date, duration, picks
                )
            except ServiceError as exc:
                logger.debug("Skipped demo rental: %s", exc)
                skipped += 1
                continue
            created += 1

            due = date.fromisoformat(rental.due_date)
            if due < today and rng.random() < 0.8:
                returned_on = min(today, due + timedelta(days=rng.choice([0, 0, 0, 1, 2, 4])))
                rental = rental_service.return_rental(rental.id, returned_on).rental
                returned += 1

            if rng.random() < 0.75:
                amount = rental.amount_due if rng.random() < 0.7 else round(
                    rental.amount_due * rng.uniform(0.3, 0.6), 2
                )
                payment_service.create_payment(
                    rental.id,
                    amount,
                    rng.choice(list(PaymentMethod)),
                    min(today, date.fromisoformat(rental.rental_date) + timedelta(days=1)),
                    f"DEMO-{rental.id:05d}",
                )
                payments += 1

        print("\nSeed finished:")
        print(f"Customers: {len(customer_ids)}")
        print(f"Dresses: {len(dress_ids)}")
        print(f"Rentals created: {created} (returned {returned}, skipped {skipped})")
        print(f"Payments: {payments}")
    finally:
        connection.close()


if __name__ == "__main__":
    main()
