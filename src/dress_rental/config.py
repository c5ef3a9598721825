"""Application configuration."""

from __future__ import annotations

from dataclasses import dataclass

from dress_rental.version import __app_name__, __company__

APP_NAME = __app_name__
APP_DATA_DIRNAME = "DressRental"
DB_FILENAME = "dress_rental.db"
LOGS_DIRNAME = "logs"
LOG_FILENAME = "app.log"
LOG_MAX_BYTES = 1_000_000
LOG_BACKUP_COUNT = 3
RECEIPTS_DIRNAME = "receipts"
CONFIG_FILENAME = "config.json"

CURRENCY_SYMBOL = "RM"

DEFAULT_MIN_RENTAL_DAYS = 1
DEFAULT_MAX_RENTAL_DAYS = 14
DEFAULT_MAX_ACTIVE_RENTALS = 3
DEFAULT_MAX_ITEMS_PER_RENTAL = 5
DEFAULT_LATE_FEE_PER_DAY = 10.0
DEFAULT_MIN_CUSTOMER_AGE = 18

MIN_PASSWORD_LENGTH = 6
DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = "admin123"


@dataclass(frozen=True)
class ShopInfo:
    """Issuer information printed on receipts."""

    name: str
    phone: str
    address: str


SHOP_INFO = ShopInfo(
    name="Dress Rental Boutique",
    phone="+60 3-1234 5678",
    address="12 Jalan Example, Kuala Lumpur",
)


@dataclass(frozen=True)
class AppConfig:
    """Static configuration values for Dress Rental Manager."""

    app_name: str = APP_NAME
    organization_name: str = __company__
    organization_domain: str = "dressrental.local"
