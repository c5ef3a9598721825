"""Business rule limits and the predicates that check them.

Every predicate here is pure: it looks only at its arguments.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, fields
from datetime import date
from pathlib import Path
from typing import Any, Optional

from dateutil.relativedelta import relativedelta

from dress_rental.config import (
    DEFAULT_LATE_FEE_PER_DAY,
    DEFAULT_MAX_ACTIVE_RENTALS,
    DEFAULT_MAX_ITEMS_PER_RENTAL,
    DEFAULT_MAX_RENTAL_DAYS,
    DEFAULT_MIN_CUSTOMER_AGE,
    DEFAULT_MIN_RENTAL_DAYS,
)
from dress_rental.domain.models import AvailabilityStatus, PaymentMethod
from dress_rental.logging_config import get_logger
from dress_rental.utils.config_store import load_config_section

RULES_SECTION = "rules"

_EMAIL_RE = re.compile(r"^[\w.+-]+@[\w-]+(\.[\w-]+)+$")
_PHONE_RE = re.compile(r"^\+?[0-9][0-9 -]{6,18}[0-9]$")
# Malaysian MyKad layout: YYMMDD-PB-###G, dashes optional.
_IC_RE = re.compile(r"^\d{6}-?\d{2}-?\d{4}$")


@dataclass(frozen=True)
class RentalRules:
    """Configurable limits for rentals and customers."""

    min_rental_days: int = DEFAULT_MIN_RENTAL_DAYS
    max_rental_days: int = DEFAULT_MAX_RENTAL_DAYS
    max_active_rentals: int = DEFAULT_MAX_ACTIVE_RENTALS
    max_items_per_rental: int = DEFAULT_MAX_ITEMS_PER_RENTAL
    late_fee_per_day: float = DEFAULT_LATE_FEE_PER_DAY
    min_customer_age: int = DEFAULT_MIN_CUSTOMER_AGE


DEFAULT_RULES = RentalRules()


def load_rental_rules(config_path: Path) -> RentalRules:
    """Build rules from the ``rules`` section of the config file.

    Unknown keys and values of the wrong type are ignored with a warning.
    """
    logger = get_logger(__name__)
    overrides: dict[str, Any] = {}
    section = load_config_section(config_path, RULES_SECTION)
    known = {field.name for field in fields(RentalRules)}
    for key, value in section.items():
        if key not in known:
            logger.warning("Ignoring unknown rule override %s", key)
            continue
        caster = float if key == "late_fee_per_day" else int
        try:
            overrides[key] = caster(value)
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid value for rule %s: %r", key, value)
    return RentalRules(**overrides)


def is_valid_duration(days: int, rules: RentalRules = DEFAULT_RULES) -> bool:
    return rules.min_rental_days <= days <= rules.max_rental_days


def is_under_rental_limit(active_count: int, rules: RentalRules = DEFAULT_RULES) -> bool:
    return active_count < rules.max_active_rentals


def is_valid_item_count(count: int, rules: RentalRules = DEFAULT_RULES) -> bool:
    return 1 <= count <= rules.max_items_per_rental


def is_rentable_status(status: AvailabilityStatus | str) -> bool:
    if isinstance(status, AvailabilityStatus):
        return status == AvailabilityStatus.AVAILABLE
    return status == AvailabilityStatus.AVAILABLE.value


def age_on(birth_date: date, today: date) -> int:
    return relativedelta(today, birth_date).years


def is_adult(
    birth_date: date,
    today: Optional[date] = None,
    rules: RentalRules = DEFAULT_RULES,
) -> bool:
    today = today or date.today()
    if birth_date > today:
        return False
    return age_on(birth_date, today) >= rules.min_customer_age


def is_valid_payment_method(method: PaymentMethod | str) -> bool:
    if isinstance(method, PaymentMethod):
        return True
    return method in {item.value for item in PaymentMethod}


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email.strip()))


def is_valid_phone(phone: str) -> bool:
    return bool(_PHONE_RE.match(phone.strip()))


def is_valid_ic_number(ic_number: str) -> bool:
    return bool(_IC_RE.match(ic_number.strip()))
