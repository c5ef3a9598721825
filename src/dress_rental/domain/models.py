"""Domain dataclasses and enums."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class RentalStatus(str, Enum):
    ACTIVE = "Active"
    RETURNED = "Returned"


class AvailabilityStatus(str, Enum):
    AVAILABLE = "Available"
    RENTED = "Rented"
    MAINTENANCE = "Maintenance"


class ConditionStatus(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


class CleaningStatus(str, Enum):
    CLEAN = "Clean"
    NEEDS_CLEANING = "Needs Cleaning"
    IN_CLEANING = "In Cleaning"


class PaymentMethod(str, Enum):
    CASH = "Cash"
    CREDIT_CARD = "Credit Card"
    DEBIT_CARD = "Debit Card"
    ONLINE = "Online"


class PaymentStatus(str, Enum):
    COMPLETED = "Completed"
    PENDING = "Pending"
    REFUNDED = "Refunded"


class UserRole(str, Enum):
    ADMINISTRATOR = "Administrator"
    STAFF = "Staff"


@dataclass(slots=True)
class Customer:
    id: Optional[int]
    name: str
    ic_number: str
    phone: Optional[str]
    email: Optional[str]
    address: Optional[str]
    date_of_birth: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass(slots=True)
class Dress:
    id: Optional[int]
    name: str
    category: Optional[str]
    size: Optional[str]
    color: Optional[str]
    rental_price: float
    condition_status: ConditionStatus = ConditionStatus.GOOD
    availability_status: AvailabilityStatus = AvailabilityStatus.AVAILABLE
    cleaning_status: CleaningStatus = CleaningStatus.CLEAN
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass(slots=True)
class Rental:
    id: Optional[int]
    customer_id: int
    rental_date: str
    due_date: str
    return_date: Optional[str]
    total_amount: float
    late_fee: float
    status: RentalStatus
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def amount_due(self) -> float:
        return self.total_amount + self.late_fee


@dataclass(slots=True)
class RentalItem:
    id: Optional[int]
    rental_id: int
    dress_id: int
    rental_price: float


@dataclass(slots=True)
class Payment:
    id: Optional[int]
    rental_id: int
    amount: float
    payment_method: PaymentMethod
    payment_date: str
    status: PaymentStatus = PaymentStatus.COMPLETED
    transaction_reference: Optional[str] = None
    created_at: Optional[str] = None


@dataclass(slots=True)
class User:
    id: Optional[int]
    username: str
    password_hash: str
    role: UserRole
    full_name: Optional[str]
    email: Optional[str]
    phone: Optional[str]
    is_active: bool = True
    last_login: Optional[str] = None
    created_at: Optional[str] = None


@dataclass(slots=True)
class ActivityEntry:
    id: Optional[int]
    user_id: Optional[int]
    action: str
    table_name: Optional[str]
    record_id: Optional[int]
    details: Optional[str]
    created_at: str
