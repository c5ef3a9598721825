"""Domain models for Dress Rental Manager."""

from dress_rental.domain.models import (
    ActivityEntry,
    AvailabilityStatus,
    CleaningStatus,
    ConditionStatus,
    Customer,
    Dress,
    Payment,
    PaymentMethod,
    PaymentStatus,
    Rental,
    RentalItem,
    RentalStatus,
    User,
    UserRole,
)

__all__ = [
    "ActivityEntry",
    "AvailabilityStatus",
    "CleaningStatus",
    "ConditionStatus",
    "Customer",
    "Dress",
    "Payment",
    "PaymentMethod",
    "PaymentStatus",
    "Rental",
    "RentalItem",
    "RentalStatus",
    "User",
    "UserRole",
]
