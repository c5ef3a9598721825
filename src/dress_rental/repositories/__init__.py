"""Repositories for data access."""

from dress_rental.repositories.activity_repo import ActivityRepo
from dress_rental.repositories.customer_repo import CustomerRepo
from dress_rental.repositories.dress_repo import DressRepo
from dress_rental.repositories.mappers import (
    activity_from_row,
    customer_from_row,
    dress_from_row,
    payment_from_row,
    rental_from_row,
    rental_item_from_row,
    user_from_row,
)
from dress_rental.repositories.payment_repo import PaymentRepository
from dress_rental.repositories.user_repo import UserRepo

__all__ = [
    "ActivityRepo",
    "activity_from_row",
    "CustomerRepo",
    "customer_from_row",
    "DressRepo",
    "dress_from_row",
    "payment_from_row",
    "PaymentRepository",
    "rental_from_row",
    "rental_item_from_row",
    "UserRepo",
    "user_from_row",
]
