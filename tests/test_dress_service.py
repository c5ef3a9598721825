"""Dress catalogue rules."""

import pytest

from dress_rental.domain.models import AvailabilityStatus, CleaningStatus, ConditionStatus
from dress_rental.services.errors import NotFoundError, ValidationError


class TestCatalogue:
    def test_create_defaults_to_available(self, dress_service):
        dress = dress_service.create_dress("Black Velvet Dress", 80, category="Evening")
        assert dress.availability_status == AvailabilityStatus.AVAILABLE
        assert dress.condition_status == ConditionStatus.GOOD
        assert dress.cleaning_status == CleaningStatus.CLEAN
        assert dress_service.get_price(dress.id) == 80.0

    @pytest.mark.parametrize("price", [0, -5, "abc"])
    def test_invalid_price(self, dress_service, price):
        with pytest.raises(ValidationError):
            dress_service.create_dress("Gown", price)

    def test_invalid_condition(self, dress_service):
        with pytest.raises(ValidationError):
            dress_service.create_dress("Gown", 10, condition_status="Torn")

    def test_categories_and_filters(self, dress_service, make_dress):
        make_dress(name="Lace Gown", category="Wedding")
        make_dress(name="Kebaya", category="Traditional")
        assert dress_service.list_categories() == ["Traditional", "Wedding"]
        assert [d.name for d in dress_service.list_by_category("Wedding")] == ["Lace Gown"]
        assert [d.name for d in dress_service.search("keb")] == ["Kebaya"]

    def test_unknown_dress(self, dress_service):
        with pytest.raises(NotFoundError):
            dress_service.get_dress(404)


class TestAvailability:
    def test_maintenance_round_trip(self, dress_service, make_dress):
        dress = make_dress()
        dress_service.set_availability(dress.id, "Maintenance")
        assert dress_service.list_available() == []
        restored = dress_service.set_availability(dress.id, AvailabilityStatus.AVAILABLE)
        assert restored.availability_status == AvailabilityStatus.AVAILABLE

    def test_cannot_mark_rented_by_hand(self, dress_service, make_dress):
        dress = make_dress()
        with pytest.raises(ValidationError):
            dress_service.set_availability(dress.id, AvailabilityStatus.RENTED)

    def test_rented_dress_is_locked(self, dress_service, rental_service, make_customer, make_dress):
        dress = make_dress()
        rental_service.create_rental(make_customer().id, "2024-06-01", 2, [dress.id])
        with pytest.raises(ValidationError):
            dress_service.set_availability(dress.id, AvailabilityStatus.MAINTENANCE)

    def test_update_keeps_rented_status(self, dress_service, rental_service, make_customer, make_dress):
        dress = make_dress()
        rental_service.create_rental(make_customer().id, "2024-06-01", 2, [dress.id])
        updated = dress_service.update_dress(
            dress.id, "Renamed", 60, condition_status=ConditionStatus.FAIR
        )
        assert updated.availability_status == AvailabilityStatus.RENTED
        assert updated.condition_status == ConditionStatus.FAIR


class TestDelete:
    def test_delete_unused(self, dress_service, make_dress):
        dress = make_dress()
        dress_service.delete_dress(dress.id)
        assert dress_service.list_dresses() == []

    def test_delete_with_history_rejected(
        self, dress_service, rental_service, make_customer, make_dress
    ):
        dress = make_dress()
        rental = rental_service.create_rental(make_customer().id, "2024-06-01", 2, [dress.id])
        rental_service.return_rental(rental.id, "2024-06-03")
        with pytest.raises(ValidationError):
            dress_service.delete_dress(dress.id)
