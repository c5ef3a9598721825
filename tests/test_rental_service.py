"""Rental creation, return and late fees."""

import sqlite3
from datetime import date

import pytest

from dress_rental.domain.models import AvailabilityStatus, RentalStatus
from dress_rental.repositories import DressRepo, rental_repo
from dress_rental.services.availability_service import (
    AvailabilityService,
    intervals_overlap,
)
from dress_rental.services.errors import (
    NotFoundError,
    PersistenceError,
    RentalFailure,
    ValidationError,
)
from dress_rental.services.rental_service import RentalService
from dress_rental.services.rules import RentalRules


class TestCreateRental:
    def test_total_and_due_date(self, rental_service, dress_service, make_customer, make_dress):
        customer = make_customer()
        gown = make_dress(rental_price=50.0)
        kebaya = make_dress(name="Royal Blue Kebaya", rental_price=30.0)

        rental = rental_service.create_rental(customer.id, "2024-06-01", 4, [gown.id, kebaya.id])

        assert rental.status == RentalStatus.ACTIVE
        assert rental.due_date == "2024-06-05"
        assert rental.total_amount == 320.0
        assert rental.late_fee == 0
        _, items = rental_service.get_rental_with_items(rental.id)
        assert sorted(item.dress_id for item in items) == sorted([gown.id, kebaya.id])
        for dress_id in (gown.id, kebaya.id):
            assert dress_service.get_dress(dress_id).availability_status == AvailabilityStatus.RENTED

    def test_item_price_is_captured(self, rental_service, dress_service, make_customer, make_dress):
        customer = make_customer()
        gown = make_dress(rental_price=50.0)
        rental = rental_service.create_rental(customer.id, "2024-06-01", 2, [gown.id])
        dress_service.update_dress(gown.id, gown.name, 80.0)

        _, items = rental_service.get_rental_with_items(rental.id)
        assert items[0].rental_price == 50.0

    @pytest.mark.parametrize("duration", [0, 15])
    def test_invalid_duration(
        self, rental_service, dress_service, connection, make_customer, make_dress, duration
    ):
        customer = make_customer()
        gown = make_dress()
        with pytest.raises(ValidationError) as excinfo:
            rental_service.create_rental(customer.id, "2024-06-01", duration, [gown.id])
        assert excinfo.value.reason == RentalFailure.INVALID_DURATION
        assert rental_repo.list_rentals(connection=connection) == []
        assert dress_service.get_dress(gown.id).availability_status == AvailabilityStatus.AVAILABLE

    def test_unknown_customer(self, rental_service, make_dress):
        gown = make_dress()
        with pytest.raises(NotFoundError):
            rental_service.create_rental(999, "2024-06-01", 3, [gown.id])

    def test_unknown_dress(self, rental_service, connection, make_customer):
        customer = make_customer()
        with pytest.raises(NotFoundError):
            rental_service.create_rental(customer.id, "2024-06-01", 3, [999])
        assert rental_repo.list_rentals(connection=connection) == []

    def test_active_rental_cap(self, rental_service, make_customer, make_dress):
        customer = make_customer()
        for index in range(3):
            dress = make_dress(name=f"Gown {index}")
            rental_service.create_rental(customer.id, "2024-06-01", 2, [dress.id])
        extra = make_dress(name="Gown 4")

        with pytest.raises(ValidationError) as excinfo:
            rental_service.create_rental(customer.id, "2024-06-01", 2, [extra.id])
        assert excinfo.value.reason == RentalFailure.RENTAL_LIMIT_REACHED

    def test_returned_rentals_do_not_count_toward_cap(self, rental_service, make_customer, make_dress):
        customer = make_customer()
        rentals = []
        for index in range(3):
            dress = make_dress(name=f"Gown {index}")
            rentals.append(rental_service.create_rental(customer.id, "2024-06-01", 2, [dress.id]))
        rental_service.return_rental(rentals[0].id, "2024-06-03")
        extra = make_dress(name="Gown 4")

        rental = rental_service.create_rental(customer.id, "2024-06-04", 2, [extra.id])
        assert rental.status == RentalStatus.ACTIVE

    @pytest.mark.parametrize("count", [0, 6])
    def test_item_count_limits(self, rental_service, make_customer, make_dress, count):
        customer = make_customer()
        ids = [make_dress(name=f"Gown {index}").id for index in range(count)]
        with pytest.raises(ValidationError) as excinfo:
            rental_service.create_rental(customer.id, "2024-06-01", 2, ids)
        assert excinfo.value.reason == RentalFailure.INVALID_ITEM_COUNT

    def test_duplicate_dress_rejected(self, rental_service, make_customer, make_dress):
        customer = make_customer()
        gown = make_dress()
        with pytest.raises(ValidationError) as excinfo:
            rental_service.create_rental(customer.id, "2024-06-01", 2, [gown.id, gown.id])
        assert excinfo.value.reason == RentalFailure.INVALID_ITEM_COUNT

    @pytest.mark.parametrize(
        "rental_date", ["2024-02-30", "2024", "2024-06", "20240701", "9999-12-25"]
    )
    def test_invalid_rental_date(
        self, rental_service, connection, make_customer, make_dress, rental_date
    ):
        customer = make_customer()
        gown = make_dress()
        with pytest.raises(ValidationError) as excinfo:
            rental_service.create_rental(customer.id, rental_date, 14, [gown.id])
        assert excinfo.value.reason == RentalFailure.INVALID_DATE
        assert rental_repo.list_rentals(connection=connection) == []

    def test_overlapping_booking_rejected(
        self, rental_service, dress_service, connection, make_customer, make_dress
    ):
        first = make_customer()
        second = make_customer(name="Mei Ling Lim")
        gown = make_dress()
        free = make_dress(name="Free Gown")
        booked = rental_service.create_rental(first.id, "2024-06-01", 4, [gown.id])
        # released by hand while its rental is still Active
        DressRepo(connection).set_availability(gown.id, AvailabilityStatus.AVAILABLE)

        with pytest.raises(ValidationError) as excinfo:
            rental_service.create_rental(second.id, "2024-06-05", 3, [free.id, gown.id])

        assert excinfo.value.reason == RentalFailure.ITEM_OVERLAP
        assert [r.id for r in rental_repo.list_rentals(connection=connection)] == [booked.id]
        count = connection.execute("SELECT COUNT(*) FROM rental_items").fetchone()[0]
        assert count == 1
        assert dress_service.get_dress(free.id).availability_status == AvailabilityStatus.AVAILABLE
        assert dress_service.get_dress(gown.id).availability_status == AvailabilityStatus.AVAILABLE

    def test_rented_dress_cannot_be_booked_again(self, rental_service, make_customer, make_dress):
        first = make_customer()
        second = make_customer(name="Mei Ling Lim")
        gown = make_dress()
        rental_service.create_rental(first.id, "2024-06-01", 3, [gown.id])

        with pytest.raises(ValidationError) as excinfo:
            rental_service.create_rental(second.id, "2024-06-20", 3, [gown.id])
        assert excinfo.value.reason == RentalFailure.ITEM_UNAVAILABLE

    def test_maintenance_dress_unavailable(self, rental_service, dress_service, make_customer, make_dress):
        customer = make_customer()
        gown = make_dress()
        dress_service.set_availability(gown.id, AvailabilityStatus.MAINTENANCE)
        with pytest.raises(ValidationError) as excinfo:
            rental_service.create_rental(customer.id, "2024-06-01", 3, [gown.id])
        assert excinfo.value.reason == RentalFailure.ITEM_UNAVAILABLE

    def test_failure_leaves_nothing_behind(
        self, rental_service, dress_service, connection, make_customer, make_dress
    ):
        customer = make_customer()
        free = make_dress()
        busy = make_dress(name="Busy Gown")
        dress_service.set_availability(busy.id, AvailabilityStatus.MAINTENANCE)

        with pytest.raises(ValidationError):
            rental_service.create_rental(customer.id, "2024-06-01", 3, [free.id, busy.id])

        assert rental_repo.list_rentals(connection=connection) == []
        assert dress_service.get_dress(free.id).availability_status == AvailabilityStatus.AVAILABLE

    def test_store_failure_rolls_back(
        self, rental_service, dress_service, connection, make_customer, make_dress, monkeypatch
    ):
        customer = make_customer()
        first = make_dress()
        second = make_dress(name="Second Gown")
        calls = []

        original = rental_repo.insert_rental_item

        def flaky_insert(rental_id, dress_id, rental_price, *, connection):
            calls.append(dress_id)
            if len(calls) == 2:
                raise sqlite3.OperationalError("disk I/O error")
            return original(rental_id, dress_id, rental_price, connection=connection)

        monkeypatch.setattr(rental_repo, "insert_rental_item", flaky_insert)

        with pytest.raises(PersistenceError):
            rental_service.create_rental(customer.id, "2024-06-01", 3, [first.id, second.id])

        assert rental_repo.list_rentals(connection=connection) == []
        assert dress_service.get_dress(first.id).availability_status == AvailabilityStatus.AVAILABLE
        count = connection.execute("SELECT COUNT(*) FROM rental_items").fetchone()[0]
        assert count == 0


class TestReturnRental:
    def test_late_return(self, rental_service, dress_service, make_customer, make_dress):
        customer = make_customer()
        gown = make_dress(rental_price=50.0)
        rental = rental_service.create_rental(customer.id, "2024-06-01", 4, [gown.id])

        result = rental_service.return_rental(rental.id, "2024-06-07")

        assert not result.already_returned
        assert result.late_fee == 20.0
        assert result.rental.total_amount == 200.0
        assert result.amount_due == 220.0
        assert result.rental.status == RentalStatus.RETURNED
        assert result.rental.return_date == "2024-06-07"
        assert dress_service.get_dress(gown.id).availability_status == AvailabilityStatus.AVAILABLE

    def test_on_time_return_has_no_fee(self, rental_service, make_customer, make_dress):
        customer = make_customer()
        gown = make_dress()
        rental = rental_service.create_rental(customer.id, "2024-06-01", 4, [gown.id])
        result = rental_service.return_rental(rental.id, "2024-06-05")
        assert result.late_fee == 0
        assert result.amount_due == rental.total_amount

    def test_already_returned_changes_nothing(self, rental_service, make_customer, make_dress):
        customer = make_customer()
        gown = make_dress()
        rental = rental_service.create_rental(customer.id, "2024-06-01", 2, [gown.id])
        rental_service.return_rental(rental.id, "2024-06-05")

        again = rental_service.return_rental(rental.id, "2024-06-20")

        assert again.already_returned
        assert again.rental.return_date == "2024-06-05"
        assert again.late_fee == 20.0

    def test_return_before_rental_date(self, rental_service, make_customer, make_dress):
        customer = make_customer()
        gown = make_dress()
        rental = rental_service.create_rental(customer.id, "2024-06-01", 2, [gown.id])
        with pytest.raises(ValidationError) as excinfo:
            rental_service.return_rental(rental.id, "2024-05-30")
        assert excinfo.value.reason == RentalFailure.INVALID_DATE

    def test_unknown_rental(self, rental_service):
        with pytest.raises(NotFoundError):
            rental_service.return_rental(42, "2024-06-01")

    def test_returned_dress_can_be_rented_again(self, rental_service, make_customer, make_dress):
        customer = make_customer()
        gown = make_dress()
        first = rental_service.create_rental(customer.id, "2024-06-01", 2, [gown.id])
        rental_service.return_rental(first.id, "2024-06-03")

        second = rental_service.create_rental(customer.id, "2024-06-02", 2, [gown.id])
        assert second.status == RentalStatus.ACTIVE


class TestLateFees:
    def test_preview_uses_compare_date(self, rental_service, make_customer, make_dress):
        customer = make_customer()
        gown = make_dress()
        rental = rental_service.create_rental(customer.id, "2024-06-01", 2, [gown.id])
        assert rental_service.preview_late_fee(rental, date(2024, 6, 6)) == 30.0

    def test_calculate_persists_fee_for_returned_rental(self, rental_service, make_customer, make_dress):
        customer = make_customer()
        gown = make_dress()
        rental = rental_service.create_rental(customer.id, "2024-06-01", 2, [gown.id])
        rental_service.return_rental(rental.id, "2024-06-04")

        assert rental_service.calculate_late_fee(rental.id) == 10.0
        assert rental_service.get_rental(rental.id).late_fee == 10.0

    def test_configured_fee_rate(self, connection, make_customer, make_dress):
        service = RentalService(connection, RentalRules(late_fee_per_day=25.0))
        customer = make_customer()
        gown = make_dress()
        rental = service.create_rental(customer.id, "2024-06-01", 2, [gown.id])
        assert service.return_rental(rental.id, "2024-06-05").late_fee == 50.0


class TestQueries:
    def test_overdue_and_active_lists(self, rental_service, make_customer, make_dress):
        customer = make_customer()
        early = rental_service.create_rental(customer.id, "2024-06-01", 2, [make_dress().id])
        late = rental_service.create_rental(
            customer.id, "2024-06-10", 10, [make_dress(name="Other").id]
        )

        overdue = rental_service.list_overdue_rentals(date(2024, 6, 15))
        assert [rental.id for rental in overdue] == [early.id]
        assert {rental.id for rental in rental_service.list_active_rentals()} == {early.id, late.id}

        rental_service.return_rental(early.id, "2024-06-15")
        assert rental_service.list_overdue_rentals(date(2024, 6, 15)) == []
        returned = rental_service.list_rentals(status=RentalStatus.RETURNED)
        assert [rental.id for rental in returned] == [early.id]

    def test_customer_history(self, rental_service, make_customer, make_dress):
        aisyah = make_customer()
        mei = make_customer(name="Mei Ling Lim")
        older = rental_service.create_rental(aisyah.id, "2024-05-01", 2, [make_dress().id])
        rental_service.return_rental(older.id, "2024-05-03")
        newer = rental_service.create_rental(
            aisyah.id, "2024-06-01", 2, [make_dress(name="Other").id]
        )
        rental_service.create_rental(mei.id, "2024-06-01", 2, [make_dress(name="Third").id])

        history = rental_service.list_customer_rentals(aisyah.id)
        assert [rental.id for rental in history] == [newer.id, older.id]
        assert rental_service.list_customer_rentals(999) == []

    def test_amount_due_by_id(self, rental_service, make_customer, make_dress):
        customer = make_customer()
        rental = rental_service.create_rental(customer.id, "2024-06-01", 3, [make_dress().id])
        assert rental_service.amount_due(rental.id) == 150.0


class TestAvailability:
    def test_overlap_is_inclusive(self):
        assert intervals_overlap(date(2024, 6, 1), date(2024, 6, 5), date(2024, 6, 5), date(2024, 6, 8))
        assert not intervals_overlap(date(2024, 6, 1), date(2024, 6, 5), date(2024, 6, 6), date(2024, 6, 8))

    def test_free_dress_is_available_for_separate_ranges(self, connection, make_dress):
        gown = make_dress()
        availability = AvailabilityService(connection)
        assert availability.is_available(gown.id, "2024-06-01", "2024-06-05")
        assert availability.is_available(gown.id, "2024-06-10", "2024-06-12")

    def test_only_active_rentals_block(self, connection, rental_service, make_customer, make_dress):
        customer = make_customer()
        gown = make_dress()
        rental = rental_service.create_rental(customer.id, "2024-06-01", 4, [gown.id])
        availability = AvailabilityService(connection)

        assert not availability.is_available(gown.id, "2024-06-03", "2024-06-10")
        assert availability.is_available(gown.id, "2024-06-06", "2024-06-10")
        assert availability.is_available(
            gown.id, "2024-06-03", "2024-06-10", exclude_rental_id=rental.id
        )

        rental_service.return_rental(rental.id, "2024-06-03")
        assert availability.is_available(gown.id, "2024-06-03", "2024-06-10")

    def test_reversed_range_raises(self, connection):
        with pytest.raises(ValueError):
            AvailabilityService(connection).is_available(1, "2024-06-10", "2024-06-01")
