"""Business rule predicates and late fee arithmetic."""

from datetime import date

import pytest

from dress_rental.domain.models import AvailabilityStatus, PaymentMethod
from dress_rental.services import fees, rules
from dress_rental.services.dates import add_days, parse_date
from dress_rental.services.rules import RentalRules, load_rental_rules
from dress_rental.utils.config_store import update_config_section


class TestDurationAndLimits:
    @pytest.mark.parametrize("days,expected", [(0, False), (1, True), (14, True), (15, False)])
    def test_duration_bounds(self, days, expected):
        assert rules.is_valid_duration(days) is expected

    def test_rental_limit_is_exclusive(self):
        assert rules.is_under_rental_limit(2)
        assert not rules.is_under_rental_limit(3)

    @pytest.mark.parametrize("count,expected", [(0, False), (1, True), (5, True), (6, False)])
    def test_item_count(self, count, expected):
        assert rules.is_valid_item_count(count) is expected

    def test_custom_rules(self):
        relaxed = RentalRules(max_rental_days=30, max_active_rentals=5)
        assert rules.is_valid_duration(30, relaxed)
        assert rules.is_under_rental_limit(4, relaxed)

    def test_only_available_is_rentable(self):
        assert rules.is_rentable_status(AvailabilityStatus.AVAILABLE)
        assert rules.is_rentable_status("Available")
        assert not rules.is_rentable_status(AvailabilityStatus.RENTED)
        assert not rules.is_rentable_status(AvailabilityStatus.MAINTENANCE)


class TestCustomerChecks:
    def test_adult_on_eighteenth_birthday(self):
        assert rules.is_adult(date(2006, 6, 15), date(2024, 6, 15))
        assert not rules.is_adult(date(2006, 6, 16), date(2024, 6, 15))

    def test_future_birth_date_is_not_adult(self):
        assert not rules.is_adult(date(2030, 1, 1), date(2024, 6, 15))

    def test_contact_formats(self):
        assert rules.is_valid_email("a.b@example.com")
        assert not rules.is_valid_email("not-an-email")
        assert rules.is_valid_phone("012-345 6789")
        assert not rules.is_valid_phone("12")
        assert rules.is_valid_ic_number("900101-14-5678")
        assert rules.is_valid_ic_number("900101145678")
        assert not rules.is_valid_ic_number("9001-14-5678")

    def test_payment_methods(self):
        assert rules.is_valid_payment_method(PaymentMethod.ONLINE)
        assert rules.is_valid_payment_method("Credit Card")
        assert not rules.is_valid_payment_method("Cheque")


class TestFees:
    def test_on_time_return_has_no_fee(self):
        assert fees.late_fee("2024-06-10", "2024-06-10", 10.0) == 0
        assert fees.late_fee("2024-06-10", "2024-06-08", 10.0) == 0

    def test_fee_per_day_late(self):
        assert fees.days_late("2024-06-10", "2024-06-13") == 3
        assert fees.late_fee("2024-06-10", "2024-06-13", 10.0) == 30.0

    def test_fee_across_month_boundary(self):
        assert fees.days_late(date(2024, 2, 28), date(2024, 3, 1)) == 2


class TestDates:
    def test_due_date_is_calendar_days(self):
        assert add_days("2024-06-01", 4) == date(2024, 6, 5)

    def test_parse_datetime_string(self):
        assert parse_date("2024-06-01T10:30:00") == date(2024, 6, 1)

    @pytest.mark.parametrize(
        "value", ["", "2024-13-01", "yesterday", "2024", "2024-06", "20240701", "2024-6-1"]
    )
    def test_invalid_dates_raise(self, value):
        with pytest.raises(ValueError):
            parse_date(value)

    def test_add_days_past_calendar_end_raises(self):
        with pytest.raises(ValueError):
            add_days("9999-12-25", 14)


class TestRulesConfig:
    def test_missing_file_uses_defaults(self, tmp_path):
        assert load_rental_rules(tmp_path / "config.json") == RentalRules()

    def test_overrides_and_bad_values(self, tmp_path):
        path = tmp_path / "config.json"
        update_config_section(
            path,
            "rules",
            {"max_rental_days": "21", "late_fee_per_day": 15, "bogus": 1, "max_active_rentals": "x"},
        )
        loaded = load_rental_rules(path)
        assert loaded.max_rental_days == 21
        assert loaded.late_fee_per_day == 15.0
        assert loaded.max_active_rentals == 3
