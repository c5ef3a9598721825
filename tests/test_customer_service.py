"""Customer registration rules."""

from datetime import date

import pytest

from dress_rental.services.errors import NotFoundError, ValidationError


class TestCreateCustomer:
    def test_create_and_fetch(self, customer_service):
        customer = customer_service.create_customer(
            name="  Nurul Ismail ",
            ic_number="950505-10-1234",
            date_of_birth="1995-05-05",
            phone="013-222 3333",
            email="nurul@example.com",
            address="12 Jalan Ampang",
        )
        fetched = customer_service.get_customer(customer.id)
        assert fetched.name == "Nurul Ismail"
        assert fetched.date_of_birth == "1995-05-05"
        assert customer_service.get_by_ic("950505-10-1234").id == customer.id

    def test_duplicate_ic_rejected(self, customer_service, make_customer):
        existing = make_customer()
        with pytest.raises(ValidationError, match="IC Number already exists"):
            customer_service.create_customer("Other", existing.ic_number, "1990-01-01")

    def test_minor_rejected(self, customer_service):
        with pytest.raises(ValidationError, match="at least 18"):
            customer_service.create_customer(
                "Young One", "100101-14-0001", "2010-01-01", today=date(2024, 6, 15)
            )

    @pytest.mark.parametrize(
        "field,value",
        [
            ("name", "   "),
            ("ic_number", "12345"),
            ("date_of_birth", "1990-02-31"),
            ("phone", "abc"),
            ("email", "nobody"),
        ],
    )
    def test_invalid_fields(self, customer_service, field, value):
        values = {
            "name": "Siti Ahmad",
            "ic_number": "900101-14-5678",
            "date_of_birth": "1990-01-01",
            "phone": None,
            "email": None,
        }
        values[field] = value
        with pytest.raises(ValidationError):
            customer_service.create_customer(**values)

    def test_blank_optional_fields_stored_as_none(self, customer_service):
        customer = customer_service.create_customer(
            "Siti Ahmad", "900101-14-5678", "1990-01-01", phone="  ", email=""
        )
        assert customer.phone is None
        assert customer.email is None


class TestUpdateAndDelete:
    def test_update_keeps_own_ic(self, customer_service, make_customer):
        customer = make_customer()
        updated = customer_service.update_customer(
            customer.id, "Aisyah Tan Binti", customer.ic_number, "1990-01-01"
        )
        assert updated.name == "Aisyah Tan Binti"

    def test_update_to_taken_ic_rejected(self, customer_service, make_customer):
        first = make_customer()
        second = make_customer(name="Second")
        with pytest.raises(ValidationError):
            customer_service.update_customer(
                second.id, second.name, first.ic_number, "1990-01-01"
            )

    def test_delete_without_history(self, customer_service, make_customer):
        customer = make_customer()
        customer_service.delete_customer(customer.id)
        with pytest.raises(NotFoundError):
            customer_service.get_customer(customer.id)

    def test_delete_with_history_rejected(
        self, customer_service, rental_service, make_customer, make_dress
    ):
        customer = make_customer()
        rental_service.create_rental(customer.id, "2024-06-01", 2, [make_dress().id])
        with pytest.raises(ValidationError):
            customer_service.delete_customer(customer.id)


class TestLookup:
    def test_search_and_active_count(
        self, customer_service, rental_service, make_customer, make_dress
    ):
        aisyah = make_customer()
        make_customer(name="Mei Ling Lim")
        rental_service.create_rental(aisyah.id, "2024-06-01", 2, [make_dress().id])

        assert [c.id for c in customer_service.search("aisyah")] == [aisyah.id]
        assert len(customer_service.search("  ")) == 2
        assert customer_service.active_rental_count(aisyah.id) == 1
