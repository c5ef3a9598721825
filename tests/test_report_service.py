"""Administrator reports."""

from datetime import date

import pytest

from dress_rental.services.errors import ValidationError
from dress_rental.services.report_service import ReportService, month_bounds


@pytest.fixture
def report_service(connection):
    return ReportService(connection)


@pytest.fixture
def history(rental_service, payment_service, make_customer, make_dress):
    aisyah = make_customer()
    mei = make_customer(name="Mei Ling Lim")
    gown = make_dress(name="Lace Gown", rental_price=50.0, category="Wedding")
    kebaya = make_dress(name="Kebaya", rental_price=30.0, category="Traditional")
    make_dress(name="Spare Gown", rental_price=40.0, category="Wedding")

    returned = rental_service.create_rental(aisyah.id, "2024-06-01", 4, [gown.id])
    rental_service.return_rental(returned.id, "2024-06-07")
    payment_service.create_payment(returned.id, 220.0, "Cash", "2024-06-07")

    overdue = rental_service.create_rental(mei.id, "2024-06-03", 2, [kebaya.id])
    return {"returned": returned, "overdue": overdue, "aisyah": aisyah, "mei": mei}


class TestOverdue:
    def test_overdue_items(self, report_service, history):
        items = report_service.overdue_items(date(2024, 6, 15))
        assert len(items) == 1
        item = items[0]
        assert item.rental_id == history["overdue"].id
        assert item.customer_name == "Mei Ling Lim"
        assert item.days_overdue == 10
        assert item.projected_fee == 100.0

    def test_nothing_overdue_on_due_date(self, report_service, history):
        assert report_service.overdue_items(date(2024, 6, 5)) == []


class TestIncome:
    def test_income_statement(self, report_service, history):
        statement = report_service.income_statement("2024-06-01", "2024-06-30")
        assert statement.payments_received == 220.0
        assert statement.rental_revenue == 260.0
        assert statement.late_fees == 20.0
        assert statement.total_revenue == 280.0

    def test_reversed_period(self, report_service):
        with pytest.raises(ValidationError):
            report_service.income_statement("2024-06-30", "2024-06-01")

    def test_month_bounds(self):
        assert month_bounds(date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))


class TestSummaries:
    def test_dashboard(self, report_service, history):
        dashboard = report_service.dashboard(date(2024, 6, 15))
        assert dashboard.customers == 2
        assert dashboard.dresses == 3
        assert dashboard.available_dresses == 2
        assert dashboard.active_rentals == 1
        assert dashboard.overdue_rentals == 1
        assert dashboard.revenue_this_month == 220.0

    def test_inventory_valuation(self, report_service, history):
        rows = {row.category: row for row in report_service.inventory_valuation()}
        assert rows["Wedding"].dress_count == 2
        assert rows["Wedding"].total_value == 90.0

    def test_monthly_sales(self, report_service, history):
        rows = report_service.monthly_sales(2024)
        june = [row for row in rows if row.month.endswith("06")]
        assert june and june[0].rental_count == 2

    def test_status_summary(self, report_service, history):
        counts = {row.status.value: row.count for row in report_service.status_summary()}
        assert counts == {"Active": 1, "Returned": 1}

    def test_customer_activity(self, report_service, history):
        rows = report_service.customer_activity()
        assert {row.customer_name for row in rows} == {"Aisyah Tan", "Mei Ling Lim"}
