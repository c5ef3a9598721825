"""Administrator dashboard and reports."""

from __future__ import annotations

from datetime import date

from PySide6 import QtCore, QtWidgets

from dress_rental.ui.app_services import AppServices
from dress_rental.ui.screens.base_screen import (
    BaseScreen,
    build_table,
    fill_table,
    show_service_error,
)
from dress_rental.ui.strings import format_currency, format_date, to_iso
from dress_rental.ui.widgets.cards import KpiCard


class ReportsScreen(BaseScreen):
    """Dashboard counters plus one tab per report."""

    def __init__(self, services: AppServices) -> None:
        super().__init__(services)
        self._build_ui()
        self.refresh()

    def _build_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)
        self._add_header(layout, "Reports", "Business overview for administrators.")

        theme = self._services.theme_manager
        cards_layout = QtWidgets.QHBoxLayout()
        self._cards = {
            "customers": KpiCard(theme, "Customers"),
            "dresses": KpiCard(theme, "Dresses available"),
            "active": KpiCard(theme, "Active rentals"),
            "overdue": KpiCard(theme, "Overdue rentals"),
            "revenue": KpiCard(theme, "Received this month"),
        }
        for card in self._cards.values():
            cards_layout.addWidget(card)
        layout.addLayout(cards_layout)

        self.tabs = QtWidgets.QTabWidget()
        layout.addWidget(self.tabs)

        sales_tab = QtWidgets.QWidget()
        sales_layout = QtWidgets.QVBoxLayout(sales_tab)
        year_layout = QtWidgets.QHBoxLayout()
        self.year_input = QtWidgets.QSpinBox()
        self.year_input.setRange(2000, 2100)
        self.year_input.setValue(date.today().year)
        self.year_input.valueChanged.connect(lambda _value: self._load_sales())
        year_layout.addWidget(QtWidgets.QLabel("Year:"))
        year_layout.addWidget(self.year_input)
        year_layout.addStretch()
        sales_layout.addLayout(year_layout)
        self.sales_table = self._themed(build_table(["Month", "Rentals", "Sales"]))
        sales_layout.addWidget(self.sales_table)
        self.tabs.addTab(sales_tab, "Monthly sales")

        self.overdue_table = self._themed(
            build_table(["Rental", "Customer", "Due date", "Days overdue", "Projected fee"])
        )
        self.tabs.addTab(self.overdue_table, "Overdue")

        self.inventory_table = self._themed(
            build_table(["Category", "Dresses", "Total daily value", "Average price"])
        )
        self.tabs.addTab(self.inventory_table, "Inventory")

        self.utilization_table = self._themed(
            build_table(["Dress", "Times rented", "Share of rentals"])
        )
        self.tabs.addTab(self.utilization_table, "Utilization")

        self.customers_table = self._themed(
            build_table(["Customer", "Rentals", "Total spent", "Average", "First rental"])
        )
        self.tabs.addTab(self.customers_table, "Customers")

        self.status_table = self._themed(build_table(["Status", "Rentals", "Amount"]))
        self.category_table = self._themed(
            build_table(["Category", "Revenue", "Dresses rented", "Per dress"])
        )
        summary_tab = QtWidgets.QWidget()
        summary_layout = QtWidgets.QVBoxLayout(summary_tab)
        summary_layout.addWidget(QtWidgets.QLabel("Rentals by status"))
        summary_layout.addWidget(self.status_table)
        summary_layout.addWidget(QtWidgets.QLabel("Revenue by category (returned rentals)"))
        summary_layout.addWidget(self.category_table)
        self.tabs.addTab(summary_tab, "Summary")

        income_tab = QtWidgets.QWidget()
        income_layout = QtWidgets.QVBoxLayout(income_tab)
        period_layout = QtWidgets.QHBoxLayout()
        today = QtCore.QDate.currentDate()
        self.start_input = QtWidgets.QDateEdit(QtCore.QDate(today.year(), today.month(), 1))
        self.end_input = QtWidgets.QDateEdit(today)
        for widget in (self.start_input, self.end_input):
            widget.setCalendarPopup(True)
            widget.setDisplayFormat("dd/MM/yyyy")
            widget.dateChanged.connect(lambda _value: self._load_income())
        period_layout.addWidget(QtWidgets.QLabel("From:"))
        period_layout.addWidget(self.start_input)
        period_layout.addWidget(QtWidgets.QLabel("To:"))
        period_layout.addWidget(self.end_input)
        period_layout.addStretch()
        income_layout.addLayout(period_layout)
        self.income_label = QtWidgets.QLabel()
        self.income_label.setTextFormat(QtCore.Qt.RichText)
        income_layout.addWidget(self.income_label)
        income_layout.addStretch()
        self.tabs.addTab(income_tab, "Income statement")

    def refresh(self) -> None:
        reports = self._services.report_service
        try:
            dashboard = reports.dashboard()
            self._cards["customers"].set_value(str(dashboard.customers))
            self._cards["dresses"].set_value(
                f"{dashboard.available_dresses} / {dashboard.dresses}"
            )
            self._cards["active"].set_value(str(dashboard.active_rentals))
            self._cards["overdue"].set_value(str(dashboard.overdue_rentals))
            self._cards["revenue"].set_value(format_currency(dashboard.revenue_this_month))

            fill_table(
                self.overdue_table,
                [
                    [
                        f"#{item.rental_id}",
                        item.customer_name,
                        format_date(item.due_date),
                        str(item.days_overdue),
                        format_currency(item.projected_fee),
                    ]
                    for item in reports.overdue_items()
                ],
            )
            fill_table(
                self.inventory_table,
                [
                    [
                        row.category,
                        str(row.dress_count),
                        format_currency(row.total_value),
                        format_currency(row.average_price),
                    ]
                    for row in reports.inventory_valuation()
                ],
            )
            fill_table(
                self.utilization_table,
                [
                    [row.dress_name, str(row.rental_count), f"{row.utilization_rate:.2f}%"]
                    for row in reports.dress_utilization()
                ],
            )
            fill_table(
                self.customers_table,
                [
                    [
                        row.customer_name,
                        str(row.total_rentals),
                        format_currency(row.total_spent),
                        format_currency(row.average_rental),
                        format_date(row.first_rental_date),
                    ]
                    for row in reports.customer_activity()
                ],
            )
            fill_table(
                self.status_table,
                [
                    [row.status.value, str(row.count), format_currency(row.total_amount)]
                    for row in reports.status_summary()
                ],
            )
            fill_table(
                self.category_table,
                [
                    [
                        row.category,
                        format_currency(row.total_revenue),
                        str(row.dresses_rented),
                        format_currency(row.average_revenue_per_dress),
                    ]
                    for row in reports.category_revenue()
                ],
            )
        except Exception as exc:
            show_service_error(self, exc)
            return
        self._load_sales()
        self._load_income()

    def _load_sales(self) -> None:
        try:
            sales = self._services.report_service.monthly_sales(self.year_input.value())
        except Exception as exc:
            show_service_error(self, exc)
            return
        fill_table(
            self.sales_table,
            [
                [row.month, str(row.rental_count), format_currency(row.total_sales)]
                for row in sales
            ],
        )

    def _load_income(self) -> None:
        try:
            statement = self._services.report_service.income_statement(
                to_iso(self.start_input.date()), to_iso(self.end_input.date())
            )
        except Exception as exc:
            self.income_label.setText(str(exc))
            return
        self.income_label.setText(
            "<table cellpadding='4'>"
            f"<tr><td>Rental revenue</td><td>{format_currency(statement.rental_revenue)}</td></tr>"
            f"<tr><td>Late fees</td><td>{format_currency(statement.late_fees)}</td></tr>"
            f"<tr><td><b>Total revenue</b></td>"
            f"<td><b>{format_currency(statement.total_revenue)}</b></td></tr>"
            f"<tr><td>Payments received</td>"
            f"<td>{format_currency(statement.payments_received)}</td></tr>"
            "</table>"
        )
