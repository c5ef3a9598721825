"""Screen for the dress catalogue."""

from __future__ import annotations

from typing import List, Optional

from PySide6 import QtWidgets

from dress_rental.config import CURRENCY_SYMBOL
from dress_rental.domain.models import (
    AvailabilityStatus,
    CleaningStatus,
    ConditionStatus,
    Dress,
)
from dress_rental.logging_config import get_logger
from dress_rental.ui.app_services import AppServices
from dress_rental.ui.screens.base_screen import (
    BaseScreen,
    build_table,
    confirm,
    fill_table,
    show_service_error,
)
from dress_rental.ui.strings import TITLE_WARNING, format_currency

ALL_FILTER = "All"


class DressDialog(QtWidgets.QDialog):
    """Dialog for creating or editing a dress."""

    def __init__(
        self,
        parent: QtWidgets.QWidget | None = None,
        dress: Optional[Dress] = None,
        categories: Optional[list[str]] = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Dress")
        self.setModal(True)
        self._build_ui(categories or [])
        if dress:
            self._load_dress(dress)

    def _build_ui(self, categories: list[str]) -> None:
        layout = QtWidgets.QVBoxLayout(self)
        form = QtWidgets.QFormLayout()

        self.name_input = QtWidgets.QLineEdit()
        self.category_input = QtWidgets.QComboBox()
        self.category_input.setEditable(True)
        self.category_input.addItems(categories)
        self.category_input.setCurrentText("")
        self.size_input = QtWidgets.QLineEdit()
        self.color_input = QtWidgets.QLineEdit()
        self.price_input = QtWidgets.QDoubleSpinBox()
        self.price_input.setPrefix(f"{CURRENCY_SYMBOL} ")
        self.price_input.setRange(0.0, 100000.0)
        self.price_input.setDecimals(2)
        self.condition_input = QtWidgets.QComboBox()
        self.condition_input.addItems([item.value for item in ConditionStatus])
        self.condition_input.setCurrentText(ConditionStatus.GOOD.value)
        self.cleaning_input = QtWidgets.QComboBox()
        self.cleaning_input.addItems([item.value for item in CleaningStatus])

        form.addRow("Name:", self.name_input)
        form.addRow("Category:", self.category_input)
        form.addRow("Size:", self.size_input)
        form.addRow("Color:", self.color_input)
        form.addRow("Daily price:", self.price_input)
        form.addRow("Condition:", self.condition_input)
        form.addRow("Cleaning:", self.cleaning_input)
        layout.addLayout(form)

        button_box = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.Save | QtWidgets.QDialogButtonBox.Cancel
        )
        button_box.accepted.connect(self._on_accept)
        button_box.rejected.connect(self.reject)
        layout.addWidget(button_box)

    def _load_dress(self, dress: Dress) -> None:
        self.name_input.setText(dress.name)
        self.category_input.setCurrentText(dress.category or "")
        self.size_input.setText(dress.size or "")
        self.color_input.setText(dress.color or "")
        self.price_input.setValue(dress.rental_price)
        self.condition_input.setCurrentText(dress.condition_status.value)
        self.cleaning_input.setCurrentText(dress.cleaning_status.value)

    def _on_accept(self) -> None:
        if not self.name_input.text().strip():
            QtWidgets.QMessageBox.warning(self, TITLE_WARNING, "Enter the dress name.")
            return
        if self.price_input.value() <= 0:
            QtWidgets.QMessageBox.warning(
                self, TITLE_WARNING, "The daily price must be greater than zero."
            )
            return
        self.accept()

    def get_data(self) -> dict[str, object]:
        return {
            "name": self.name_input.text().strip(),
            "rental_price": self.price_input.value(),
            "category": self.category_input.currentText().strip() or None,
            "size": self.size_input.text().strip() or None,
            "color": self.color_input.text().strip() or None,
            "condition_status": self.condition_input.currentText(),
            "cleaning_status": self.cleaning_input.currentText(),
        }


class DressesScreen(BaseScreen):
    """Screen for dresses."""

    def __init__(self, services: AppServices) -> None:
        super().__init__(services)
        self._dresses: List[Dress] = []
        self._build_ui()
        self.refresh()

    def _build_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)
        self._add_header(
            layout,
            "Dresses",
            "Manage the catalogue. Rented dresses are released when their rental is returned.",
        )

        filter_layout = QtWidgets.QHBoxLayout()
        self.search_input = QtWidgets.QLineEdit()
        self.search_input.setPlaceholderText("Name, category, color or size")
        self.search_input.returnPressed.connect(self.refresh)
        self.status_filter = QtWidgets.QComboBox()
        self.status_filter.addItem(ALL_FILTER)
        self.status_filter.addItems([item.value for item in AvailabilityStatus])
        self.status_filter.currentIndexChanged.connect(lambda _index: self.refresh())
        search_button = QtWidgets.QPushButton("Search")
        search_button.clicked.connect(self.refresh)
        filter_layout.addWidget(QtWidgets.QLabel("Search:"))
        filter_layout.addWidget(self.search_input)
        filter_layout.addWidget(search_button)
        filter_layout.addWidget(QtWidgets.QLabel("Status:"))
        filter_layout.addWidget(self.status_filter)
        layout.addLayout(filter_layout)

        button_layout = QtWidgets.QHBoxLayout()
        self.new_button = QtWidgets.QPushButton("New")
        self.edit_button = QtWidgets.QPushButton("Edit")
        self.maintenance_button = QtWidgets.QPushButton("Toggle maintenance")
        self.delete_button = QtWidgets.QPushButton("Delete")
        self.new_button.clicked.connect(self._on_new)
        self.edit_button.clicked.connect(self._on_edit)
        self.maintenance_button.clicked.connect(self._on_toggle_maintenance)
        self.delete_button.clicked.connect(self._on_delete)
        for button in (
            self.new_button,
            self.edit_button,
            self.maintenance_button,
            self.delete_button,
        ):
            button_layout.addWidget(button)
        button_layout.addStretch()
        layout.addLayout(button_layout)

        self.table = self._themed(
            build_table(
                [
                    "ID",
                    "Name",
                    "Category",
                    "Size",
                    "Color",
                    "Daily price",
                    "Condition",
                    "Cleaning",
                    "Availability",
                ]
            )
        )
        self.table.itemSelectionChanged.connect(self._on_selection_changed)
        layout.addWidget(self.table)
        self._on_selection_changed()

    def refresh(self) -> None:
        status = self.status_filter.currentText()
        try:
            dresses = self._services.dress_service.search(self.search_input.text())
        except Exception as exc:
            show_service_error(self, exc)
            return
        if status != ALL_FILTER:
            dresses = [d for d in dresses if d.availability_status.value == status]
        self._dresses = dresses
        fill_table(
            self.table,
            [
                [
                    str(dress.id),
                    dress.name,
                    dress.category or "-",
                    dress.size or "-",
                    dress.color or "-",
                    format_currency(dress.rental_price),
                    dress.condition_status.value,
                    dress.cleaning_status.value,
                    dress.availability_status.value,
                ]
                for dress in dresses
            ],
        )
        self._on_selection_changed()

    def _selected(self) -> Optional[Dress]:
        selected = self.table.selectionModel().selectedRows()
        if not selected:
            return None
        row = selected[0].row()
        return self._dresses[row] if 0 <= row < len(self._dresses) else None

    def _on_selection_changed(self) -> None:
        dress = self._selected()
        has_selection = dress is not None
        self.edit_button.setEnabled(has_selection)
        self.delete_button.setEnabled(has_selection)
        self.maintenance_button.setEnabled(
            has_selection and dress.availability_status != AvailabilityStatus.RENTED
        )

    def _categories(self) -> list[str]:
        try:
            return self._services.dress_service.list_categories()
        except Exception:
            get_logger(self.__class__.__name__).warning(
                "Could not load dress categories", exc_info=True
            )
            return []

    def _on_new(self) -> None:
        dialog = DressDialog(self, categories=self._categories())
        if dialog.exec() != QtWidgets.QDialog.Accepted:
            return
        try:
            dress = self._services.dress_service.create_dress(**dialog.get_data())
        except Exception as exc:
            show_service_error(self, exc)
            return
        self._services.log_activity("Dress Created", "dresses", dress.id, dress.name)
        self._services.data_bus.notify(f"Dress {dress.name} added.")

    def _on_edit(self) -> None:
        dress = self._selected()
        if not dress:
            return
        dialog = DressDialog(self, dress=dress, categories=self._categories())
        if dialog.exec() != QtWidgets.QDialog.Accepted:
            return
        try:
            updated = self._services.dress_service.update_dress(dress.id, **dialog.get_data())
        except Exception as exc:
            show_service_error(self, exc)
            return
        self._services.log_activity("Dress Updated", "dresses", updated.id)
        self._services.data_bus.notify(f"Dress {updated.name} updated.")

    def _on_toggle_maintenance(self) -> None:
        dress = self._selected()
        if not dress:
            return
        target = (
            AvailabilityStatus.AVAILABLE
            if dress.availability_status == AvailabilityStatus.MAINTENANCE
            else AvailabilityStatus.MAINTENANCE
        )
        try:
            self._services.dress_service.set_availability(dress.id, target)
        except Exception as exc:
            show_service_error(self, exc)
            return
        self._services.log_activity(
            "Dress Availability", "dresses", dress.id, target.value
        )
        self._services.data_bus.notify(f"Dress {dress.name} is now {target.value}.")

    def _on_delete(self) -> None:
        dress = self._selected()
        if not dress:
            return
        if not confirm(self, f"Delete dress '{dress.name}'?"):
            return
        try:
            self._services.dress_service.delete_dress(dress.id)
        except Exception as exc:
            show_service_error(self, exc)
            return
        self._services.log_activity("Dress Deleted", "dresses", dress.id)
        self._services.data_bus.notify(f"Dress {dress.name} deleted.")

