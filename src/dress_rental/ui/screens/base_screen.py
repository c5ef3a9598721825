"""Base class for screens that can refresh their data."""

from __future__ import annotations

from PySide6 import QtWidgets

from dress_rental.logging_config import get_logger
from dress_rental.services.errors import PersistenceError, ServiceError
from dress_rental.ui.app_services import AppServices
from dress_rental.ui.strings import (
    MSG_UNEXPECTED,
    TITLE_CONFIRMATION,
    TITLE_ERROR,
    TITLE_WARNING,
)
from dress_rental.utils.theme import apply_table_theme


def show_service_error(parent: QtWidgets.QWidget, exc: Exception) -> None:
    """Show a service error message, or a generic one for anything else."""
    if isinstance(exc, PersistenceError):
        QtWidgets.QMessageBox.critical(parent, TITLE_ERROR, str(exc))
    elif isinstance(exc, ServiceError):
        QtWidgets.QMessageBox.warning(parent, TITLE_WARNING, str(exc))
    else:
        get_logger(parent.__class__.__name__).error(
            "Unexpected UI error", exc_info=exc
        )
        QtWidgets.QMessageBox.critical(parent, TITLE_ERROR, MSG_UNEXPECTED)


def confirm(parent: QtWidgets.QWidget, message: str) -> bool:
    response = QtWidgets.QMessageBox.question(
        parent,
        TITLE_CONFIRMATION,
        message,
        QtWidgets.QMessageBox.Yes | QtWidgets.QMessageBox.No,
    )
    return response == QtWidgets.QMessageBox.Yes


def build_table(headers: list[str]) -> QtWidgets.QTableWidget:
    table = QtWidgets.QTableWidget(0, len(headers))
    table.setHorizontalHeaderLabels(headers)
    table.setSelectionBehavior(QtWidgets.QAbstractItemView.SelectRows)
    table.setSelectionMode(QtWidgets.QAbstractItemView.SingleSelection)
    table.setEditTriggers(QtWidgets.QAbstractItemView.NoEditTriggers)
    table.verticalHeader().setVisible(False)
    table.horizontalHeader().setStretchLastSection(True)
    return table


def fill_table(table: QtWidgets.QTableWidget, rows: list[list[str]]) -> None:
    table.setRowCount(len(rows))
    for row_index, values in enumerate(rows):
        for column, value in enumerate(values):
            table.setItem(row_index, column, QtWidgets.QTableWidgetItem(value))
    table.resizeColumnsToContents()


class BaseScreen(QtWidgets.QWidget):
    """Base screen with refresh hooks and data change handling."""

    def __init__(self, services: AppServices) -> None:
        super().__init__()
        self._services = services
        self._needs_refresh = False
        self._services.data_bus.data_changed.connect(self._on_data_changed)

    def refresh(self) -> None:
        """Reload data for this screen."""

    def _add_header(
        self, layout: QtWidgets.QVBoxLayout, title: str, subtitle: str
    ) -> None:
        title_label = QtWidgets.QLabel(title)
        title_label.setStyleSheet("font-size: 24px; font-weight: 600;")
        subtitle_label = QtWidgets.QLabel(subtitle)
        subtitle_label.setWordWrap(True)
        layout.addWidget(title_label)
        layout.addWidget(subtitle_label)

    def _themed(self, table: QtWidgets.QTableWidget) -> QtWidgets.QTableWidget:
        theme_manager = self._services.theme_manager
        apply_table_theme(table, "dark" if theme_manager.is_dark() else "light")
        theme_manager.theme_changed.connect(
            lambda theme, target=table: apply_table_theme(target, theme)
        )
        return table

    def _on_data_changed(self) -> None:
        if self.isVisible():
            self.refresh()
        else:
            self._needs_refresh = True

    def showEvent(self, event) -> None:  # noqa: N802
        super().showEvent(event)
        if self._needs_refresh:
            self._needs_refresh = False
            self.refresh()
