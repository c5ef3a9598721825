"""Light/dark theme handling for the desktop UI."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from PySide6 import QtCore, QtGui, QtWidgets

from dress_rental.logging_config import get_logger
from dress_rental.utils.config_store import load_config_section, update_config_section

ThemeChoice = Literal["light", "dark", "system"]
THEME_CHOICES = ("light", "dark", "system")
UI_SECTION = "ui"


@dataclass(frozen=True)
class ThemeSettings:
    """Persisted theme settings."""

    theme: ThemeChoice = "system"


def load_theme_settings(config_path: Path) -> ThemeSettings:
    theme = load_config_section(config_path, UI_SECTION).get("theme", "system")
    if theme not in THEME_CHOICES:
        theme = "system"
    return ThemeSettings(theme=theme)


def save_theme_settings(config_path: Path, settings: ThemeSettings) -> None:
    update_config_section(config_path, UI_SECTION, {"theme": settings.theme})


def resolve_theme_choice(choice: ThemeChoice) -> str:
    """Map ``system`` onto the platform colour scheme (light when unknown)."""
    if choice in ("light", "dark"):
        return choice
    hints = QtGui.QGuiApplication.styleHints()
    scheme = getattr(hints, "colorScheme", None)
    if scheme is not None and scheme() == QtCore.Qt.ColorScheme.Dark:
        return "dark"
    return "light"


class ThemeManager(QtCore.QObject):
    """Applies the chosen theme and announces changes."""

    theme_changed = QtCore.Signal(str)

    def __init__(self, app: QtWidgets.QApplication, config_path: Path) -> None:
        super().__init__()
        self._app = app
        self._config_path = config_path
        self._settings = load_theme_settings(config_path)
        self._resolved_theme = "light"
        self._logger = get_logger(self.__class__.__name__)
        self._apply_theme()

    @property
    def theme_choice(self) -> ThemeChoice:
        return self._settings.theme

    def is_dark(self) -> bool:
        return self._resolved_theme == "dark"

    def set_theme(self, choice: ThemeChoice) -> None:
        if choice not in THEME_CHOICES:
            choice = "system"
        self._settings = ThemeSettings(theme=choice)
        try:
            save_theme_settings(self._config_path, self._settings)
        except OSError:
            self._logger.warning("Could not save the theme preference.", exc_info=True)
        self._apply_theme()
        self.theme_changed.emit(self._resolved_theme)

    def _apply_theme(self) -> None:
        self._resolved_theme = resolve_theme_choice(self._settings.theme)
        self._app.setStyle("Fusion")
        if self._resolved_theme == "dark":
            self._app.setPalette(_build_dark_palette())
            self._app.setStyleSheet(_DARK_STYLESHEET)
        else:
            self._app.setPalette(self._app.style().standardPalette())
            self._app.setStyleSheet("")
        self._logger.info(
            "Theme applied: %s (configured: %s)",
            self._resolved_theme,
            self._settings.theme,
        )


def apply_table_theme(table: QtWidgets.QTableView, theme_name: str) -> None:
    table.setAlternatingRowColors(True)
    table.setStyleSheet(_DARK_TABLE_STYLESHEET if theme_name == "dark" else "")


def _build_dark_palette() -> QtGui.QPalette:
    palette = QtGui.QPalette()
    roles = {
        QtGui.QPalette.Window: "#2a2230",
        QtGui.QPalette.WindowText: "#f3eef5",
        QtGui.QPalette.Base: "#201a25",
        QtGui.QPalette.AlternateBase: "#2a2230",
        QtGui.QPalette.Text: "#f3eef5",
        QtGui.QPalette.Button: "#3a2f42",
        QtGui.QPalette.ButtonText: "#f3eef5",
        QtGui.QPalette.Highlight: "#b0467c",
        QtGui.QPalette.HighlightedText: "#ffffff",
        QtGui.QPalette.PlaceholderText: "#a597ad",
    }
    for role, color in roles.items():
        palette.setColor(role, QtGui.QColor(color))
    for role in (
        QtGui.QPalette.Text,
        QtGui.QPalette.ButtonText,
        QtGui.QPalette.WindowText,
    ):
        palette.setColor(QtGui.QPalette.Disabled, role, QtGui.QColor("#8c7f94"))
    return palette


_DARK_STYLESHEET = """
QFrame#sidebar {
    background-color: #201a25;
}
QPushButton[nav="true"] {
    background-color: #3a2f42;
    color: #f3eef5;
}
QPushButton[nav="true"]:checked {
    background-color: #b0467c;
    color: #ffffff;
}
QLineEdit, QDateEdit, QComboBox, QSpinBox, QDoubleSpinBox, QPlainTextEdit {
    border: 1px solid #5b4d66;
    border-radius: 6px;
    padding: 4px;
}
"""

_DARK_TABLE_STYLESHEET = """
QTableWidget, QTableView {
    gridline-color: #4a3e53;
    selection-background-color: #b0467c;
    selection-color: #ffffff;
}
QHeaderView::section {
    background-color: #3a2f42;
    color: #f3eef5;
    border: 1px solid #4a3e53;
    padding: 6px 8px;
}
"""
