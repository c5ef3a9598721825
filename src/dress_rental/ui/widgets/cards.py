"""Dashboard card widgets."""

from __future__ import annotations

from PySide6 import QtWidgets

from dress_rental.utils.theme import ThemeManager

_CARD_STYLES = {
    "dark": ("#3a2f42", "#4a3e53", "rgba(255, 255, 255, 0.75)", "#ffffff"),
    "light": ("#ffffff", "rgba(0, 0, 0, 0.10)", "rgba(0, 0, 0, 0.65)", "#7a2553"),
}


class KpiCard(QtWidgets.QFrame):
    """Summary card with title and value."""

    def __init__(
        self,
        theme_manager: ThemeManager,
        title: str,
        value: str = "-",
        parent: QtWidgets.QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._theme_manager = theme_manager
        self.setObjectName("KpiCard")

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(16, 12, 16, 12)
        layout.setSpacing(6)
        self._title_label = QtWidgets.QLabel(title)
        self._title_label.setObjectName("KpiTitle")
        self._value_label = QtWidgets.QLabel(value)
        self._value_label.setObjectName("KpiValue")
        layout.addWidget(self._title_label)
        layout.addWidget(self._value_label)

        self._theme_manager.theme_changed.connect(lambda _theme: self.apply_theme())
        self.apply_theme()

    def set_value(self, value: str) -> None:
        self._value_label.setText(value)

    def apply_theme(self) -> None:
        key = "dark" if self._theme_manager.is_dark() else "light"
        background, border, title, value = _CARD_STYLES[key]
        self.setStyleSheet(
            f"""
            QFrame#KpiCard {{
                background: {background};
                border: 1px solid {border};
                border-radius: 12px;
            }}
            QLabel#KpiTitle {{
                color: {title};
                font-weight: 600;
                font-size: 13px;
            }}
            QLabel#KpiValue {{
                color: {value};
                font-size: 22px;
                font-weight: 700;
            }}
            """
        )
