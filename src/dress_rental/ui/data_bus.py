"""Shared event bus for UI refresh signals."""

from __future__ import annotations

from PySide6 import QtCore


class DataEventBus(QtCore.QObject):
    """Signals shared by every screen.

    ``data_changed`` asks visible screens to reload; ``status_message`` is
    shown in the main window status bar.
    """

    data_changed = QtCore.Signal()
    status_message = QtCore.Signal(str)

    def notify(self, message: str) -> None:
        self.data_changed.emit()
        self.status_message.emit(message)
