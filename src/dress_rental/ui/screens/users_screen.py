"""Administrator screen for operator accounts and the activity log."""

from __future__ import annotations

from typing import List, Optional

from PySide6 import QtWidgets

from dress_rental.domain.models import User, UserRole
from dress_rental.ui.app_services import AppServices
from dress_rental.ui.screens.base_screen import (
    BaseScreen,
    build_table,
    fill_table,
    show_service_error,
)
from dress_rental.ui.strings import TITLE_WARNING, format_date


class UserDialog(QtWidgets.QDialog):
    def __init__(self, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("New user")
        self.setModal(True)
        layout = QtWidgets.QVBoxLayout(self)
        form = QtWidgets.QFormLayout()
        self.username_input = QtWidgets.QLineEdit()
        self.password_input = QtWidgets.QLineEdit()
        self.password_input.setEchoMode(QtWidgets.QLineEdit.Password)
        self.role_combo = QtWidgets.QComboBox()
        self.role_combo.addItems([role.value for role in UserRole])
        self.role_combo.setCurrentText(UserRole.STAFF.value)
        self.full_name_input = QtWidgets.QLineEdit()
        self.email_input = QtWidgets.QLineEdit()
        self.phone_input = QtWidgets.QLineEdit()
        form.addRow("Username:", self.username_input)
        form.addRow("Password:", self.password_input)
        form.addRow("Role:", self.role_combo)
        form.addRow("Full name:", self.full_name_input)
        form.addRow("Email:", self.email_input)
        form.addRow("Phone:", self.phone_input)
        layout.addLayout(form)
        button_box = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.Save | QtWidgets.QDialogButtonBox.Cancel
        )
        button_box.accepted.connect(self._on_accept)
        button_box.rejected.connect(self.reject)
        layout.addWidget(button_box)

    def _on_accept(self) -> None:
        if not self.username_input.text().strip():
            QtWidgets.QMessageBox.warning(self, TITLE_WARNING, "Enter a username.")
            return
        self.accept()

    def get_data(self) -> dict[str, Optional[str]]:
        return {
            "username": self.username_input.text().strip(),
            "password": self.password_input.text(),
            "role": self.role_combo.currentText(),
            "full_name": self.full_name_input.text().strip() or None,
            "email": self.email_input.text().strip() or None,
            "phone": self.phone_input.text().strip() or None,
        }


class UsersScreen(BaseScreen):
    """Operator accounts and recent activity."""

    def __init__(self, services: AppServices) -> None:
        super().__init__(services)
        self._users: List[User] = []
        self._build_ui()
        self.refresh()

    def _build_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)
        self._add_header(layout, "Users", "Operator accounts and recent activity.")

        button_layout = QtWidgets.QHBoxLayout()
        self.new_button = QtWidgets.QPushButton("New user")
        self.toggle_button = QtWidgets.QPushButton("Activate / deactivate")
        self.new_button.clicked.connect(self._on_new)
        self.toggle_button.clicked.connect(self._on_toggle)
        button_layout.addWidget(self.new_button)
        button_layout.addWidget(self.toggle_button)
        button_layout.addStretch()
        layout.addLayout(button_layout)

        self.table = self._themed(
            build_table(["ID", "Username", "Full name", "Role", "Active", "Last login"])
        )
        self.table.itemSelectionChanged.connect(self._on_selection_changed)
        layout.addWidget(self.table)

        layout.addWidget(QtWidgets.QLabel("Recent activity"))
        self.activity_table = self._themed(
            build_table(["When", "User", "Action", "Table", "Record", "Details"])
        )
        layout.addWidget(self.activity_table)
        self._on_selection_changed()

    def refresh(self) -> None:
        auth = self._services.auth_service
        try:
            users = auth.list_users()
            activity = auth.list_activity(100)
        except Exception as exc:
            show_service_error(self, exc)
            return
        self._users = users
        names = {user.id: user.username for user in users}
        fill_table(
            self.table,
            [
                [
                    str(user.id),
                    user.username,
                    user.full_name or "-",
                    user.role.value,
                    "Yes" if user.is_active else "No",
                    format_date(user.last_login),
                ]
                for user in users
            ],
        )
        fill_table(
            self.activity_table,
            [
                [
                    entry.created_at.replace("T", " "),
                    names.get(entry.user_id, "-"),
                    entry.action,
                    entry.table_name or "-",
                    str(entry.record_id) if entry.record_id is not None else "-",
                    entry.details or "",
                ]
                for entry in activity
            ],
        )
        self._on_selection_changed()

    def _selected(self) -> Optional[User]:
        selected = self.table.selectionModel().selectedRows()
        if not selected:
            return None
        row = selected[0].row()
        return self._users[row] if 0 <= row < len(self._users) else None

    def _on_selection_changed(self) -> None:
        self.toggle_button.setEnabled(self._selected() is not None)

    def _on_new(self) -> None:
        dialog = UserDialog(self)
        if dialog.exec() != QtWidgets.QDialog.Accepted:
            return
        try:
            user = self._services.auth_service.create_user(
                self._services.session, **dialog.get_data()
            )
        except Exception as exc:
            show_service_error(self, exc)
            return
        self._services.data_bus.notify(f"User {user.username} created.")

    def _on_toggle(self) -> None:
        user = self._selected()
        if not user:
            return
        try:
            self._services.auth_service.set_user_active(
                self._services.session, user.id, not user.is_active
            )
        except Exception as exc:
            show_service_error(self, exc)
            return
        state = "deactivated" if user.is_active else "activated"
        self._services.data_bus.notify(f"User {user.username} {state}.")
