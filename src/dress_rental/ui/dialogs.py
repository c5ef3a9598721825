"""Login and password dialogs."""

from __future__ import annotations

from typing import Optional

from PySide6 import QtWidgets

from dress_rental.services.auth_service import AuthService, Session
from dress_rental.services.errors import ServiceError
from dress_rental.ui.strings import APP_NAME, TITLE_SUCCESS, TITLE_WARNING


class LoginDialog(QtWidgets.QDialog):
    """Ask for credentials until they are accepted or the user cancels."""

    def __init__(self, auth_service: AuthService, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self._auth_service = auth_service
        self._session: Optional[Session] = None
        self.setWindowTitle(f"{APP_NAME} - Login")
        self.setModal(True)

        layout = QtWidgets.QVBoxLayout(self)
        title = QtWidgets.QLabel(APP_NAME)
        title.setStyleSheet("font-size: 18px; font-weight: 600;")
        layout.addWidget(title)

        form = QtWidgets.QFormLayout()
        self.username_input = QtWidgets.QLineEdit()
        self.password_input = QtWidgets.QLineEdit()
        self.password_input.setEchoMode(QtWidgets.QLineEdit.Password)
        self.password_input.returnPressed.connect(self._on_login)
        form.addRow("Username:", self.username_input)
        form.addRow("Password:", self.password_input)
        layout.addLayout(form)

        button_box = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.Ok | QtWidgets.QDialogButtonBox.Cancel
        )
        button_box.button(QtWidgets.QDialogButtonBox.Ok).setText("Log in")
        button_box.accepted.connect(self._on_login)
        button_box.rejected.connect(self.reject)
        layout.addWidget(button_box)

    @property
    def session(self) -> Optional[Session]:
        return self._session

    def _on_login(self) -> None:
        try:
            self._session = self._auth_service.login(
                self.username_input.text(), self.password_input.text()
            )
        except ServiceError as exc:
            QtWidgets.QMessageBox.warning(self, TITLE_WARNING, str(exc))
            self.password_input.clear()
            self.password_input.setFocus()
            return
        self.accept()


class ChangePasswordDialog(QtWidgets.QDialog):
    def __init__(
        self,
        auth_service: AuthService,
        session: Session,
        parent: QtWidgets.QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._auth_service = auth_service
        self._session = session
        self.setWindowTitle("Change password")
        self.setModal(True)

        layout = QtWidgets.QVBoxLayout(self)
        form = QtWidgets.QFormLayout()
        self.old_input = QtWidgets.QLineEdit()
        self.new_input = QtWidgets.QLineEdit()
        self.confirm_input = QtWidgets.QLineEdit()
        for field in (self.old_input, self.new_input, self.confirm_input):
            field.setEchoMode(QtWidgets.QLineEdit.Password)
        form.addRow("Current password:", self.old_input)
        form.addRow("New password:", self.new_input)
        form.addRow("Confirm new password:", self.confirm_input)
        layout.addLayout(form)

        button_box = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.Save | QtWidgets.QDialogButtonBox.Cancel
        )
        button_box.accepted.connect(self._on_save)
        button_box.rejected.connect(self.reject)
        layout.addWidget(button_box)

    def _on_save(self) -> None:
        if self.new_input.text() != self.confirm_input.text():
            QtWidgets.QMessageBox.warning(self, TITLE_WARNING, "The new passwords do not match.")
            return
        try:
            self._auth_service.change_password(
                self._session, self.old_input.text(), self.new_input.text()
            )
        except ServiceError as exc:
            QtWidgets.QMessageBox.warning(self, TITLE_WARNING, str(exc))
            return
        QtWidgets.QMessageBox.information(self, TITLE_SUCCESS, "Password changed.")
        self.accept()
