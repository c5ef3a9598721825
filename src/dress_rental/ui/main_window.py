"""Main window for the Dress Rental Manager application."""

from __future__ import annotations

from PySide6 import QtGui, QtWidgets

from dress_rental.domain.models import UserRole
from dress_rental.ui.app_services import AppServices
from dress_rental.ui.dialogs import ChangePasswordDialog
from dress_rental.ui.screens import (
    CustomersScreen,
    DressesScreen,
    PaymentsScreen,
    RentalsScreen,
    ReportsScreen,
    UsersScreen,
)
from dress_rental.ui.strings import APP_NAME
from dress_rental.version import __version__


class MainWindow(QtWidgets.QMainWindow):
    """Primary window with navigation and stacked screens."""

    def __init__(self, services: AppServices) -> None:
        super().__init__()
        self._services = services
        self._stack = QtWidgets.QStackedWidget()
        self._theme_manager = services.theme_manager
        session = services.session
        self.setWindowTitle(
            f"{APP_NAME} v{__version__} - {session.display_name} ({session.role.value})"
        )
        self.resize(1100, 680)
        self._build_ui()
        self._services.data_bus.status_message.connect(
            lambda message: self.statusBar().showMessage(message, 5000)
        )

    def _screens(self) -> list[tuple[str, QtWidgets.QWidget]]:
        screens: list[tuple[str, QtWidgets.QWidget]] = [
            ("Rentals", RentalsScreen(self._services)),
            ("Customers", CustomersScreen(self._services)),
            ("Dresses", DressesScreen(self._services)),
            ("Payments", PaymentsScreen(self._services)),
        ]
        if self._services.session.has_permission(UserRole.ADMINISTRATOR):
            screens.append(("Reports", ReportsScreen(self._services)))
            screens.append(("Users", UsersScreen(self._services)))
        return screens

    def _build_ui(self) -> None:
        central = QtWidgets.QWidget(self)
        main_layout = QtWidgets.QHBoxLayout(central)
        main_layout.setContentsMargins(0, 0, 0, 0)

        sidebar = QtWidgets.QFrame()
        sidebar.setObjectName("sidebar")
        sidebar.setFixedWidth(220)
        sidebar_layout = QtWidgets.QVBoxLayout(sidebar)
        sidebar_layout.setContentsMargins(16, 16, 16, 16)
        sidebar_layout.setSpacing(12)

        title = QtWidgets.QLabel(APP_NAME)
        title.setStyleSheet("font-size: 18px; font-weight: 600;")
        title.setWordWrap(True)
        sidebar_layout.addWidget(title)

        button_group = QtWidgets.QButtonGroup(self)
        button_group.setExclusive(True)
        for index, (label, screen) in enumerate(self._screens()):
            button = QtWidgets.QPushButton(label)
            button.setCheckable(True)
            button.setProperty("nav", True)
            button.setMinimumHeight(48)
            button.clicked.connect(lambda _checked, idx=index: self._stack.setCurrentIndex(idx))
            button_group.addButton(button)
            sidebar_layout.addWidget(button)
            self._stack.addWidget(screen)

        sidebar_layout.addStretch()
        user_label = QtWidgets.QLabel(
            f"{self._services.session.display_name}\n{self._services.session.role.value}"
        )
        sidebar_layout.addWidget(user_label)

        main_layout.addWidget(sidebar)
        main_layout.addWidget(self._stack)
        self.setCentralWidget(central)
        self.setStyleSheet(
            """
            QPushButton[nav="true"] {
                font-size: 15px;
                padding: 10px;
                text-align: left;
                border-radius: 8px;
            }
            """
        )
        self._build_menu()
        button_group.buttons()[0].setChecked(True)
        self._stack.setCurrentIndex(0)
        self._stack.currentChanged.connect(self._on_screen_changed)

    def _on_screen_changed(self, index: int) -> None:
        screen = self._stack.widget(index)
        refresh = getattr(screen, "refresh", None)
        if callable(refresh):
            refresh()

    def _build_menu(self) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("File")
        password_action = file_menu.addAction("Change password...")
        password_action.triggered.connect(self._on_change_password)
        file_menu.addSeparator()
        exit_action = file_menu.addAction("Log out and exit")
        exit_action.triggered.connect(self.close)

        view_menu = menu_bar.addMenu("View")
        theme_menu = view_menu.addMenu("Theme")
        theme_group = QtGui.QActionGroup(self)
        theme_group.setExclusive(True)
        for key, label in (("light", "Light"), ("dark", "Dark"), ("system", "System")):
            action = theme_menu.addAction(label)
            action.setCheckable(True)
            action.setData(key)
            action.setChecked(key == self._theme_manager.theme_choice)
            theme_group.addAction(action)
        theme_group.triggered.connect(
            lambda action: self._theme_manager.set_theme(action.data())
        )

        help_menu = menu_bar.addMenu("Help")
        about_action = help_menu.addAction("About")
        about_action.triggered.connect(self._show_about)

    def _on_change_password(self) -> None:
        dialog = ChangePasswordDialog(
            self._services.auth_service, self._services.session, self
        )
        dialog.exec()

    def _show_about(self) -> None:
        QtWidgets.QMessageBox.information(
            self, "About", f"{APP_NAME}\nVersion {__version__}"
        )

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:  # noqa: N802
        self._services.auth_service.logout(self._services.session)
        super().closeEvent(event)

