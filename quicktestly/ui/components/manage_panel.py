"""Component listing the teacher's published quizzes."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QAbstractItemView,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from quicktestly.constants.ui_constants import (
    MANAGE_DELETE_BUTTON,
    MANAGE_EMPTY_STATE,
    MANAGE_REFRESH_BUTTON,
    MANAGE_RESULTS_BUTTON,
    MANAGE_TOGGLE_VISIBILITY_BUTTON,
)
from quicktestly.core.errors import QuizError
from quicktestly.core.models import Quiz, UserIdentity
from quicktestly.core.quiz_manager import QuizManager
from quicktestly.styling.styles import Styles
from quicktestly.ui.dialog_helpers import confirm_delete_quiz, show_error, show_info

_COLUMNS = ("Name", "Questions", "Time limit", "Visibility", "Created")


class ManagePanel(QWidget):
    """Table of quizzes created by the console's teacher."""

    def __init__(
        self,
        quiz_manager: QuizManager,
        teacher: UserIdentity,
        on_view_results: Callable[[str], None] | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.quiz_manager = quiz_manager
        self.teacher = teacher
        self._on_view_results = on_view_results
        self._quizzes: list[Quiz] = []

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.summary_label = QLabel("", self)
        self.summary_label.setStyleSheet(Styles.get_large_label_style())
        layout.addWidget(self.summary_label)

        self.table = QTableWidget(0, len(_COLUMNS), self)
        self.table.setHorizontalHeaderLabels(list(_COLUMNS))
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table.setSelectionMode(QAbstractItemView.SingleSelection)
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.setAlternatingRowColors(True)
        self.table.horizontalHeader().setSectionResizeMode(0, QHeaderView.Stretch)
        self.table.doubleClicked.connect(lambda _: self._handle_view_results())
        layout.addWidget(self.table)

        self.empty_label = QLabel(MANAGE_EMPTY_STATE, self)
        self.empty_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.empty_label)

        button_row = QHBoxLayout()
        self.refresh_button = QPushButton(MANAGE_REFRESH_BUTTON, self)
        self.refresh_button.clicked.connect(self.refresh)
        button_row.addWidget(self.refresh_button)

        self.toggle_button = QPushButton(MANAGE_TOGGLE_VISIBILITY_BUTTON, self)
        self.toggle_button.clicked.connect(self._handle_toggle_visibility)
        button_row.addWidget(self.toggle_button)

        self.delete_button = QPushButton(MANAGE_DELETE_BUTTON, self)
        self.delete_button.clicked.connect(self._handle_delete)
        button_row.addWidget(self.delete_button)

        self.results_button = QPushButton(MANAGE_RESULTS_BUTTON, self)
        self.results_button.clicked.connect(self._handle_view_results)
        button_row.addWidget(self.results_button)

        layout.addLayout(button_row)

    def refresh(self) -> None:
        try:
            self._quizzes = self.quiz_manager.list_quizzes_by_teacher(self.teacher.user_id)
            dashboard = self.quiz_manager.teacher_dashboard(self.teacher)
        except QuizError as exc:
            show_error(self, "Could not load quizzes", str(exc))
            return

        self.summary_label.setText(
            f"{dashboard.total_quizzes} quizzes · {dashboard.total_students} students · "
            f"{dashboard.total_attempts} attempts · average {dashboard.average_score}%"
        )
        self.table.setRowCount(len(self._quizzes))
        for row, quiz in enumerate(self._quizzes):
            created = quiz.created_at.astimezone().strftime("%Y-%m-%d %H:%M") if quiz.created_at else ""
            values = (
                quiz.name,
                str(quiz.question_count),
                f"{quiz.time_limit_minutes} min",
                "Public" if quiz.is_public else "Private",
                created,
            )
            for column, value in enumerate(values):
                self.table.setItem(row, column, QTableWidgetItem(value))
        has_quizzes = bool(self._quizzes)
        self.table.setVisible(has_quizzes)
        self.empty_label.setVisible(not has_quizzes)

    def _selected_quiz(self) -> Quiz | None:
        row = self.table.currentRow()
        if 0 <= row < len(self._quizzes):
            return self._quizzes[row]
        show_info(self, "No selection", "Select a quiz first.")
        return None

    def _handle_toggle_visibility(self) -> None:
        quiz = self._selected_quiz()
        if quiz is None:
            return
        try:
            self.quiz_manager.set_quiz_visibility(quiz.id, not quiz.is_public, self.teacher)
        except QuizError as exc:
            show_error(self, "Update failed", str(exc))
            return
        self.refresh()

    def _handle_delete(self) -> None:
        quiz = self._selected_quiz()
        if quiz is None or not confirm_delete_quiz(self, quiz.name):
            return
        try:
            self.quiz_manager.delete_quiz(quiz.id, self.teacher)
        except QuizError as exc:
            show_error(self, "Delete failed", str(exc))
            return
        self.refresh()

    def _handle_view_results(self) -> None:
        quiz = self._selected_quiz()
        if quiz is not None and self._on_view_results is not None:
            self._on_view_results(quiz.id)
