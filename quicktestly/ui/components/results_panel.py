"""Component showing attempts, statistics and the leaderboard of one quiz."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QAbstractItemView,
    QComboBox,
    QGroupBox,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from quicktestly.constants.quiz_constants import DEFAULT_LEADERBOARD_LIMIT
from quicktestly.constants.ui_constants import RESULTS_EMPTY_STATE, RESULTS_LEADERBOARD_TITLE
from quicktestly.core.errors import NotFoundError, QuizError
from quicktestly.core.models import QuizResult, UserIdentity
from quicktestly.core.quiz_manager import QuizManager
from quicktestly.core.services.leaderboard import grade_for_score
from quicktestly.styling.color_palette import ColorPalette, Theme
from quicktestly.styling.styles import Styles
from quicktestly.ui.dialog_helpers import show_error

_RESULT_COLUMNS = ("Student", "Email", "Score", "Grade", "Correct", "Time", "Completed")
_LEADERBOARD_COLUMNS = ("#", "Student", "Score", "Time")


def _format_duration(seconds: int) -> str:
    minutes, seconds = divmod(seconds, 60)
    return f"{minutes}:{seconds:02d}"


def _make_table(columns: tuple[str, ...], parent: QWidget) -> QTableWidget:
    table = QTableWidget(0, len(columns), parent)
    table.setHorizontalHeaderLabels(list(columns))
    table.setEditTriggers(QAbstractItemView.NoEditTriggers)
    table.setSelectionMode(QAbstractItemView.NoSelection)
    table.setAlternatingRowColors(True)
    table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
    table.verticalHeader().setVisible(False)
    return table


class ResultsPanel(QWidget):
    """Per-quiz results for the teacher, refreshed periodically by the main window."""

    def __init__(
        self,
        quiz_manager: QuizManager,
        teacher: UserIdentity,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.quiz_manager = quiz_manager
        self.teacher = teacher
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        selector_row = QHBoxLayout()
        selector_row.addWidget(QLabel("Quiz:", self))
        self.quiz_combo = QComboBox(self)
        self.quiz_combo.currentIndexChanged.connect(lambda _: self.refresh_results())
        selector_row.addWidget(self.quiz_combo, 1)
        layout.addLayout(selector_row)

        stats_row = QHBoxLayout()
        self.stat_labels: dict[str, QLabel] = {}
        for key, title in (
            ("total_attempts", "Attempts"),
            ("average_score", "Average"),
            ("unique_students", "Students"),
            ("pass_rate", "Pass rate"),
        ):
            box = QGroupBox(title, self)
            box_layout = QVBoxLayout()
            box.setLayout(box_layout)
            value_label = QLabel("–", box)
            value_label.setAlignment(Qt.AlignCenter)
            value_label.setStyleSheet(Styles.get_stat_value_style())
            box_layout.addWidget(value_label)
            self.stat_labels[key] = value_label
            stats_row.addWidget(box)
        layout.addLayout(stats_row)

        self.results_table = _make_table(_RESULT_COLUMNS, self)
        layout.addWidget(self.results_table, 3)

        self.empty_label = QLabel(RESULTS_EMPTY_STATE, self)
        self.empty_label.setAlignment(Qt.AlignCenter)
        self.empty_label.setStyleSheet(Styles.get_secondary_label_style())
        layout.addWidget(self.empty_label)

        leaderboard_box = QGroupBox(RESULTS_LEADERBOARD_TITLE, self)
        leaderboard_layout = QVBoxLayout()
        leaderboard_box.setLayout(leaderboard_layout)
        self.leaderboard_table = _make_table(_LEADERBOARD_COLUMNS, leaderboard_box)
        leaderboard_layout.addWidget(self.leaderboard_table)
        layout.addWidget(leaderboard_box, 2)

    def reload_quizzes(self, select_quiz_id: str | None = None) -> None:
        """Repopulate the quiz selector, keeping or changing the selection."""
        current_id = select_quiz_id or self.quiz_combo.currentData()
        try:
            quizzes = self.quiz_manager.list_quizzes_by_teacher(self.teacher.user_id)
        except QuizError as exc:
            show_error(self, "Could not load quizzes", str(exc))
            return

        self.quiz_combo.blockSignals(True)
        self.quiz_combo.clear()
        for quiz in quizzes:
            self.quiz_combo.addItem(quiz.name, userData=quiz.id)
        index = self.quiz_combo.findData(current_id) if current_id else -1
        self.quiz_combo.setCurrentIndex(index if index >= 0 else 0)
        self.quiz_combo.blockSignals(False)
        self.refresh_results()

    def refresh_results(self) -> None:
        quiz_id = self.quiz_combo.currentData()
        if not quiz_id:
            self._show_results([], [])
            self._show_statistics(None)
            return
        try:
            results = self.quiz_manager.results_for_quiz(quiz_id, self.teacher)
            stats = self.quiz_manager.quiz_statistics(quiz_id, self.teacher)
            leaderboard = self.quiz_manager.leaderboard_for_quiz(quiz_id, DEFAULT_LEADERBOARD_LIMIT)
        except NotFoundError:
            self.reload_quizzes()
            return
        except QuizError as exc:
            self.empty_label.setText(f"Could not load results: {exc}")
            self.empty_label.setVisible(True)
            return
        self.empty_label.setText(RESULTS_EMPTY_STATE)
        self._show_statistics(stats)
        self._show_results(results, leaderboard)

    def _show_statistics(self, stats) -> None:
        if stats is None:
            for label in self.stat_labels.values():
                label.setText("–")
                label.setStyleSheet(Styles.get_stat_value_style())
            return
        self.stat_labels["total_attempts"].setText(str(stats.total_attempts))
        self.stat_labels["average_score"].setText(f"{stats.average_score}%")
        if stats.total_attempts:
            average_grade = grade_for_score(stats.average_score)
            self.stat_labels["average_score"].setStyleSheet(Styles.get_stat_value_style(average_grade))
        else:
            self.stat_labels["average_score"].setStyleSheet(Styles.get_stat_value_style())
        self.stat_labels["unique_students"].setText(str(stats.unique_students))
        self.stat_labels["pass_rate"].setText(f"{stats.pass_rate}%")

    def _show_results(self, results: list[QuizResult], leaderboard: list[QuizResult]) -> None:
        self.results_table.setRowCount(len(results))
        for row, result in enumerate(results):
            grade = grade_for_score(result.score)
            values = (
                result.user_name,
                result.user_email,
                f"{result.score}%",
                grade,
                f"{result.correct_answers}/{result.total_questions}",
                _format_duration(result.time_spent_seconds),
                result.completed_at.astimezone().strftime("%Y-%m-%d %H:%M"),
            )
            for column, value in enumerate(values):
                item = QTableWidgetItem(value)
                if column == 3:
                    item.setForeground(QColor(ColorPalette.for_grade(grade).get(Theme.LIGHT)))
                self.results_table.setItem(row, column, item)
        self.results_table.setVisible(bool(results))
        self.empty_label.setVisible(not results)

        self.leaderboard_table.setRowCount(len(leaderboard))
        for row, result in enumerate(leaderboard):
            values = (
                str(row + 1),
                result.user_name,
                f"{result.score}%",
                _format_duration(result.time_spent_seconds),
            )
            for column, value in enumerate(values):
                self.leaderboard_table.setItem(row, column, QTableWidgetItem(value))
