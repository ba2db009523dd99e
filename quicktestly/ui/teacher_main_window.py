"""Qt main window implementing the create/manage/results modes."""

from __future__ import annotations

from enum import Enum, auto
from pathlib import Path

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from quicktestly.constants.about import (
    APP_ABOUT_TEXT,
    APP_LICENSE,
    APP_NAME,
    APP_VERSION,
    HELP_TEXT,
)
from quicktestly.constants.ui_constants import (
    EMPTY_DRAFT_MESSAGE,
    EXPORT_DIALOG_TITLE,
    EXPORT_FILE_FILTER,
    IMPORT_DIALOG_TITLE,
    IMPORT_FILE_FILTER,
    MODE_BUTTON_CREATE,
    MODE_BUTTON_IMPORT,
    MODE_BUTTON_MANAGE,
    MODE_BUTTON_RESULTS,
    MODE_BUTTON_SAVE_FILE,
    RESULTS_REFRESH_INTERVAL_MS,
    STUDENT_URL_PLACEHOLDER,
    WINDOW_TITLE,
)
from quicktestly.core.errors import ValidationError
from quicktestly.core.models import UserIdentity
from quicktestly.core.quiz_exporter import save_quiz_to_file
from quicktestly.core.quiz_importer import QuizImportError, load_quiz_from_file
from quicktestly.core.quiz_manager import QuizManager
from quicktestly.styling.styles import Styles
from quicktestly.ui.components.creation_panel import CreationPanel
from quicktestly.ui.components.manage_panel import ManagePanel
from quicktestly.ui.components.results_panel import ResultsPanel
from quicktestly.ui.dialog_helpers import (
    confirm_discard_draft,
    show_error,
    show_info,
    show_warning,
)


class TeacherMode(Enum):
    """High-level UI mode for the teacher console."""

    QUIZ_CREATION = auto()
    QUIZ_MANAGEMENT = auto()
    QUIZ_RESULTS = auto()


class TeacherMainWindow(QMainWindow):
    """Main Qt window orchestrating the three console modes."""

    def __init__(
        self,
        quiz_manager: QuizManager,
        teacher: UserIdentity,
        student_url: str | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)

        self.quiz_manager = quiz_manager
        self.teacher = teacher
        self.student_url = student_url or STUDENT_URL_PLACEHOLDER

        self._mode = TeacherMode.QUIZ_CREATION
        self._last_export_path: Path | None = None

        self._build_ui()
        self._configure_refresh_timer()
        self.setStyleSheet(Styles.get_main_window_style())

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)

        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        self._build_mode_buttons(root_layout)

        header = QLabel(
            f"Signed in as {self.teacher.name} ({self.teacher.email}) · Students: {self.student_url}",
            self,
        )
        header.setStyleSheet(Styles.get_secondary_label_style())
        root_layout.addWidget(header)

        self.mode_stack = QStackedWidget(self)

        self.creation_panel = CreationPanel(
            self.quiz_manager,
            self.teacher,
            on_published=self._handle_quiz_published,
            parent=self,
        )
        self.manage_panel = ManagePanel(
            self.quiz_manager,
            self.teacher,
            on_view_results=self._show_results_for,
            parent=self,
        )
        self.results_panel = ResultsPanel(self.quiz_manager, self.teacher, parent=self)

        self.mode_stack.addWidget(self.creation_panel)
        self.mode_stack.addWidget(self.manage_panel)
        self.mode_stack.addWidget(self.results_panel)

        root_layout.addWidget(self.mode_stack)

        self._set_mode(TeacherMode.QUIZ_CREATION)

    def _build_mode_buttons(self, layout: QVBoxLayout) -> None:
        button_row = QHBoxLayout()

        self.create_mode_button = QPushButton(MODE_BUTTON_CREATE, self)
        self.create_mode_button.setCheckable(True)
        self.create_mode_button.clicked.connect(lambda: self._set_mode(TeacherMode.QUIZ_CREATION))
        button_row.addWidget(self.create_mode_button)

        self.manage_mode_button = QPushButton(MODE_BUTTON_MANAGE, self)
        self.manage_mode_button.setCheckable(True)
        self.manage_mode_button.clicked.connect(lambda: self._set_mode(TeacherMode.QUIZ_MANAGEMENT))
        button_row.addWidget(self.manage_mode_button)

        self.results_mode_button = QPushButton(MODE_BUTTON_RESULTS, self)
        self.results_mode_button.setCheckable(True)
        self.results_mode_button.clicked.connect(lambda: self._set_mode(TeacherMode.QUIZ_RESULTS))
        button_row.addWidget(self.results_mode_button)

        self.import_button = QPushButton(MODE_BUTTON_IMPORT, self)
        self.import_button.clicked.connect(self._handle_import_quiz)
        button_row.addWidget(self.import_button)

        self.save_quiz_button = QPushButton(MODE_BUTTON_SAVE_FILE, self)
        self.save_quiz_button.clicked.connect(self._handle_save_quiz_to_file)
        button_row.addWidget(self.save_quiz_button)

        self.about_button = QPushButton(f"About {APP_NAME}", self)
        self.about_button.clicked.connect(self._handle_about)
        button_row.addWidget(self.about_button)

        self.help_button = QPushButton("Help", self)
        self.help_button.clicked.connect(self._handle_help)
        button_row.addWidget(self.help_button)

        layout.addLayout(button_row)

    def _configure_refresh_timer(self) -> None:
        self.refresh_timer = QTimer(self)
        self.refresh_timer.setInterval(RESULTS_REFRESH_INTERVAL_MS)
        self.refresh_timer.timeout.connect(self._refresh_state)
        self.refresh_timer.start()

    def _refresh_state(self) -> None:
        if self._mode == TeacherMode.QUIZ_RESULTS:
            self.results_panel.refresh_results()

    def _set_mode(self, mode: TeacherMode) -> None:
        if mode != TeacherMode.QUIZ_CREATION and self._mode == TeacherMode.QUIZ_CREATION:
            if not self.creation_panel.check_unsaved_changes():
                mode = TeacherMode.QUIZ_CREATION
        self._mode = mode
        self.create_mode_button.setChecked(mode == TeacherMode.QUIZ_CREATION)
        self.manage_mode_button.setChecked(mode == TeacherMode.QUIZ_MANAGEMENT)
        self.results_mode_button.setChecked(mode == TeacherMode.QUIZ_RESULTS)

        index_map = {
            TeacherMode.QUIZ_CREATION: 0,
            TeacherMode.QUIZ_MANAGEMENT: 1,
            TeacherMode.QUIZ_RESULTS: 2,
        }
        self.mode_stack.setCurrentIndex(index_map[mode])
        if mode == TeacherMode.QUIZ_MANAGEMENT:
            self.manage_panel.refresh()
        elif mode == TeacherMode.QUIZ_RESULTS:
            self.results_panel.reload_quizzes()

    def _show_results_for(self, quiz_id: str) -> None:
        self._set_mode(TeacherMode.QUIZ_RESULTS)
        self.results_panel.reload_quizzes(select_quiz_id=quiz_id)

    def _handle_quiz_published(self, quiz_id: str) -> None:
        self.creation_panel.reset_state()
        self._set_mode(TeacherMode.QUIZ_MANAGEMENT)

    def _handle_import_quiz(self) -> None:
        if not self.creation_panel.check_unsaved_changes():
            return
        if self.creation_panel.draft.has_unpublished_changes() and not confirm_discard_draft(self):
            return

        file_path, _ = QFileDialog.getOpenFileName(
            self,
            IMPORT_DIALOG_TITLE,
            str(Path.home()),
            IMPORT_FILE_FILTER,
        )
        if not file_path:
            return

        try:
            imported = load_quiz_from_file(Path(file_path))
            draft = imported.to_draft()
        except (OSError, QuizImportError) as exc:
            show_error(self, "Import failed", str(exc))
            return
        except ValidationError as exc:
            show_error(self, "Quiz rejected", str(exc))
            return

        self.creation_panel.load_draft(draft)
        self._set_mode(TeacherMode.QUIZ_CREATION)
        count = draft.get_question_count()
        self.creation_panel.set_status_message(
            f"Imported {count} questions. Viewing question 1 of {count}."
        )
        show_info(
            self,
            "Quiz imported",
            f"Successfully imported {count} questions. Review them and press Publish.",
        )

    def _handle_save_quiz_to_file(self) -> None:
        if not self.creation_panel.check_unsaved_changes():
            return
        draft = self.creation_panel.draft
        if not draft.has_questions():
            show_warning(self, "No quiz", EMPTY_DRAFT_MESSAGE)
            return

        default_path = self._last_export_path or (Path.cwd() / "quiz_export.txt")
        file_path, _ = QFileDialog.getSaveFileName(
            self,
            EXPORT_DIALOG_TITLE,
            str(default_path),
            EXPORT_FILE_FILTER,
        )
        if not file_path:
            return

        try:
            save_quiz_to_file(Path(file_path), draft)
        except (OSError, ValidationError) as exc:
            show_error(self, "Export failed", str(exc))
            return

        self._last_export_path = Path(file_path)
        show_info(self, "Quiz saved", f"Quiz exported to {file_path}.")

    def _handle_about(self) -> None:
        details = (
            f"{APP_NAME} v{APP_VERSION}\n"
            f"License: {APP_LICENSE}\n\n"
            f"{APP_ABOUT_TEXT}"
        )
        show_info(self, f"About {APP_NAME}", details)

    def _handle_help(self) -> None:
        show_info(self, f"{APP_NAME} Help", HELP_TEXT)
