"""Component for authoring a quiz and publishing it to the quiz store."""

from __future__ import annotations

from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QFormLayout,
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPlainTextEdit,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from quicktestly.constants.quiz_constants import (
    DEFAULT_TIME_LIMIT_MINUTES,
    MAX_TIME_LIMIT_MINUTES,
    OPTION_LETTERS,
)
from quicktestly.constants.ui_constants import (
    CREATE_DELETE_BUTTON,
    CREATE_INSERT_BUTTON,
    CREATE_NEXT_BUTTON,
    CREATE_PREV_BUTTON,
    CREATE_PUBLISH_BUTTON,
    CREATE_SAVE_BUTTON,
    EMPTY_DRAFT_MESSAGE,
    PLACEHOLDER_DESCRIPTION,
    PLACEHOLDER_QUESTION,
    QUIZ_PUBLISHED_MESSAGE,
)
from quicktestly.core.errors import QuizError, ValidationError
from quicktestly.core.models import QuizQuestion, UserIdentity
from quicktestly.core.quiz_manager import QuizManager
from quicktestly.core.services.quiz_draft import QuizDraft
from quicktestly.ui.dialog_helpers import (
    check_unsaved_changes,
    confirm_delete_question,
    show_error,
    show_info,
    show_warning,
)
from quicktestly.styling.styles import Styles
from quicktestly.ui.question_renderer import render_question_with_options


class CreationPanel(QWidget):
    """UI component for creating, editing and publishing a quiz draft."""

    def __init__(
        self,
        quiz_manager: QuizManager,
        teacher: UserIdentity,
        on_published=None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.quiz_manager = quiz_manager
        self.teacher = teacher
        self.draft = QuizDraft()
        self._on_published = on_published
        self._current_question_index: int = -1
        self._has_unsaved_changes: bool = False

        self._build_ui()
        self._sync_details_from_draft()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        details_box = QGroupBox("Quiz details", self)
        details_form = QFormLayout()
        details_box.setLayout(details_form)

        self.name_input = QLineEdit(self)
        self.name_input.setPlaceholderText("Quiz name")
        self.name_input.textChanged.connect(self._on_details_changed)
        details_form.addRow("Name:", self.name_input)

        self.description_input = QPlainTextEdit(self)
        self.description_input.setPlaceholderText(PLACEHOLDER_DESCRIPTION)
        self.description_input.setMaximumHeight(60)
        self.description_input.textChanged.connect(self._on_details_changed)
        details_form.addRow("Description:", self.description_input)

        self.time_limit_spinbox = QSpinBox(self)
        self.time_limit_spinbox.setRange(1, MAX_TIME_LIMIT_MINUTES)
        self.time_limit_spinbox.setSuffix(" min")
        self.time_limit_spinbox.setValue(DEFAULT_TIME_LIMIT_MINUTES)
        self.time_limit_spinbox.valueChanged.connect(lambda _: self._on_details_changed())
        details_form.addRow("Time limit:", self.time_limit_spinbox)

        self.public_checkbox = QCheckBox("Visible to students", self)
        self.public_checkbox.setChecked(True)
        self.public_checkbox.toggled.connect(lambda _: self._on_details_changed())
        details_form.addRow("", self.public_checkbox)

        layout.addWidget(details_box)

        # Action buttons
        action_row = QHBoxLayout()
        self.insert_button = QPushButton(CREATE_INSERT_BUTTON, self)
        self.insert_button.clicked.connect(self._handle_insert_new_question)
        action_row.addWidget(self.insert_button)

        self.save_button = QPushButton(CREATE_SAVE_BUTTON, self)
        self.save_button.clicked.connect(self._handle_save_question)
        action_row.addWidget(self.save_button)

        self.delete_button = QPushButton(CREATE_DELETE_BUTTON, self)
        self.delete_button.clicked.connect(self._handle_delete_question)
        action_row.addWidget(self.delete_button)

        self.prev_button = QPushButton(CREATE_PREV_BUTTON, self)
        self.prev_button.clicked.connect(lambda: self._navigate_questions(-1))
        action_row.addWidget(self.prev_button)

        self.next_button = QPushButton(CREATE_NEXT_BUTTON, self)
        self.next_button.clicked.connect(lambda: self._navigate_questions(1))
        action_row.addWidget(self.next_button)

        self.publish_button = QPushButton(CREATE_PUBLISH_BUTTON, self)
        self.publish_button.setObjectName("primaryButton")
        self.publish_button.clicked.connect(self._handle_publish)
        action_row.addWidget(self.publish_button)

        layout.addLayout(action_row)

        # Question input
        self.question_input = QPlainTextEdit(self)
        self.question_input.setPlaceholderText(PLACEHOLDER_QUESTION)
        self.question_input.textChanged.connect(self._on_input_changed)
        layout.addWidget(self.question_input)

        # Options input, blank trailing options are ignored
        options_grid = QGridLayout()
        self.option_inputs: list[QLineEdit] = []
        for index, label in enumerate(OPTION_LETTERS):
            option_input = QLineEdit(self)
            option_input.setPlaceholderText(f"Option {label}")
            option_input.textChanged.connect(self._on_input_changed)
            options_grid.addWidget(option_input, index // 2, index % 2)
            self.option_inputs.append(option_input)
        layout.addLayout(options_grid)

        selector_row = QHBoxLayout()
        selector_row.addWidget(QLabel("Correct option:", self))
        self.correct_option_combo = QComboBox(self)
        self.correct_option_combo.addItem("Select…", userData=None)
        for index, label in enumerate(OPTION_LETTERS):
            self.correct_option_combo.addItem(label, userData=index)
        self.correct_option_combo.currentIndexChanged.connect(self._on_input_changed)
        selector_row.addWidget(self.correct_option_combo)
        selector_row.addStretch(1)
        layout.addLayout(selector_row)

        self.preview_view = QWebEngineView(self)
        layout.addWidget(self.preview_view)

        self.status_label = QLabel("No questions yet.", self)
        self.status_label.setStyleSheet(Styles.get_status_style())
        layout.addWidget(self.status_label)

    # --- Draft details ---

    def _on_details_changed(self) -> None:
        self.draft.name = self.name_input.text()
        self.draft.description = self.description_input.toPlainText()
        self.draft.time_limit_minutes = int(self.time_limit_spinbox.value())
        self.draft.is_public = self.public_checkbox.isChecked()

    def _sync_details_from_draft(self) -> None:
        widgets = (self.name_input, self.description_input, self.time_limit_spinbox, self.public_checkbox)
        for widget in widgets:
            widget.blockSignals(True)
        self.name_input.setText(self.draft.name)
        self.description_input.setPlainText(self.draft.description)
        self.time_limit_spinbox.setValue(self.draft.time_limit_minutes)
        self.public_checkbox.setChecked(self.draft.is_public)
        for widget in widgets:
            widget.blockSignals(False)

    # --- Questions ---

    def _on_input_changed(self) -> None:
        self._has_unsaved_changes = True
        self._refresh_preview()

    def _handle_insert_new_question(self) -> None:
        if not self.check_unsaved_changes():
            return
        self._current_question_index = self.draft.get_question_count()
        self.clear_fields()
        self.set_status_message("Ready to insert a new question.")

    def _handle_save_question(self) -> None:
        try:
            question = self._build_question_from_inputs()
            if self._current_question_index == -1 or self._current_question_index >= self.draft.get_question_count():
                self.draft.add_question(question)
                self._current_question_index = self.draft.get_question_count() - 1
            else:
                self.draft.update_question(self._current_question_index, question)
        except ValidationError as exc:
            show_warning(self, "Invalid question", str(exc))
            return

        self._has_unsaved_changes = False
        self.set_status_message(
            f"Saved question {self._current_question_index + 1} of {self.draft.get_question_count()}."
        )

    def _handle_delete_question(self) -> None:
        if self._current_question_index == -1:
            show_info(self, "No selection", "There is no saved question to delete yet.")
            return

        if self._current_question_index >= self.draft.get_question_count():
            self.clear_fields()
            self.set_status_message("Discarded unsaved question.")
            self._current_question_index = -1
            return

        if not confirm_delete_question(self, self._current_question_index + 1):
            return

        self.draft.delete_question(self._current_question_index)

        if not self.draft.has_questions():
            self._current_question_index = -1
            self.clear_fields()
            self.set_status_message("All questions removed.")
            return

        self._current_question_index = min(self._current_question_index, self.draft.get_question_count() - 1)
        self.populate_fields(self.draft.get_question_at_index(self._current_question_index))
        self.set_status_message(
            f"Deleted question. Now viewing {self._current_question_index + 1} of {self.draft.get_question_count()}."
        )

    def _navigate_questions(self, step: int) -> None:
        if not self.check_unsaved_changes():
            return
        if not self.draft.has_questions():
            return
        target = self._current_question_index + step if self._current_question_index != -1 else 0
        target = max(0, min(self.draft.get_question_count() - 1, target))
        self._current_question_index = target
        self.populate_fields(self.draft.get_question_at_index(target))
        self.set_status_message(
            f"Viewing question {target + 1} of {self.draft.get_question_count()}."
        )

    def _handle_publish(self) -> None:
        if not self.check_unsaved_changes():
            return
        if not self.draft.has_questions():
            show_warning(self, "Nothing to publish", EMPTY_DRAFT_MESSAGE)
            return
        try:
            quiz = self.draft.build_quiz(self.teacher)
            quiz_id = self.quiz_manager.create_quiz(quiz, self.teacher)
        except ValidationError as exc:
            self.set_status_message(f"Not published: {exc}", is_error=True)
            show_warning(self, "Quiz rejected", str(exc))
            return
        except QuizError as exc:
            self.set_status_message(f"Not published: {exc}", is_error=True)
            show_error(self, "Publish failed", str(exc))
            return

        self.draft.mark_published()
        self.set_status_message(f"Published '{quiz.name}' ({quiz.question_count} questions).")
        show_info(self, "Quiz published", QUIZ_PUBLISHED_MESSAGE)
        if self._on_published is not None:
            self._on_published(quiz_id)

    def check_unsaved_changes(self) -> bool:
        """Prompt about an unsaved question. Returns True if it is ok to proceed."""
        if not self._has_unsaved_changes:
            return True

        result = check_unsaved_changes(self)

        if result is True:
            self._handle_save_question()
            return not self._has_unsaved_changes
        elif result is False:
            self._has_unsaved_changes = False
            return True
        else:
            return False

    def clear_fields(self) -> None:
        self.question_input.clear()
        for input_field in self.option_inputs:
            input_field.clear()
        self.correct_option_combo.setCurrentIndex(0)
        self._has_unsaved_changes = False
        self._refresh_preview()

    def populate_fields(self, question: QuizQuestion) -> None:
        self.question_input.setPlainText(question.question_text)
        for index, field in enumerate(self.option_inputs):
            field.setText(question.options[index] if index < len(question.options) else "")
        self.correct_option_combo.setCurrentIndex(question.correct_option_index + 1)
        self._has_unsaved_changes = False
        self._refresh_preview()

    def _build_question_from_inputs(self) -> QuizQuestion:
        question_text = self.question_input.toPlainText().strip()
        options = [field.text().strip() for field in self.option_inputs]
        while options and not options[-1]:
            options.pop()
        correct_data = self.correct_option_combo.currentData()
        if correct_data is None:
            raise ValidationError("Select the correct option before saving.")
        return QuizQuestion(
            id="",
            question_text=question_text,
            options=options,
            correct_option_index=int(correct_data),
        )

    def _refresh_preview(self) -> None:
        question_text = self.question_input.toPlainText()
        options = [field.text() for field in self.option_inputs]
        html = render_question_with_options(question_text, options, self.correct_option_combo.currentData())
        self.preview_view.setHtml(html)

    # --- Called by the main window ---

    def load_draft(self, draft: QuizDraft) -> None:
        """Replace the draft, e.g. after importing a quiz file."""
        self.draft = draft
        self._sync_details_from_draft()
        if draft.has_questions():
            self._current_question_index = 0
            self.populate_fields(draft.get_question_at_index(0))
        else:
            self._current_question_index = -1
            self.clear_fields()

    def reset_state(self) -> None:
        self.load_draft(QuizDraft())
        self.set_status_message("Ready to create a new quiz.")

    def set_status_message(self, message: str, is_error: bool = False) -> None:
        self.status_label.setStyleSheet(Styles.get_status_style(is_error))
        self.status_label.setText(message)
