"""Qt UI components for the teacher console."""

from .dialog_helpers import (
    check_unsaved_changes,
    confirm_delete_question,
    confirm_delete_quiz,
    confirm_discard_draft,
    show_error,
    show_info,
    show_warning,
)
from .question_renderer import render_question_with_options
from .teacher_main_window import TeacherMainWindow

__all__ = [
    "TeacherMainWindow",
    "check_unsaved_changes",
    "confirm_delete_question",
    "confirm_delete_quiz",
    "confirm_discard_draft",
    "show_error",
    "show_info",
    "show_warning",
    "render_question_with_options",
]
