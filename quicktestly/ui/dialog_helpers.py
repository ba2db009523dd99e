"""Helper functions for common dialog patterns in the teacher UI."""

from __future__ import annotations

from PySide6.QtWidgets import QMessageBox, QWidget


def confirm_delete_question(parent: QWidget, question_number: int) -> bool:
    """Show confirmation dialog for deleting a draft question.

    Args:
        parent: Parent widget for the dialog
        question_number: The question number to display (1-indexed)

    Returns:
        True if user confirmed, False otherwise
    """
    reply = QMessageBox.question(
        parent,
        "Confirm Delete",
        f"Are you sure you want to delete question {question_number}?",
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No
    )
    return reply == QMessageBox.Yes


def confirm_delete_quiz(parent: QWidget, quiz_name: str) -> bool:
    """Ask before removing a published quiz; its results stay in the result store."""
    reply = QMessageBox.question(
        parent,
        "Confirm Delete",
        f"Delete the quiz '{quiz_name}'? Students will no longer be able to take it.",
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No
    )
    return reply == QMessageBox.Yes


def confirm_discard_draft(parent: QWidget) -> bool:
    """Show confirmation dialog before replacing an unpublished draft."""
    reply = QMessageBox.question(
        parent,
        "Discard Draft",
        "The current draft has unpublished changes that will be lost. Continue?",
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No
    )
    return reply == QMessageBox.Yes


def check_unsaved_changes(parent: QWidget) -> bool | None:
    """Show dialog asking user about unsaved changes.

    Returns:
        True if user wants to save, False if discard, None if cancelled
    """
    reply = QMessageBox.question(
        parent,
        "Unsaved Changes",
        "Question is not saved. Do you want to save the question?",
        QMessageBox.Yes | QMessageBox.No | QMessageBox.Cancel,
        QMessageBox.Yes
    )

    if reply == QMessageBox.Yes:
        return True
    elif reply == QMessageBox.No:
        return False
    else:  # Cancel
        return None


def show_error(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.critical(parent, title, message)


def show_info(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.information(parent, title, message)


def show_warning(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.warning(parent, title, message)
