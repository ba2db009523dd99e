"""Question rendering utilities for the authoring preview."""

from __future__ import annotations

from quicktestly.core.markdown_math_renderer import renderer


def render_question_with_options(
    question_text: str,
    options: list[str],
    correct_option_index: int | None = None,
) -> str:
    """Render a draft question with its lettered options as HTML for QWebEngineView.

    Blank options are skipped, matching what is stored when the question is saved.
    """
    filled = [option for option in options if option.strip()]
    if correct_option_index is not None and correct_option_index >= len(filled):
        correct_option_index = None
    return renderer.render_question_preview(
        question_text or "(No question text)",
        filled,
        correct_option_index,
    )
