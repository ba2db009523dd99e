"""Qt UI constants used across widgets."""

WINDOW_TITLE: str = "QuickTestly Teacher Console"
PLACEHOLDER_QUESTION: str = "Enter your question text (supports Markdown + LaTeX)."
PLACEHOLDER_DESCRIPTION: str = "Describe what this quiz covers."
STUDENT_URL_PLACEHOLDER: str = "http://<teacher-ip>:8000/"
RESULTS_REFRESH_INTERVAL_MS: int = 5000

MODE_BUTTON_CREATE: str = "Create Quiz"
MODE_BUTTON_MANAGE: str = "Manage Quizzes"
MODE_BUTTON_RESULTS: str = "Results"
MODE_BUTTON_IMPORT: str = "Import Quiz"
MODE_BUTTON_SAVE_FILE: str = "Save Quiz to File"

CREATE_INSERT_BUTTON: str = "Add New Question"
CREATE_SAVE_BUTTON: str = "Save Question"
CREATE_DELETE_BUTTON: str = "Delete Question"
CREATE_PREV_BUTTON: str = "Previous Question"
CREATE_NEXT_BUTTON: str = "Next Question"
CREATE_PUBLISH_BUTTON: str = "Publish Quiz"

MANAGE_REFRESH_BUTTON: str = "Refresh"
MANAGE_TOGGLE_VISIBILITY_BUTTON: str = "Toggle Public/Private"
MANAGE_DELETE_BUTTON: str = "Delete Quiz"
MANAGE_RESULTS_BUTTON: str = "View Results"
MANAGE_EMPTY_STATE: str = "You have not published any quizzes yet."

RESULTS_EMPTY_STATE: str = "No attempts recorded for this quiz yet."
RESULTS_LEADERBOARD_TITLE: str = "Top performers"

IMPORT_DIALOG_TITLE: str = "Select quiz file"
IMPORT_FILE_FILTER: str = "Quiz files (*.txt);;All files (*.*)"
EXPORT_DIALOG_TITLE: str = "Save quiz to file"
EXPORT_FILE_FILTER: str = "Quiz files (*.txt);;All files (*.*)"

EMPTY_DRAFT_MESSAGE: str = "Add at least one question before publishing."
QUIZ_PUBLISHED_MESSAGE: str = "Quiz published. Students can take it now."
