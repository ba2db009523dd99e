"""Static metadata describing QuickTestly."""

APP_NAME = "QuickTestly"
APP_VERSION = "0.2"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "QuickTestly is a timed multiple-choice quiz platform. Teachers author and publish "
    "quizzes from this console; students take them from the browser and compare their "
    "scores on the leaderboards."
)

HELP_TEXT = (
    "Create a quiz in the editor: fill in the quiz details, add questions one by one and "
    "press Publish. Alternatively, author a .txt file and import it:\n\n"
    "NAME: Trigonometry basics\n"
    "DESCRIPTION: Radians and degrees\n"
    "TIMELIMIT: 10\n"
    "PUBLIC: yes\n"
    "---\n"
    "Q: What is $30^o$ in radians?\n"
    "A: \\frac{\\pi}{2}\nB: \\frac{\\pi}{6}\nC: \\frac{\\pi}{3}\n"
    "CORRECT: B\n\n"
    "Q: What is $45^o$ in radians?\n"
    "A: \\frac{\\pi}{3}\nB: \\frac{\\pi}{6}\nC: \\frac{\\pi}{4}\nD: \\frac{3\\pi}{4}\n"
    "CORRECT: C"
)
