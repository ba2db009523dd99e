"""Application entry point for QuickTestly."""

from __future__ import annotations

import socket
import sys

from PySide6.QtWidgets import QApplication

from quicktestly.constants.about import APP_NAME, APP_VERSION
from quicktestly.core.quiz_manager import QuizManager
from quicktestly.server.api_server import start_api_server
from quicktestly.ui.teacher_main_window import TeacherMainWindow
from quicktestly.utils.logging_config import configure_logging
from quicktestly.utils.settings import AppSettings, build_stores


def _determine_student_url(port: int) -> str:
    """Best-effort determination of the local IP for student-facing URL."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            ip_address = sock.getsockname()[0]
    except OSError:
        ip_address = "127.0.0.1"
    return f"http://{ip_address}:{port}/"


def main() -> None:
    """Load settings, start the API server, and launch the Qt console."""
    settings = AppSettings()
    logger = configure_logging(settings.log_level)
    logger.info("Starting %s %s", APP_NAME, APP_VERSION)

    quiz_store, result_store = build_stores(settings)
    quiz_manager = QuizManager(
        quiz_store,
        result_store,
        tick_interval_seconds=settings.tick_interval_seconds,
    )
    start_api_server(
        quiz_manager=quiz_manager,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
    )
    student_url = _determine_student_url(settings.port)
    logger.info("Student page available at %s", student_url)

    app = QApplication(sys.argv)
    app.aboutToQuit.connect(quiz_manager.shutdown)
    window = TeacherMainWindow(
        quiz_manager=quiz_manager,
        teacher=settings.teacher_identity(),
        student_url=student_url,
    )
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
