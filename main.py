# main.py
from __future__ import annotations
import argparse
import logging
import sys

from PySide6.QtWidgets import QApplication, QMessageBox

from app.config import Settings
from app.errors import ConfigError, InvalidDifficulty
from app.validation import validate_difficulty
from services.word_source import make_word_source
from ui.main_window import MainWindow


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=handlers,
        force=True,
    )

    # Log any uncaught exceptions rather than silently dying
    def excepthook(exctype, value, tb):
        logging.critical("Unhandled exception", exc_info=(exctype, value, tb))
        try:
            QMessageBox.critical(
                None, "Application Error", f"{exctype.__name__}: {value}"
            )
        except Exception:
            pass
        # exit with non-zero so run scripts don’t think it succeeded
        sys.exit(1)

    sys.excepthook = excepthook


def parse_args(argv=None):
    p = argparse.ArgumentParser(prog="gemtype", description="Typing practice with generated text.")
    p.add_argument("--difficulty", help="initial difficulty, 0 (easy) to 3 (death)")
    p.add_argument("--offline", action="store_true", help="use built-in texts instead of Gemini")
    p.add_argument("--log-level", help="logging level (default from GEMTYPE_LOG_LEVEL or INFO)")
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        settings = Settings.from_env()
        if args.difficulty is not None:
            settings.difficulty = validate_difficulty(args.difficulty)
    except (ConfigError, InvalidDifficulty) as e:
        print(f"gemtype: {e}", file=sys.stderr)
        return 2
    if args.log_level:
        settings.log_level = args.log_level.upper()

    setup_logging(settings.log_level, settings.log_file)
    logging.getLogger(__name__).info("Starting with %r", settings)

    app = QApplication.instance() or QApplication(sys.argv[:1])
    app.setApplicationName("Gemtype")
    app.setOrganizationName("Gemtype")

    source = make_word_source(settings, offline=args.offline)
    win = MainWindow(source, settings)
    win.show()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
