"""Allow running CruxTimer as a module: python -m cruxtimer."""

import argparse
import logging
import sys

from PyQt6.QtWidgets import QApplication

from .logging_setup import configure_logging
from .settings import APP_SUPPORT_DIR


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="cruxtimer", description="Climbing competition countdown")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="root logger level (default: INFO)",
    )
    parser.add_argument(
        "--fullscreen", action="store_true", help="open the window fullscreen",
    )
    return parser.parse_args(argv)


def main() -> None:
    args = _parse_args(sys.argv[1:])
    logfile = configure_logging(APP_SUPPORT_DIR, getattr(logging, args.log_level))
    logging.getLogger(__name__).info("CruxTimer ready, logging to %s", logfile)

    # flags are ours alone; Qt only gets the program name
    app = QApplication(sys.argv[:1])
    app.setApplicationName("CruxTimer")
    app.setOrganizationName("CruxTimer")

    from .app import CruxTimerApp

    window = CruxTimerApp()
    if args.fullscreen:
        window.toggle_fullscreen()
    else:
        window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
