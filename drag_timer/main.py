"""Main entry point for Drag Timer.

This module provides the main entry point for the Drag Timer application
using the MVP (Model-View-Presenter) architecture pattern.
"""

import sys
from argparse import ArgumentParser, RawDescriptionHelpFormatter
from pathlib import Path

from PyQt6.QtWidgets import QApplication, QSystemTrayIcon

from .models.configuration_model import ConfigurationModel, get_config_dir
from .models.timer_store import JsonTimerStore
from .presenters.timer_presenter import TimerPresenter
from .utils.logging_config import setup_logging
from .utils.structured_logging import get_structured_logger


def create_argument_parser() -> ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        ArgumentParser: Configured argument parser
    """
    parser = ArgumentParser(
        description="Drag Timer - start countdown timers by dragging",
        formatter_class=RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                         # Run with default settings
  %(prog)s -v                      # Run with verbose logging
  %(prog)s --config-dir /tmp/dt    # Keep settings and timers elsewhere
""",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (use -v for info, -vv for debug, -vvv for trace)",
    )

    parser.add_argument("--log-file", type=str, help="Log to file (in addition to console)")

    parser.add_argument("--no-structured-logging", action="store_true", help="Disable structured logging features")

    parser.add_argument("--no-redaction", action="store_true", help="Disable sensitive data redaction in logs")

    parser.add_argument(
        "--config-dir",
        type=Path,
        default=None,
        help="Directory for config.json and timers.json (default: OS config directory)",
    )

    return parser


def main() -> None:
    """Main entry point for the Drag Timer application."""
    parser = create_argument_parser()
    args = parser.parse_args()

    setup_logging(
        verbosity=args.verbose,
        log_file=args.log_file,
        log_to_console=True,
        enable_structured_logging=not args.no_structured_logging,
        redact_sensitive_data=not args.no_redaction,
    )

    logger = get_structured_logger(__name__)

    config_dir = args.config_dir or get_config_dir()
    logger.info(
        "Drag Timer starting",
        verbosity_level=args.verbose,
        config_dir=str(config_dir),
        log_file=args.log_file or "console_only",
    )

    try:
        app = QApplication(sys.argv)
        app.setApplicationName("Drag Timer")
        # Closing the preferences dialog must not end a tray-only app
        app.setQuitOnLastWindowClosed(False)

        if not QSystemTrayIcon.isSystemTrayAvailable():
            logger.warning("System tray not available, only the drag handle will be shown")

        with logger.context(component="presenter_initialization"):
            presenter = TimerPresenter(
                config_model=ConfigurationModel(str(config_dir / ConfigurationModel.DEFAULT_CONFIG_FILE)),
                timer_store=JsonTimerStore(str(config_dir / JsonTimerStore.DEFAULT_FILE)),
            )
            presenter.show_view()
            logger.info("Tray icon and drag handle displayed")

        exit_code = app.exec()

        logger.info("Application shutting down", exit_code=exit_code)
        sys.exit(exit_code)

    except Exception as e:
        logger.exception("Application startup failed", error_type=type(e).__name__, error_message=str(e))
        raise


if __name__ == "__main__":
    main()
