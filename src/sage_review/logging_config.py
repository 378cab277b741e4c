# src/sage_review/logging_config.py
import logging
import os


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ReviewFormatter(logging.Formatter):
    """Plain formatter that drops stack traces unless running with DEBUG."""

    def __init__(self, show_traceback: bool = False):
        super().__init__(LOG_FORMAT)
        self.show_traceback = show_traceback

    def formatException(self, ei) -> str:
        if not self.show_traceback:
            return ""
        return super().formatException(ei)


class GitHubActionsFormatter(ReviewFormatter):
    """Renders warnings and errors as workflow annotations."""

    ANNOTATIONS = {logging.WARNING: "warning", logging.ERROR: "error", logging.CRITICAL: "error"}

    def format(self, record: logging.LogRecord) -> str:
        annotation = self.ANNOTATIONS.get(record.levelno)
        if annotation is None:
            return super().format(record)
        message = record.getMessage()
        if self.show_traceback and record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        # annotations are single-line; the runner decodes %0A
        message = message.replace("\n", "%0A")
        return f"::{annotation}::{message}"


def setup_logging(level: str = "INFO", debug: bool = False) -> None:
    logging.basicConfig(level=logging.DEBUG if debug else level.upper(), format=LOG_FORMAT, force=True)

    if os.environ.get("GITHUB_ACTIONS") == "true":
        formatter = GitHubActionsFormatter(show_traceback=debug)
    else:
        formatter = ReviewFormatter(show_traceback=debug)
    for handler in logging.getLogger().handlers:
        handler.setFormatter(formatter)

    for noisy in ("httpx", "httpcore", "anthropic", "openai"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
