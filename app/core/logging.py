"""Console logging with structured extras rendered as JSON."""

import json
import logging
import sys

# Attributes every LogRecord carries; anything else came in through `extra=`.
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}


class JSONExtrasFormatter(logging.Formatter):
    """Render `timestamp | LEVEL | logger | message {extras}`.

    Example:
        2026-10-19 09:12:03 | INFO     | app.services.admin_workflow | Draft staged {"brief_id": "c..."}
    """

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()
        line = (
            f"{self.formatTime(record, self.datefmt)} | {record.levelname:<8} | "
            f"{record.name} | {record.message}"
        )

        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        }
        if extras:
            try:
                line = f"{line} {json.dumps(extras, default=str, ensure_ascii=False)}"
            except (TypeError, ValueError):
                pass

        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            line = f"{line}\n{record.exc_text}"
        return line


def setup_logging(level: int | str = logging.INFO) -> None:
    """Attach a stdout handler to the `app` logger once."""
    logger = logging.getLogger("app")
    logger.setLevel(level)

    if logger.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(JSONExtrasFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    logger.propagate = False
