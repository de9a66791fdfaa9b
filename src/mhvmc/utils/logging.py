from __future__ import annotations

import json
import logging


def configure_logging(level: int = logging.INFO) -> None:
    """Configure root logging once for CLI scripts and experiments."""

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def log_event(
    logger: logging.Logger,
    event: str,
    level: int = logging.INFO,
    **payload: object,
) -> None:
    """Emit one-line structured JSON logs for sampling traces."""

    if not logger.isEnabledFor(level):
        return
    body = {"event": event, **payload}
    logger.log(level, json.dumps(body, sort_keys=True, default=str))
