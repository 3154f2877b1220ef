from __future__ import annotations

import logging
import sys

from shared.utils.env import env_value

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_NOISY_LOGGERS = (
    "httpx",
    "google_adk.google.adk.models.google_llm",
    "google_genai.types",
    "LiteLLM",
)


def setup_logging(level: str | None = None) -> None:
    """Configure root logging once for CLI and server entry points."""
    resolved = (level or env_value("INFRAPLANE_LOG_LEVEL", "INFO") or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, resolved, logging.INFO),
        format=_LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )
    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.ERROR)
