"""structlog setup for the pagetree CLI.

All output goes to stderr so stdout stays reserved for results (``--json``
pipes stay clean). Console rendering by default, JSON lines with
``--log-json``. Lines emitted on a persistence worker carry ``worker=`` so
out-of-order saves can be told apart from the editor thread.
"""

from __future__ import annotations

import logging
import sys
import threading
from typing import Any

import structlog

SAVE_THREAD_PREFIX = "pagetree-save"

# Kept at WARNING even with --verbose
_QUIET_LOGGERS = ("sqlalchemy", "pluggy", "concurrent.futures")


def _tag_save_worker(_logger: Any, _method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    name = threading.current_thread().name
    if name.startswith(SAVE_THREAD_PREFIX):
        event_dict.setdefault("worker", name)
    return event_dict


def _pre_chain(log_json: bool) -> list[structlog.types.Processor]:
    chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _tag_save_worker,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if log_json:
        chain.append(structlog.processors.dict_tracebacks)
    return chain


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route structlog and stdlib logging through one stderr handler.

    Safe to call repeatedly; the root handler is replaced, not stacked.
    """
    pre_chain = _pre_chain(log_json)
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if log_json
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger("pagetree").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
