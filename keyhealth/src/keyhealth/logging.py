"""Structured logging setup for keyhealth."""
from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Dict, List

import structlog

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from .config import AppConfig

_DEFAULT_LEVEL = "info"


def configure_logging(level: str | None = None, *, json_output: bool = True) -> None:
    """Configure structlog for the application.

    Records go to stderr so that callers printing warnings on stdout are not
    interleaved with log lines. With ``json_output`` each record is a JSON line
    with the keys ``level``, ``ts``, ``msg`` and ``component`` plus whatever
    context the caller bound (subkey id, rotation state, ...). Otherwise the
    human readable console renderer is used.
    """

    numeric_level = _level_from_str((level or _DEFAULT_LEVEL).lower())

    logging.basicConfig(
        level=numeric_level,
        handlers=[logging.StreamHandler(sys.stderr)],
        format="%(message)s",
        force=True,
    )

    processors: List[structlog.types.Processor] = [
        structlog.processors.TimeStamper(fmt="iso", key="ts"),
        structlog.stdlib.add_log_level,
        _component_processor,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.extend([_rename_event_to_msg, structlog.processors.JSONRenderer()])
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=True,
    )


def configure_from(config: AppConfig) -> None:
    """Apply the ``logging`` section of a loaded :class:`~keyhealth.config.AppConfig`."""
    configure_logging(config.logging.normalized_level(), json_output=config.logging.json_output)


def _component_processor(
    logger: structlog.BoundLoggerBase, _name: str, event_dict: dict[str, object]
) -> dict[str, object]:
    """Tag every record with the emitting module."""

    if event_dict.get("component") is None:
        event_dict["component"] = getattr(logger, "name", None) or "keyhealth"
    return event_dict


def _rename_event_to_msg(
    _logger: structlog.BoundLoggerBase, _name: str, event_dict: dict[str, object]
) -> dict[str, object]:
    if "msg" not in event_dict:
        event_dict["msg"] = event_dict.pop("event", "")
    return event_dict


def _level_from_str(level: str) -> int:
    mapping: Dict[str, int] = {
        "critical": logging.CRITICAL,
        "error": logging.ERROR,
        "warning": logging.WARNING,
        "info": logging.INFO,
        "debug": logging.DEBUG,
    }
    return mapping.get(level, logging.INFO)


__all__ = ["configure_logging", "configure_from"]
