from __future__ import annotations

import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

# Finer than DEBUG; used for per-query chain hand-offs.
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_LEVELS = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "crit": logging.CRITICAL,
    "critical": logging.CRITICAL,
}

_TAGS = {
    TRACE: "[trace]",
    logging.DEBUG: "[debug]",
    logging.INFO: "[info]",
    logging.WARNING: "[warn]",
    logging.ERROR: "[error]",
    logging.CRITICAL: "[crit]",
}


def _level_tag(levelno: int) -> str:
    return _TAGS.get(levelno, f"[lvl{levelno}]")


def parse_level(value: object, default: int = logging.INFO) -> int:
    """Brief: Map a config level string ("debug", "warn", ...) to a logging level.

    Inputs:
      - value: Level name (case-insensitive) or None.
      - default: Level used when value is missing or unknown.

    Outputs:
      - int: logging level constant.
    """
    if value is None:
        return default
    return _LEVELS.get(str(value).strip().lower(), default)


class SyslogFormatter(logging.Formatter):
    """Formatter for syslog output without timestamps (syslog adds its own)."""

    def format(self, record):
        record.level_tag = _level_tag(record.levelno)
        return f"{record.level_tag} {record.name}: {record.getMessage()}"


class BracketLevelFormatter(logging.Formatter):
    """Formatter that adds bracketed lowercase level tags and UTC timestamps."""

    def formatTime(self, record, datefmt=None):
        return datetime.fromtimestamp(record.created, timezone.utc).strftime(
            "%Y-%m-%dT%H:%M:%SZ"
        )

    def format(self, record):
        record.level_tag = _level_tag(record.levelno)
        return super().format(record)


class PrefixLoggerAdapter(logging.LoggerAdapter):
    """Brief: LoggerAdapter that prepends a bracketed prefix to every message.

    Adapters may wrap other adapters; prefixes then nest outer-first, e.g.
    "[request] [custom_dns_resolver] go to next resolver".
    """

    def process(self, msg, kwargs):
        return f"[{self.extra['prefix']}] {msg}", kwargs


def with_prefix(
    logger: Union[logging.Logger, logging.LoggerAdapter], prefix: str
) -> PrefixLoggerAdapter:
    """Brief: Derive a prefixed logger from a logger or adapter.

    Inputs:
      - logger: Base logging context (typically Request.log).
      - prefix: Component label, e.g. "custom_dns_resolver".

    Outputs:
      - PrefixLoggerAdapter emitting through the given logger.
    """
    return PrefixLoggerAdapter(logger, {"prefix": prefix})


def trace(
    logger: Union[logging.Logger, logging.LoggerAdapter], msg: str, *args: Any
) -> None:
    """Brief: Log msg at TRACE level."""
    logger.log(TRACE, msg, *args)


def _syslog_handler(syslog_cfg: object) -> logging.Handler:
    if isinstance(syslog_cfg, dict):
        address = syslog_cfg.get("address", "/dev/log")
        if isinstance(address, list):
            address = tuple(address)
        facility = getattr(
            logging.handlers.SysLogHandler,
            f"LOG_{str(syslog_cfg.get('facility', 'USER')).upper()}",
            logging.handlers.SysLogHandler.LOG_USER,
        )
    else:
        address = "/dev/log"
        facility = logging.handlers.SysLogHandler.LOG_USER

    handler = logging.handlers.SysLogHandler(address=address, facility=facility)
    handler.setFormatter(SyslogFormatter())
    return handler


def _reset_root_handlers(root: logging.Logger) -> None:
    # Closing releases file descriptors held by earlier FileHandlers.
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


def _build_handlers(cfg: Dict[str, Any]) -> List[logging.Handler]:
    formatter = BracketLevelFormatter(
        fmt="%(asctime)s %(level_tag)s %(name)s: %(message)s"
    )
    handlers: List[logging.Handler] = []

    if cfg.get("stderr", True):
        handlers.append(logging.StreamHandler(sys.stderr))

    file_path = cfg.get("file")
    if isinstance(file_path, str) and file_path.strip():
        path = os.path.abspath(os.path.expanduser(file_path.strip()))
        os.makedirs(os.path.dirname(path), exist_ok=True)
        handlers.append(logging.FileHandler(path, mode="a", encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def init_logging(cfg: Optional[Dict[str, Any]]) -> None:
    """Brief: Configure the root logger from the ``logging`` config block.

    Inputs:
      - cfg: Mapping with optional keys ``level`` (trace, debug, info, warn,
        error, crit; default info), ``stderr`` (default True), ``file`` (path,
        parent directories are created) and ``syslog`` (True or a mapping
        with ``address`` and ``facility``).

    Outputs:
      - None. Handlers installed by a previous call are removed and closed,
        so calling this again reconfigures logging cleanly.

    Example:
        >>> init_logging({"level": "debug", "stderr": False})
        >>> logging.getLogger().level == logging.DEBUG
        True
    """
    cfg = cfg or {}
    root = logging.getLogger()

    _reset_root_handlers(root)
    root.setLevel(parse_level(cfg.get("level")))
    for handler in _build_handlers(cfg):
        root.addHandler(handler)

    syslog_cfg = cfg.get("syslog")
    if syslog_cfg:
        try:
            syslog = _syslog_handler(syslog_cfg)
        except (OSError, ValueError) as exc:  # pragma: no cover - no syslog socket
            root.warning("syslog logging disabled: %s", exc)
        else:
            root.addHandler(syslog)

    logging.captureWarnings(True)
