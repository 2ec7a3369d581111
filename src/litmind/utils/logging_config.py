# src/litmind/utils/logging_config.py
"""
File-routed logging for LitMind.

Usage:
    from litmind.utils.logging_config import Logger, LogFiles, set_trace_id

    set_trace_id()
    Logger.info("Generation started", file=LogFiles.RECOMMEND)
    Logger.error("Provider failed", file=LogFiles.ERROR)

Configuration via environment variables:
    LITMIND_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)
    LITMIND_LOG_DIR: Base directory for log files (default: logs/)
    LITMIND_LOG_MAX_BYTES: Max size per log file in bytes (default: 10MB)
    LITMIND_LOG_BACKUP_COUNT: Number of backup files to keep (default: 5)
"""

from __future__ import annotations

import inspect
import logging
import os
import threading
import uuid
from contextvars import ContextVar
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Optional

import yaml

_trace_id_var: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_FILE = "litmind.log"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024
DEFAULT_BACKUP_COUNT = 5
DEFAULT_FORMAT = "{timestamp} [{level}] [{trace_id}] {filename}:{lineno} - {message}"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_CONFIG_FILE = Path(__file__).parent / "log_config.yaml"

_DEFAULT_FILES = {
    "recommend": "recommend/recommend.log",
    "api": "api/api.log",
    "error": "errors/error.log",
}


class _LogFilesMeta(type):
    """Allows ``LogFiles.RECOMMEND`` style access to configured files."""

    def __getattr__(cls, name: str) -> str:
        files = cls._load()
        for key in (name, name.lower()):
            if key in files:
                return files[key]
        raise AttributeError(f"Log file '{name}' not found in config")


class LogFiles(metaclass=_LogFilesMeta):
    """
    Log file paths loaded from ``log_config.yaml`` next to this module.

    To add a file, add an entry under ``files`` and access it as
    ``LogFiles.<NAME>``.
    """

    _files: Optional[Dict[str, str]] = None

    @classmethod
    def _load(cls) -> Dict[str, str]:
        if cls._files is not None:
            return cls._files
        files = dict(_DEFAULT_FILES)
        if LOG_CONFIG_FILE.exists():
            try:
                with open(LOG_CONFIG_FILE, "r", encoding="utf-8") as f:
                    config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError):
                config = {}
            files.update(config.get("files") or {})
        cls._files = files
        return files

    @classmethod
    def get(cls, name: str) -> str:
        files = cls._load()
        return files.get(name) or files.get(name.lower()) or f"{name}/{name}.log"


LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

_config: Dict[str, object] = {}
_file_handlers: Dict[str, RotatingFileHandler] = {}
_handlers_lock = threading.Lock()


def _get_config() -> Dict[str, object]:
    return {
        "level": os.environ.get("LITMIND_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        "base_dir": os.environ.get("LITMIND_LOG_DIR", DEFAULT_LOG_DIR),
        "max_bytes": int(os.environ.get("LITMIND_LOG_MAX_BYTES", DEFAULT_MAX_BYTES)),
        "backup_count": int(os.environ.get("LITMIND_LOG_BACKUP_COUNT", DEFAULT_BACKUP_COUNT)),
    }


def _get_file_handler(file_path: str) -> RotatingFileHandler:
    with _handlers_lock:
        handler = _file_handlers.get(file_path)
        if handler is None:
            path = Path(file_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(
                filename=str(path),
                maxBytes=int(_config.get("max_bytes", DEFAULT_MAX_BYTES)),
                backupCount=int(_config.get("backup_count", DEFAULT_BACKUP_COUNT)),
                encoding="utf-8",
            )
            handler.setFormatter(logging.Formatter("%(message)s"))
            _file_handlers[file_path] = handler
        return handler


def _resolve_file_path(file: Optional[str]) -> str:
    base_dir = str(_config.get("base_dir", DEFAULT_LOG_DIR))
    return str(Path(base_dir) / (file or DEFAULT_LOG_FILE))


def _should_log(level: str) -> bool:
    current = str(_config.get("level", DEFAULT_LOG_LEVEL))
    return LOG_LEVELS.get(level, 0) >= LOG_LEVELS.get(current, logging.INFO)


def _write_log(level: str, message: str, file: Optional[str] = None) -> None:
    if not _should_log(level):
        return

    # Skip _write_log and the public Logger method.
    frame = inspect.currentframe()
    caller = frame.f_back.f_back if frame and frame.f_back else None
    filename = os.path.basename(caller.f_code.co_filename) if caller else "unknown"
    lineno = caller.f_lineno if caller else 0

    formatted = DEFAULT_FORMAT.format(
        timestamp=datetime.now().strftime(DEFAULT_DATE_FORMAT),
        level=level,
        trace_id=_trace_id_var.get() or "-",
        filename=filename,
        lineno=lineno,
        message=message,
    )
    record = logging.LogRecord(
        name="litmind",
        level=LOG_LEVELS[level],
        pathname=filename,
        lineno=lineno,
        msg=formatted,
        args=None,
        exc_info=None,
    )
    _get_file_handler(_resolve_file_path(file)).handle(record)


class Logger:
    """
    Static logger writing to named files under the log directory.

    Initializes itself from the environment on first use; call ``init`` to
    override settings explicitly.
    """

    @staticmethod
    def init(
        level: Optional[str] = None,
        base_dir: Optional[str] = None,
        max_bytes: Optional[int] = None,
        backup_count: Optional[int] = None,
    ) -> None:
        _config.clear()
        _config.update(_get_config())
        if level:
            _config["level"] = level.upper()
        if base_dir:
            _config["base_dir"] = base_dir
        if max_bytes:
            _config["max_bytes"] = max_bytes
        if backup_count:
            _config["backup_count"] = backup_count

    @staticmethod
    def _ensure_init() -> None:
        if not _config:
            Logger.init()

    @staticmethod
    def debug(message: str, file: Optional[str] = None) -> None:
        Logger._ensure_init()
        _write_log("DEBUG", message, file)

    @staticmethod
    def info(message: str, file: Optional[str] = None) -> None:
        Logger._ensure_init()
        _write_log("INFO", message, file)

    @staticmethod
    def warning(message: str, file: Optional[str] = None) -> None:
        Logger._ensure_init()
        _write_log("WARNING", message, file)

    @staticmethod
    def error(message: str, file: Optional[str] = None) -> None:
        Logger._ensure_init()
        _write_log("ERROR", message, file)

    @staticmethod
    def set_level(level: str) -> None:
        Logger._ensure_init()
        _config["level"] = level.upper()

    @staticmethod
    def close() -> None:
        with _handlers_lock:
            for handler in _file_handlers.values():
                handler.close()
            _file_handlers.clear()


def generate_trace_id() -> str:
    return f"rec-{uuid.uuid4().hex[:12]}"


def set_trace_id(trace_id: Optional[str] = None) -> str:
    """Set (or generate) the trace id for the current context and return it."""
    tid = trace_id or generate_trace_id()
    _trace_id_var.set(tid)
    return tid


def get_trace_id() -> Optional[str]:
    return _trace_id_var.get()


def clear_trace_id() -> None:
    _trace_id_var.set(None)
