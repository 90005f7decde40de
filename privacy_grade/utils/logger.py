"""
Logging utility with timestamps and timing support.
Provides structured, colourful console output for classification
and grading stages. Optionally writes logs to a per-session file
when WRITE_TO_FILE is set.

All mutable per-session state (timers, log buffer, log-file handle)
is stored in ``contextvars.ContextVar`` so that page sessions running
concurrently do not interfere with each other.
"""

from __future__ import annotations

import contextvars
import io
import os
import pathlib
import re
import sys
import time
from datetime import UTC, datetime

# ============================================================================
# Per-session state (isolated via contextvars)
# ============================================================================

_timers_var: contextvars.ContextVar[dict[str, tuple[float, str]]] = contextvars.ContextVar("_timers_var")
_log_buffer_var: contextvars.ContextVar[list[str]] = contextvars.ContextVar("_log_buffer_var")
_log_file_stream_var: contextvars.ContextVar[io.TextIOWrapper | None] = contextvars.ContextVar("_log_file_stream_var", default=None)

_ANSI_RE = re.compile(r"\033\[[0-9;]*m")


def _get_timers() -> dict[str, tuple[float, str]]:
    """Return the per-context timer dict, creating it on first access."""
    try:
        return _timers_var.get()
    except LookupError:
        timers: dict[str, tuple[float, str]] = {}
        _timers_var.set(timers)
        return timers


def _get_log_buffer() -> list[str]:
    """Return the per-context log buffer, creating it on first access."""
    try:
        return _log_buffer_var.get()
    except LookupError:
        buf: list[str] = []
        _log_buffer_var.set(buf)
        return buf


def get_log_buffer() -> list[str]:
    """Return a copy of the accumulated log lines (ANSI-stripped)."""
    return list(_get_log_buffer())


def clear_log_buffer() -> None:
    """Clear the in-memory log buffer and timers for the next session."""
    _get_log_buffer().clear()
    _get_timers().clear()


# ============================================================================
# Levels
# ============================================================================

_LEVEL_ORDER = {
    "debug": 10,
    "timing": 20,
    "info": 20,
    "success": 20,
    "warn": 30,
    "error": 40,
}


def _min_level() -> int:
    """Return the numeric threshold configured through ``LOG_LEVEL``."""
    return _LEVEL_ORDER.get(os.environ.get("LOG_LEVEL", "info").lower(), _LEVEL_ORDER["info"])


# ============================================================================
# File Logging
# ============================================================================


def _write_to_file() -> bool:
    return os.environ.get("WRITE_TO_FILE", "").lower() == "true"


def session_context() -> contextvars.Context:
    """Return a context for one page session to run its logging in.

    The new context shares the caller's log buffer and timers but has
    no log file, so a file started inside it is owned by that session
    alone and never replaces or closes the caller's file.
    """
    _get_log_buffer()
    _get_timers()
    ctx = contextvars.copy_context()
    ctx.run(_log_file_stream_var.set, None)
    return ctx


def start_log_file(domain: str, session_id: str | None = None) -> str | None:
    """Start a new log file, replacing any file open in this context.

    *session_id*, when given, is added to the file name so sessions
    for the same domain started within the same second get separate
    files.

    Returns:
        The path of the opened file, or ``None`` when file logging
        is disabled or the file could not be opened.
    """
    if not _write_to_file():
        return None

    end_log_file()

    logs_dir = pathlib.Path.cwd() / ".logs"
    logs_dir.mkdir(parents=True, exist_ok=True)

    safe_domain = domain.removeprefix("www.")
    safe_domain = "".join(c if c.isalnum() or c in ".-" else "_" for c in safe_domain)[:50] or "session"

    now = datetime.now(UTC)
    suffix = f"_{session_id}" if session_id else ""
    log_file_path = str(logs_dir / f"{safe_domain}_{now.strftime('%Y-%m-%d_%H-%M-%S')}{suffix}.log")

    try:
        stream = open(log_file_path, "a", encoding="utf-8")  # noqa: SIM115
    except OSError as exc:
        print(f"\033[31m✗ [Logger] Failed to open log file: {exc}\033[0m", file=sys.stderr)
        return None

    _log_file_stream_var.set(stream)
    stream.write(f"\n{'=' * 80}\n  Page Session - {domain}\n  Started: {now.isoformat()}\n{'=' * 80}\n")
    return log_file_path


def end_log_file() -> None:
    """Flush and close the current log file."""
    stream = _log_file_stream_var.get(None)
    if stream is None:
        return
    try:
        stream.flush()
        stream.close()
    except OSError:
        print("\033[33m⚠ [Logger] Failed to flush/close log file stream\033[0m", file=sys.stderr)
    _log_file_stream_var.set(None)


def _write_to_log_file(line: str) -> None:
    """Write a line to the log file (without ANSI colours)."""
    stream = _log_file_stream_var.get(None)
    if stream is None:
        return
    stream.write(_ANSI_RE.sub("", line) + "\n")
    stream.flush()


# ============================================================================
# ANSI Colours
# ============================================================================

_colours = {
    "reset": "\033[0m",
    "bright": "\033[1m",
    "dim": "\033[2m",
    "cyan": "\033[36m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "red": "\033[31m",
    "magenta": "\033[35m",
    "blue": "\033[34m",
    "gray": "\033[90m",
}

_level_colour = {
    "info": _colours["cyan"],
    "success": _colours["green"],
    "warn": _colours["yellow"],
    "error": _colours["red"],
    "debug": _colours["gray"],
    "timing": _colours["magenta"],
}

_level_symbol = {
    "info": "ℹ",
    "success": "✓",
    "warn": "⚠",
    "error": "✗",
    "debug": "•",
    "timing": "⏱",
}


def _get_timestamp() -> str:
    """Return the current UTC time as HH:MM:SS.mmm."""
    now = datetime.now(UTC)
    return now.strftime("%H:%M:%S.") + f"{now.microsecond // 1000:03d}"


def _format_duration(ms: float) -> str:
    """Format a duration in milliseconds for display."""
    if ms < 1000:
        return f"{int(ms)}ms"
    if ms < 60000:
        return f"{ms / 1000:.2f}s"
    minutes = int(ms // 60000)
    seconds = (ms % 60000) / 1000
    return f"{minutes}m {seconds:.1f}s"


def _format_value(value: object) -> str:
    """Return an ANSI-coloured representation of *value*."""
    c = _colours
    if value is None:
        return f"{c['dim']}None{c['reset']}"
    if isinstance(value, bool):
        return f"{c['green']}True{c['reset']}" if value else f"{c['red']}False{c['reset']}"
    if isinstance(value, (int, float)):
        return f"{c['yellow']}{value}{c['reset']}"
    if isinstance(value, str):
        display = value[:197] + "..." if len(value) > 200 else value
        return f'{c["green"]}"{display}"{c["reset"]}'
    if isinstance(value, (list, tuple)):
        return f"{c['cyan']}[{len(value)} items]{c['reset']}"
    if isinstance(value, dict):
        return f"{c['cyan']}{{{len(value)} keys}}{c['reset']}"
    return str(value)


# ============================================================================
# Logger Class
# ============================================================================


class Logger:
    """Structured logger with context prefix and timing support."""

    def __init__(self, context: str = "PrivacyGrade") -> None:
        """Create a logger that prefixes messages with *context*."""
        self._context = context

    def _emit(self, line: str) -> None:
        print(line, file=sys.stderr)
        _write_to_log_file(line)
        _get_log_buffer().append(_ANSI_RE.sub("", line))

    def _log(self, level: str, message: str, data: dict[str, object] | None = None) -> None:
        """Format and emit a log line at the given level."""
        if _LEVEL_ORDER[level] < _min_level():
            return

        c = _colours
        colour = _level_colour.get(level, c["cyan"])
        symbol = _level_symbol.get(level, "ℹ")
        prefix = f"{c['gray']}[{_get_timestamp()}]{c['reset']} {colour}{symbol}{c['reset']} {c['bright']}[{self._context}]{c['reset']}"

        if data:
            data_str = " ".join(f"{c['dim']}{k}={c['reset']}{_format_value(v)}" for k, v in data.items())
            self._emit(f"{prefix} {message} {data_str}")
        else:
            self._emit(f"{prefix} {message}")

    def info(self, message: str, data: dict[str, object] | None = None) -> None:
        """Log an informational message."""
        self._log("info", message, data)

    def success(self, message: str, data: dict[str, object] | None = None) -> None:
        """Log a success message."""
        self._log("success", message, data)

    def warn(self, message: str, data: dict[str, object] | None = None) -> None:
        """Log a warning message."""
        self._log("warn", message, data)

    def error(self, message: str, data: dict[str, object] | None = None) -> None:
        """Log an error message."""
        self._log("error", message, data)

    def debug(self, message: str, data: dict[str, object] | None = None) -> None:
        """Log a debug-level message."""
        self._log("debug", message, data)

    def start_timer(self, label: str) -> None:
        """Start a named timer for performance measurement."""
        key = f"{self._context}:{label}"
        _get_timers()[key] = (time.monotonic() * 1000, _get_timestamp())
        self._log("timing", f"Starting: {label}")

    def end_timer(self, label: str, message: str | None = None) -> float:
        """Stop a named timer and log the elapsed time."""
        key = f"{self._context}:{label}"
        entry = _get_timers().pop(key, None)
        if entry is None:
            self.warn(f'Timer "{label}" was not started')
            return 0.0

        start_ms, start_ts = entry
        duration = time.monotonic() * 1000 - start_ms
        c = _colours
        duration_str = f"{c['magenta']}{_format_duration(duration)}{c['reset']}"
        display_message = message or f"Completed: {label}"
        self._log(
            "timing",
            f"{display_message} {c['dim']}took{c['reset']} {duration_str} {c['dim']}(started {start_ts}){c['reset']}",
        )
        return duration


def create_logger(context: str) -> Logger:
    """Create a logger for a specific module."""
    return Logger(context)
