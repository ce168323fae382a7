"""
Hierarchical runtime tracing for Sketchify.

Provides structured, nested logging with timing information so the
geometry pipeline can be followed without stepping through code.
"""

import dataclasses
import functools
import hashlib
import json
import sys
import time
from contextlib import contextmanager
from datetime import datetime


class TracerConfig:
    """Configuration for the tracer."""

    def __init__(self):
        self.enabled = False
        self.level = "INFO"
        self.file_path = None
        self.json_output = False
        self._file_handle = None

    def configure(self, enabled=False, level="INFO", file_path=None, json_output=False):
        """Configure tracer settings."""
        self.enabled = enabled
        self.level = level.upper()
        self.file_path = file_path
        self.json_output = json_output

        if self._file_handle:
            self._file_handle.close()
            self._file_handle = None

        if file_path and enabled:
            self._file_handle = open(file_path, "w", encoding="utf-8")


class Tracer:
    """
    Hierarchical tracer for structured logging.

    Supports nested spans with timing, argument summarization, and
    text or JSON output.
    """

    LEVELS = {"ERROR": 0, "WARN": 1, "INFO": 2, "DEBUG": 3}

    def __init__(self):
        self.config = TracerConfig()
        self._depth = 0
        self._span_stack = []

    def _should_log(self, level):
        """Check if this level should be logged."""
        if not self.config.enabled:
            return False
        return self.LEVELS.get(level, 2) <= self.LEVELS.get(self.config.level, 2)

    def _format_timestamp(self):
        """Format current time as HH:MM:SS.mmm."""
        now = datetime.now()
        return now.strftime("%H:%M:%S.") + f"{now.microsecond // 1000:03d}"

    def _emit(self, line):
        print(line, file=sys.stderr)
        handle = self.config._file_handle
        if handle:
            handle.write(line + "\n")
            handle.flush()

    def _write(self, level, module, func, message, meta=None):
        """Write a log line, plus a JSON record when json_output is set."""
        if not self._should_log(level):
            return

        timestamp = self._format_timestamp()
        location = f"{module}:{func}" if func else module
        self._emit(f"{timestamp} {level:<5} {'  ' * self._depth}{location}  {message}")

        if self.config.json_output:
            self._emit(json.dumps({
                "timestamp": timestamp,
                "level": level,
                "depth": self._depth,
                "module": module,
                "function": func,
                "message": message,
                "meta": {k: summarize(v) for k, v in (meta or {}).items()},
            }))

    @contextmanager
    def span(self, name, module="", **meta):
        """
        Context manager for a traced span.

        Logs start and end with timing information. Exceptions are logged
        at ERROR level and re-raised.
        """
        if not self.config.enabled:
            yield
            return

        start_time = time.perf_counter()
        self._write("INFO", module, name, _with_meta("start", meta))
        self._depth += 1
        self._span_stack.append((name, module))

        level = "INFO"
        outcome = "end ok"
        try:
            yield
        except Exception as e:
            level = "ERROR"
            outcome = f"failed error={type(e).__name__}: {str(e)[:100]}"
            raise
        finally:
            self._depth -= 1
            self._span_stack.pop()
            elapsed = (time.perf_counter() - start_time) * 1000
            self._write(level, module, name, f"{outcome} dt={elapsed:.0f}ms")

    def event(self, message, level="INFO", **meta):
        """Log a one-off event within the current span."""
        if not self._should_log(level):
            return

        func, module = self._span_stack[-1] if self._span_stack else ("", "")
        self._write(level, module, func, _with_meta(message, meta), meta)


def _with_meta(message, meta):
    parts = [message] + [f"{k}={summarize(v)}" for k, v in meta.items()]
    return " ".join(parts).strip()


def summarize(obj, max_len=200):
    """
    Summarize an object for logging.

    Returns a compact string representation that never exceeds max_len chars.
    Handles numpy arrays, pydantic models, config dataclasses, point lists,
    strings, and dicts.
    """
    try:
        result = _summarize_impl(obj)
        if len(result) > max_len:
            return result[:max_len - 3] + "..."
        return result
    except Exception:
        return f"<{type(obj).__name__}>"


def _summarize_impl(obj):
    """Implementation of summarize without length capping."""
    if obj is None:
        return "None"

    type_name = type(obj).__name__

    # numpy arrays
    import numpy as np
    if isinstance(obj, np.ndarray):
        shape_str = "x".join(str(s) for s in obj.shape)
        if 0 < obj.size < 1000:
            h = hashlib.md5(obj.tobytes()).hexdigest()[:8]
        else:
            h = hashlib.md5(str(obj.shape).encode()).hexdigest()[:8]
        return f"ndarray({obj.dtype},{shape_str},h={h})"

    # pydantic models
    from pydantic import BaseModel
    if isinstance(obj, BaseModel):
        if type_name == "Segment":
            return f"Segment({obj.key},n={len(obj.data)})"
        fields = list(type(obj).model_fields.keys())[:3]
        return f"{type_name}(fields={fields}...)"

    # config dataclasses
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        items = dataclasses.asdict(obj)
        parts = ",".join(f"{k}={v}" for k, v in list(items.items())[:4])
        return f"{type_name}({parts}...)"

    if isinstance(obj, str):
        if len(obj) > 50:
            h = hashlib.md5(obj.encode()).hexdigest()[:8]
            return f"str(len={len(obj)},h={h})"
        return repr(obj)

    if isinstance(obj, (list, tuple)):
        if len(obj) == 0:
            return f"{type_name}(len=0)"
        first = obj[0]
        # A point is a pair of numbers
        if isinstance(first, (list, tuple)) and len(first) == 2 and all(
            isinstance(v, (int, float)) for v in first
        ):
            return f"{type_name}(len={len(obj)},first=({first[0]:.1f},{first[1]:.1f}))"
        return f"{type_name}(len={len(obj)},first={type(first).__name__})"

    if isinstance(obj, dict):
        keys = list(obj.keys())[:5]
        keys_str = ",".join(str(k) for k in keys)
        return f"dict(len={len(obj)},keys=[{keys_str}])"

    if isinstance(obj, (int, float)):
        return str(obj)

    return f"<{type_name}>"


def trace(label=None):
    """Wrap a function in a span named label (the function name by default)."""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if not _tracer.config.enabled:
                return func(*args, **kwargs)

            func_module = func.__module__.split(".")[-1]
            with _tracer.span(label or func.__name__, module=func_module):
                return func(*args, **kwargs)

        return wrapper
    return decorator


# Global tracer instance
_tracer = Tracer()


def get_tracer():
    """Get the global tracer instance."""
    return _tracer


def configure_tracer(enabled=False, level="INFO", file_path=None, json_output=False):
    """Configure the global tracer."""
    _tracer.config.configure(
        enabled=enabled,
        level=level,
        file_path=file_path,
        json_output=json_output,
    )


def configure_from_config(tracing):
    """
    Apply a TracingConfig section to the global tracer.

    The tracer is only reconfigured when a setting changes, so an open
    trace file is not truncated by repeated calls.
    """
    settings = dataclasses.asdict(tracing)
    settings["level"] = settings["level"].upper()
    current = _tracer.config
    if all(getattr(current, key) == value for key, value in settings.items()):
        return
    configure_tracer(**settings)
