"""
@file sectionlogger.py
@brief Central section logging facility for component waits and triggers.
"""

from __future__ import annotations

import json
import os
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .interfaces import ILogSink


@dataclass
class LogSection:
    """A named span of work, e.g. a single wait unit."""
    message: str
    kind: str = "section"
    metadata: Dict[str, Any] = field(default_factory=dict)
    start_time: float = field(default_factory=time.monotonic)

    @property
    def elapsed_ms(self) -> int:
        return int((time.monotonic() - self.start_time) * 1000)


class WaitForComponentLogSection(LogSection):
    """Section opened for each wait unit executed against a component."""

    def __init__(self, component: Any, unit: Any):
        super().__init__(
            message=f"Wait until {component.component_full_name} is {unit.description}",
            kind="wait",
            metadata={
                "timeout_s": unit.timeout,
                "interval_s": unit.retry_interval,
                "safely": unit.is_safely,
            },
        )


class SectionLogger(ILogSink):
    """Thread-safe section logger with line/jsonl output."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._local = threading.local()
        self._enabled = False
        self._console = True
        self._file_path: Optional[str] = None
        self._level = "INFO"
        self._run_id = "default"
        self._format = "line"

    def configure(
        self,
        *,
        console: bool = True,
        file_path: Optional[str] = None,
        level: str = "INFO",
        run_id: Optional[str] = None,
        format: str = "line",
    ) -> None:
        """Configure logger settings."""
        fmt = (format or "line").lower()
        if fmt not in {"line", "jsonl"}:
            raise ValueError("SectionLogger format must be 'line' or 'jsonl'")

        with self._lock:
            self._console = bool(console)
            self._file_path = file_path
            self._level = level.upper()
            self._format = fmt
            if run_id:
                self._run_id = run_id

    def enable(self) -> None:
        """Enable logging."""
        with self._lock:
            self._enabled = True

    def disable(self) -> None:
        """Disable logging."""
        with self._lock:
            self._enabled = False

    def is_enabled(self) -> bool:
        """Return True if logging is enabled."""
        return self._enabled

    def _stack(self) -> List[LogSection]:
        if not hasattr(self._local, "stack"):
            self._local.stack = []
        return self._local.stack

    @property
    def depth(self) -> int:
        return len(self._stack())

    def start_section(self, section: LogSection) -> None:
        """Open a section; nested sections are indented in line output."""
        self.log(
            event=f"{section.kind}_start",
            message=section.message,
            metadata=section.metadata,
        )
        self._stack().append(section)

    def end_section(self, status: str = "ok") -> Optional[LogSection]:
        """Close the innermost section and report its duration."""
        stack = self._stack()
        if not stack:
            return None
        section = stack.pop()
        self.log(
            event="section_end",
            message=section.message,
            status=status,
            duration_ms=section.elapsed_ms,
        )
        return section

    def log(
        self,
        *,
        event: str,
        message: Optional[str] = None,
        status: str = "info",
        duration_ms: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Emit a log event."""
        if not self._enabled:
            return

        event_obj: Dict[str, Any] = {
            "timestamp": time.strftime("%H:%M:%S"),
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": self._level,
            "event": event,
            "message": message,
            "status": status,
            "duration_ms": duration_ms,
            "depth": self.depth,
            "metadata": dict(metadata or {}),
            "run_id": self._run_id,
        }

        line = self._format_output(event_obj)

        if self._console:
            print(line, flush=True)

        if self._file_path:
            self._write_file(line)

    def _write_file(self, line: str) -> None:
        try:
            os.makedirs(os.path.dirname(os.path.abspath(self._file_path)) or ".", exist_ok=True)
            with open(self._file_path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError:
            pass

    def _format_output(self, event: Dict[str, Any]) -> str:
        if self._format == "jsonl":
            return json.dumps(event, ensure_ascii=False, separators=(",", ":"), default=str)
        return self._format_line(event)

    def _format_line(self, event: Dict[str, Any]) -> str:
        indent = "  " * event.get("depth", 0)
        parts = [
            event.get("timestamp", ""),
            event.get("level", "INFO"),
            f"{indent}{event.get('event', '')}",
        ]

        message = event.get("message")
        if message:
            parts.append(message)

        status = event.get("status")
        if status:
            parts.append(f"status={status}")

        duration = event.get("duration_ms")
        if duration is not None:
            parts.append(f"duration_ms={duration}")

        run_id = event.get("run_id")
        if run_id:
            parts.append(f"run_id={run_id}")

        meta = event.get("metadata") or {}
        for key, value in meta.items():
            parts.append(f"{key}={value}")

        return " | ".join(parts)


SECTION_LOGGER = SectionLogger()
