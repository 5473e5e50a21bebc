"""Structured step logging for import and migration runs.

Every entry carries:
- source (exporting application, or the file being processed)
- batch_id
- step
- record_count
- duration_ms
"""

import json
import logging
import time
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Optional


@dataclass
class PipelineLogContext:
    """Context for one structured log entry."""

    source: str
    batch_id: str
    step: str = ""
    record_count: int = 0
    duration_ms: Optional[float] = None
    status: str = "started"
    error: Optional[str] = None
    extra: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for logging, dropping None values."""
        data = asdict(self)
        data["timestamp"] = datetime.now(timezone.utc).isoformat()
        return {k: v for k, v in data.items() if v is not None}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str, ensure_ascii=False)


class PipelineLogger:
    """Structured logger for the steps of one import run."""

    def __init__(self, source: str, batch_id: str):
        """Initialize pipeline logger.

        Args:
            source: Exporting application or input name
            batch_id: Identifier shared by all entries of the run
        """
        self.source = source
        self.batch_id = batch_id
        self.logger = logging.getLogger(f"jpdata.pipeline.{source}")
        self._start_time: Optional[float] = None

    def _log(self, level: int, step: str, **kwargs) -> None:
        ctx = PipelineLogContext(
            source=self.source,
            batch_id=self.batch_id,
            step=step,
            **kwargs
        )
        self.logger.log(level, ctx.to_json(), extra=ctx.to_dict())

    def _elapsed_ms(self) -> Optional[float]:
        if self._start_time is None:
            return None
        return (time.perf_counter() - self._start_time) * 1000

    def start(self, step: str) -> None:
        """Log step start."""
        self._start_time = time.perf_counter()
        self._log(logging.INFO, step, status="started")

    def success(self, step: str, **kwargs) -> None:
        """Log step success."""
        self._log(
            logging.INFO,
            step,
            status="success",
            duration_ms=self._elapsed_ms(),
            **kwargs
        )

    def error(self, step: str, error: Exception, **kwargs) -> None:
        """Log step failure."""
        self._log(
            logging.ERROR,
            step,
            status="error",
            error=str(error),
            duration_ms=self._elapsed_ms(),
            **kwargs
        )


@dataclass
class StepTimer:
    """Elapsed time of a timed block; duration_ms is set when the block exits."""

    started: float = field(default_factory=time.perf_counter)
    duration_ms: float = 0.0


@contextmanager
def timed_operation(name: str, logger: Optional[logging.Logger] = None):
    """Time the enclosed block, logging the duration at DEBUG if a logger is given."""
    timer = StepTimer()
    try:
        yield timer
    finally:
        timer.duration_ms = (time.perf_counter() - timer.started) * 1000
        if logger:
            logger.debug(
                f"{name} took {timer.duration_ms:.1f}ms",
                extra={"operation": name, "duration_ms": timer.duration_ms},
            )
