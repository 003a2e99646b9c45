"""Logging utilities for glyphnest."""

import logging
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path

import structlog

LOGGER_NAME = "glyphnest"

# Most recent (glyph, message) pairs kept in PlacementStats.errors
MAX_RECORDED_ERRORS = 100

_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
    structlog.processors.JSONRenderer(),
]


@dataclass
class PlacementStats:
    """Statistics accumulated over a placement session.

    Timings are kept as running aggregates and only the most recent errors
    are retained, so a long session uses constant memory.
    """

    placements: int = 0
    fallbacks: int = 0
    shapes_analyzed: int = 0
    candidates_tested: int = 0
    error_count: int = 0
    errors: deque[tuple[str, str]] = field(
        default_factory=lambda: deque(maxlen=MAX_RECORDED_ERRORS)
    )
    timed_placements: int = 0
    total_placement_ms: float = 0.0
    min_placement_ms: float = 0.0
    max_placement_ms: float = 0.0

    def record_timing(self, duration_ms: float) -> None:
        """Fold one placement duration into the aggregates."""
        if self.timed_placements == 0:
            self.min_placement_ms = duration_ms
            self.max_placement_ms = duration_ms
        else:
            self.min_placement_ms = min(self.min_placement_ms, duration_ms)
            self.max_placement_ms = max(self.max_placement_ms, duration_ms)
        self.timed_placements += 1
        self.total_placement_ms += duration_ms

    def record_error(self, glyph: str, message: str) -> None:
        self.error_count += 1
        self.errors.append((glyph, message))

    @property
    def avg_placement_ms(self) -> float:
        """Average placement duration in milliseconds."""
        if not self.timed_placements:
            return 0.0
        return self.total_placement_ms / self.timed_placements


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure structured logging for the glyphnest logger.

    Handlers installed by an earlier call are replaced, so the function can
    be called once per CLI invocation or test.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for stderr output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    stdlib_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(stdlib_logger.handlers):
        stdlib_logger.removeHandler(handler)
        handler.close()
    stdlib_logger.setLevel(logging.DEBUG)
    stdlib_logger.propagate = False

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        stdlib_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    stdlib_logger.addHandler(console_handler)

    structlog.configure(
        processors=_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger(LOGGER_NAME)
    logger.debug(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=console_level,
    )

    return logger


def get_logger() -> structlog.stdlib.BoundLogger:
    """Get a glyphnest logger without touching global structlog configuration.

    The logger writes through the stdlib "glyphnest" logger, so it stays
    quiet until configure_logging (or the host application) adds handlers.
    """
    return structlog.wrap_logger(
        logging.getLogger(LOGGER_NAME),
        processors=_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
    )


class PlacementLogger:
    """Logger for tracking placement progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._logger = logger if logger is not None else get_logger()
        self._stats = PlacementStats()

    def log_placement_start(self, glyph: str, existing_count: int) -> None:
        """Log start of a placement search."""
        self._logger.debug("Placing glyph", glyph=glyph, existing=existing_count)

    def log_first_placement(self, glyph: str, scale: float) -> None:
        """Log a glyph placed on an empty viewport."""
        self._logger.debug("First glyph centred", glyph=glyph, scale=round(scale, 2))

    def log_new_best(
        self,
        glyph: str,
        x: float,
        y: float,
        rotation: float,
        scale: float,
    ) -> None:
        """Log an improved candidate."""
        self._logger.debug(
            "New best placement",
            glyph=glyph,
            x=round(x, 1),
            y=round(y, 1),
            rotation=rotation,
            scale=round(scale, 2),
        )

    def log_placement_complete(
        self,
        glyph: str,
        scale: float,
        candidates: int,
        duration_ms: float,
    ) -> None:
        """Log a finished placement search."""
        self._logger.info(
            "Glyph placed",
            glyph=glyph,
            scale=round(scale, 2),
            candidates=candidates,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.placements += 1
        self._stats.candidates_tested += candidates
        self._stats.record_timing(duration_ms)

    def log_fallback(
        self,
        character_id: str,
        glyph: str,
        error: BaseException,
        traceback: str | None = None,
    ) -> None:
        """Log a placement that failed and received the fallback pose."""
        self._logger.error(
            "Placement failed, using fallback",
            character_id=character_id,
            glyph=glyph,
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.fallbacks += 1
        self._stats.record_error(glyph, str(error))

    def log_shape_analyzed(self, glyph: str, hull_points: int, duration_ms: float) -> None:
        """Log a shape analysis cache miss."""
        self._logger.debug(
            "Shape analyzed",
            glyph=glyph,
            hull_points=hull_points,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.shapes_analyzed += 1

    @property
    def stats(self) -> PlacementStats:
        """Get current placement statistics."""
        return self._stats
