"""Asynchronous placement dispatch over a concurrent.futures executor.

Placement searches are CPU bound, so by default they run in a
ProcessPoolExecutor. Requests cross the process boundary as plain
dictionaries through the picklable top-level compute_placement function,
and every worker keeps one NestingEngine per font, rebuilt when the
settings change.

Key components:
- compute_placement: Top-level picklable function for worker execution
- PlacementDispatcher: Submits requests and collects responses with a deadline
"""

import random
import threading
import time
from collections.abc import Iterator
from concurrent.futures import Executor, Future, ProcessPoolExecutor, as_completed
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from glyphnest.config import GlyphNestSettings
from glyphnest.core.placement import NestingEngine, fallback_placement
from glyphnest.domain import PlacementRequest, PlacementResponse
from glyphnest.exceptions import PlacementTimeoutError
from glyphnest.utils import PlacementLogger


# font path -> (settings_json, engine)
_engines: dict[str, tuple[str, NestingEngine]] = {}
_engines_lock = threading.Lock()


def _engine_for(font_path: str, settings_json: str) -> NestingEngine:
    """Get this process's engine for a font.

    One engine is kept per font path. When the settings change the engine is
    rebuilt and the one it replaces is closed.
    """
    with _engines_lock:
        cached = _engines.get(font_path)
        if cached is not None and cached[0] == settings_json:
            return cached[1]

        settings = GlyphNestSettings.model_validate_json(settings_json)
        engine = NestingEngine.from_font(Path(font_path), settings)
        _engines[font_path] = (settings_json, engine)

    if cached is not None:
        cached[1].close()
    return engine


def compute_placement(
    request_dict: dict[str, Any],
    settings_json: str,
    font_path: str,
) -> dict[str, Any]:
    """Compute one placement.

    Top-level function designed to be picklable for use with ProcessPoolExecutor.
    Engines are cached per worker, so the shape cache survives across requests.

    Args:
        request_dict: Serialized request (from PlacementRequest.to_dict())
        settings_json: Serialized settings (from GlyphNestSettings.model_dump_json())
        font_path: Path to the font file

    Returns:
        Serialized PlacementResponse

    Raises:
        FontLoadError: If the font cannot be loaded in the worker
    """
    engine = _engine_for(font_path, settings_json)
    request = PlacementRequest.from_dict(request_dict)
    return engine.place(request).to_dict()


@dataclass
class _PendingPlacement:
    request: PlacementRequest
    future: Future
    deadline: float


class PlacementDispatcher:
    """Runs placement requests concurrently, one in flight per character.

    Responses arrive in completion order, not submission order. A request
    that fails or misses its deadline resolves to the fallback response.
    Running computations are never cancelled; a discarded request's result
    is dropped when it arrives.

    Example:
        with PlacementDispatcher(Path("font.ttf")) as dispatcher:
            dispatcher.submit(request)
            for response in dispatcher.completed():
                apply(response)
    """

    def __init__(
        self,
        font_path: Path,
        settings: GlyphNestSettings | None = None,
        executor: Executor | None = None,
        rng: random.Random | None = None,
        logger: PlacementLogger | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            font_path: Font used by the worker engines
            settings: Settings (defaults if None)
            executor: Executor to submit to (a process pool if None)
            rng: Random generator for fallback rotations
            logger: Placement logger for fallbacks
        """
        self._font_path = str(font_path)
        self._settings = settings or GlyphNestSettings()
        self._settings_json = self._settings.model_dump_json()
        self._owns_executor = executor is None
        self._executor = executor or ProcessPoolExecutor(
            max_workers=self._settings.dispatch.max_workers
        )
        self._rng = rng if rng is not None else random.Random(self._settings.search.seed)
        self._logger = logger or PlacementLogger()
        self._pending: dict[str, _PendingPlacement] = {}
        self._lock = threading.Lock()

    @property
    def timeout(self) -> float:
        return self._settings.dispatch.timeout_seconds

    @property
    def logger(self) -> PlacementLogger:
        return self._logger

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def is_pending(self, character_id: str) -> bool:
        """Check if a computation for character_id is in flight."""
        with self._lock:
            return character_id in self._pending

    def submit(self, request: PlacementRequest) -> bool:
        """Start computing a placement.

        Args:
            request: Placement request

        Returns:
            False if a computation for the same character id is already in
            flight (the request is ignored), True otherwise
        """
        with self._lock:
            if request.character_id in self._pending:
                return False

            future = self._executor.submit(
                compute_placement,
                request.to_dict(),
                self._settings_json,
                self._font_path,
            )
            self._pending[request.character_id] = _PendingPlacement(
                request=request,
                future=future,
                deadline=time.monotonic() + self.timeout,
            )
        return True

    def discard(self, character_id: str) -> bool:
        """Forget an in-flight computation; its result will be dropped.

        Returns:
            True if a computation was pending for character_id
        """
        with self._lock:
            return self._pending.pop(character_id, None) is not None

    def _take(self, character_id: str, pending: _PendingPlacement) -> bool:
        with self._lock:
            if self._pending.get(character_id) is not pending:
                return False
            del self._pending[character_id]
            return True

    def _fallback(self, request: PlacementRequest, error: BaseException) -> PlacementResponse:
        self._logger.log_fallback(request.character_id, request.new_glyph, error)
        return PlacementResponse(
            character_id=request.character_id,
            placement=fallback_placement(
                request.viewport, self._settings.search.fallback_scale, self._rng
            ),
            is_fallback=True,
        )

    def _resolve(self, pending: _PendingPlacement) -> PlacementResponse:
        request = pending.request
        remaining = max(0.0, pending.deadline - time.monotonic())
        try:
            data = pending.future.result(timeout=remaining)
        except FutureTimeoutError:
            return self._fallback(
                request, PlacementTimeoutError(request.character_id, self.timeout)
            )
        except Exception as e:
            return self._fallback(request, e)

        return PlacementResponse.from_dict(data)

    def result(self, character_id: str) -> PlacementResponse:
        """Wait for a placement, at most until its deadline.

        Args:
            character_id: Identifier of a submitted request

        Returns:
            The computed response, or the fallback response if the computation
            raised or missed its deadline

        Raises:
            KeyError: If nothing is pending for character_id
        """
        with self._lock:
            pending = self._pending.get(character_id)
        if pending is None:
            raise KeyError(f"No pending placement for {character_id!r}")

        response = self._resolve(pending)
        self._take(character_id, pending)
        return response

    def completed(self) -> Iterator[PlacementResponse]:
        """Yield responses for the currently pending requests as they finish.

        Requests discarded while waiting are skipped. Requests still running
        at the latest deadline resolve to the fallback.
        """
        with self._lock:
            snapshot = {p.future: (cid, p) for cid, p in self._pending.items()}
        if not snapshot:
            return

        latest = max(p.deadline for _, p in snapshot.values())
        remaining = set(snapshot)
        try:
            for future in as_completed(snapshot, timeout=max(0.0, latest - time.monotonic())):
                remaining.discard(future)
                character_id, pending = snapshot[future]
                if self._take(character_id, pending):
                    yield self._resolve(pending)
        except FutureTimeoutError:
            for future in remaining:
                character_id, pending = snapshot[future]
                if self._take(character_id, pending):
                    yield self._resolve(pending)

    def place(self, request: PlacementRequest) -> PlacementResponse:
        """Submit a request and wait for its response."""
        self.submit(request)
        return self.result(request.character_id)

    def shutdown(self, wait: bool = True) -> None:
        """Drop pending requests and shut down an owned executor."""
        with self._lock:
            self._pending.clear()
        if self._owns_executor:
            self._executor.shutdown(wait=wait, cancel_futures=True)

    def __enter__(self) -> "PlacementDispatcher":
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        self.shutdown()
