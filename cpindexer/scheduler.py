"""Single-flight scheduling for index rebuilds.

Only one rebuild runs at a time. Manual requests wait for the running one and
then do their own pass. Automatic requests that arrive during a run are
coalesced into at most one extra pass, and automatic requests arriving
within the cooldown of the previous accepted one are dropped.
"""

from __future__ import annotations

import asyncio
import time
from typing import Callable

from .load_config import DEFAULT_AUTO_REBUILD_COOLDOWN
from .logging_utils import log_debug, log_error, log_info
from .models import RebuildOutcome

RebuildFunc = Callable[[bool], RebuildOutcome]


class RebuildScheduler:
    def __init__(
        self,
        rebuild: RebuildFunc,
        cooldown: float = DEFAULT_AUTO_REBUILD_COOLDOWN,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._rebuild = rebuild
        self.cooldown = cooldown
        self._clock = clock
        self._in_flight: asyncio.Task[RebuildOutcome | None] | None = None
        self._pending_auto = False
        self._last_auto_at: float | None = None
        self._run_id = 0

    @property
    def running(self) -> bool:
        return self._in_flight is not None

    @property
    def pending_auto(self) -> bool:
        return self._pending_auto

    async def rebuild_now(self, auto: bool = False) -> RebuildOutcome | None:
        """Request a rebuild.

        Returns the outcome of the pass this call ran, or ``None`` when the
        request was throttled, coalesced into a running pass, or failed.
        """

        if auto:
            now = self._clock()
            if self._last_auto_at is not None and now - self._last_auto_at < self.cooldown:
                log_debug(f"Auto rebuild throttled (min {self.cooldown}s).")
                return None
            self._last_auto_at = now
        return await self._run_guarded(auto)

    async def _run_guarded(self, auto: bool) -> RebuildOutcome | None:
        while self._in_flight is not None:
            if auto:
                self._pending_auto = True
                return None
            await asyncio.wait({self._in_flight})

        self._run_id += 1
        task = asyncio.ensure_future(self._execute(self._run_id, auto))
        self._in_flight = task
        outcome = await task

        if self._pending_auto:
            self._pending_auto = False
            await self._run_guarded(True)
        return outcome

    async def _execute(self, run_id: int, auto: bool) -> RebuildOutcome | None:
        started = time.perf_counter()
        log_info(f"Installed index rebuild START (#{run_id}, auto={auto})")
        try:
            return await asyncio.to_thread(self._rebuild, auto)
        except Exception as exc:
            log_error(f"Installed index rebuild FAILED (#{run_id}): {exc}")
            return None
        finally:
            self._in_flight = None
            elapsed_ms = int((time.perf_counter() - started) * 1000)
            log_info(f"Installed index rebuild END (#{run_id}) in {elapsed_ms}ms")
