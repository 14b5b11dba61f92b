"""Cooperative periodic timers for roster refresh and status polling."""

import asyncio
from collections.abc import Awaitable, Callable

from invoice_recon.logging.logger import Log
from invoice_recon.service.models import JobSnapshot

Sleep = Callable[[float], Awaitable[object]]
Tick = Callable[[], Awaitable[object]]


class PeriodicTimer:
    """Runs ``tick`` every ``interval`` seconds on the running event loop.

    The interval is measured from the end of one tick to the start of the
    next, so ticks never overlap. A cancelled timer cannot be restarted.
    """

    def __init__(
        self,
        name: str,
        interval: float,
        tick: Tick,
        *,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.name = name
        self._interval = interval
        self._tick = tick
        self._sleep = sleep
        self._task: asyncio.Task[None] | None = None
        self._cancelled = False
        self._in_tick = False

    @property
    def active(self) -> bool:
        return not self._cancelled and self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._task is not None or self._cancelled:
            raise RuntimeError(f"Timer {self.name} cannot be started twice")
        self._task = asyncio.create_task(self._run(), name=self.name)
        Log.debug(f"Timer {self.name} started", interval=self._interval)

    def cancel(self) -> None:
        """Stop the timer.

        A tick already in progress runs to completion, so a request it has in
        flight is not aborted and its response is still applied. Only the
        sleep between ticks is interrupted.
        """
        if self._cancelled:
            return
        self._cancelled = True
        if self._task is not None and not self._in_tick:
            self._task.cancel()
        Log.debug(f"Timer {self.name} cancelled")

    async def _run(self) -> None:
        while not self._cancelled:
            await self._sleep(self._interval)
            if self._cancelled:
                break
            self._in_tick = True
            try:
                await self._tick()
            except Exception as exc:
                Log.error(f"Timer {self.name} tick failed: {exc}")
            finally:
                self._in_tick = False


class PollSupervisor:
    """Keeps exactly one status-poll timer alive while a job needs polling.

    ``ensure`` is handed the tracked snapshot after every transition and
    derives the timer from the condition "a job is tracked and its status is
    non-terminal". A different job gets a new timer; the old one is torn down.
    """

    def __init__(
        self,
        interval: float,
        poll: Callable[[str], Awaitable[object]],
        *,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._interval = interval
        self._poll = poll
        self._sleep = sleep
        self._timer: PeriodicTimer | None = None
        self._job_id: str | None = None

    @property
    def polling_job_id(self) -> str | None:
        if self._timer is not None and self._timer.active:
            return self._job_id
        return None

    def ensure(self, snapshot: JobSnapshot | None) -> None:
        wanted = None
        if snapshot is not None and not snapshot.status.is_terminal:
            wanted = snapshot.job_id
        if wanted is not None and wanted == self.polling_job_id:
            return
        self.shutdown()
        if wanted is None:
            return
        self._job_id = wanted
        self._timer = PeriodicTimer(
            f"status-poll:{wanted}",
            self._interval,
            lambda: self._poll(wanted),
            sleep=self._sleep,
        )
        self._timer.start()

    def shutdown(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = None
        self._job_id = None
