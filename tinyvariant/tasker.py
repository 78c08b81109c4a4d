"""A tiny cooperative scheduler for delayed and periodic callbacks."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

DEFAULT_CAPACITY = 20


def _monotonic_millis() -> int:
    return int(time.monotonic() * 1000)


@dataclass
class ScheduledTask:
    """A callback waiting for its delay to elapse.

    The callback receives the current time and the task itself, so it may
    change ``execution_time`` or ``repeat`` while it runs.
    """

    func: Callable[[int, "ScheduledTask"], None]
    execution_time: int
    start_time: int
    repeat: bool = False

    @property
    def due_time(self) -> int:
        return self.start_time + self.execution_time


class TaskQueueFull(RuntimeError):
    """Raised when every task slot is already taken."""


class AsyncTasker:
    """Run callbacks after a delay without blocking the caller's loop.

    Call :meth:`run_event_loop` regularly; it runs every task whose delay has
    elapsed. Callbacks must not block, or they hold up every other task.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._clock = clock or _monotonic_millis
        self._slots: list[Optional[ScheduledTask]] = [None] * capacity

    @property
    def capacity(self) -> int:
        return len(self._slots)

    @property
    def pending(self) -> list[ScheduledTask]:
        """The tasks currently scheduled, in slot order."""
        return [task for task in self._slots if task is not None]

    def schedule(
        self,
        execution_time: int,
        func: Callable[[int, ScheduledTask], None],
        repeat: bool = False,
    ) -> ScheduledTask:
        """Schedule ``func`` to run ``execution_time`` milliseconds from now.

        With ``repeat`` the task runs again every ``execution_time``
        milliseconds. Raises TaskQueueFull when no slot is free.
        """
        if func is None:
            raise ValueError("func must be callable")
        for slot, task in enumerate(self._slots):
            if task is None:
                new_task = ScheduledTask(func, execution_time, self._clock(), repeat)
                self._slots[slot] = new_task
                return new_task
        raise TaskQueueFull(f"all {len(self._slots)} task slots are in use")

    def run_event_loop(self) -> None:
        """Run every task whose time has come."""
        current_time = self._clock()
        for slot, task in enumerate(self._slots):
            if task is None or current_time < task.due_time:
                continue
            task.func(current_time, task)
            if task.repeat:
                task.start_time = current_time
            else:
                self._slots[slot] = None