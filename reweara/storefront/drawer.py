# reweara/storefront/drawer.py
"""
Navigation drawer visibility as an explicit state machine:

    closed --open()--> opening --(transition end)--> open
    open --close()--> closing --(transition end)--> closed

Transition end fires after `duration` seconds on the event loop, or when
`transition_end()` is called by whatever renders the animation.
"""
import asyncio
import enum
from typing import Callable


class DrawerState(str, enum.Enum):
    CLOSED = "closed"
    OPENING = "opening"
    OPEN = "open"
    CLOSING = "closing"


_SETTLED = {
    DrawerState.OPENING: DrawerState.OPEN,
    DrawerState.CLOSING: DrawerState.CLOSED,
}


class Drawer:
    def __init__(
        self,
        *,
        duration: float = 0.3,
        loop: asyncio.AbstractEventLoop | None = None,
        on_change: Callable[[DrawerState], None] | None = None,
    ):
        self.duration = duration
        self.state = DrawerState.CLOSED
        self._loop = loop
        self._on_change = on_change
        self._timer: asyncio.TimerHandle | None = None

    @property
    def is_rendered(self) -> bool:
        """Whether the drawer is mounted at all (anything but closed)."""
        return self.state is not DrawerState.CLOSED

    @property
    def is_expanded(self) -> bool:
        """Whether the panel should sit in its on-screen position."""
        return self.state in (DrawerState.OPENING, DrawerState.OPEN)

    def open(self) -> None:
        if self.state in (DrawerState.OPEN, DrawerState.OPENING):
            return
        self._begin(DrawerState.OPENING)

    def close(self) -> None:
        if self.state in (DrawerState.CLOSED, DrawerState.CLOSING):
            return
        self._begin(DrawerState.CLOSING)

    def toggle(self) -> None:
        if self.is_expanded:
            self.close()
        else:
            self.open()

    def transition_end(self) -> None:
        settled = _SETTLED.get(self.state)
        if settled is None:
            return
        self._cancel_timer()
        self._set(settled)

    def dispose(self) -> None:
        self._cancel_timer()

    def _begin(self, state: DrawerState) -> None:
        self._cancel_timer()
        self._set(state)
        if self.duration <= 0:
            self.transition_end()
            return
        loop = self._loop or asyncio.get_running_loop()
        self._timer = loop.call_later(self.duration, self._on_timer)

    def _on_timer(self) -> None:
        self._timer = None
        self.transition_end()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _set(self, state: DrawerState) -> None:
        self.state = state
        if self._on_change is not None:
            self._on_change(state)
