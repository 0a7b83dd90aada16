# reweara/storefront/popup_display.py
"""
Popup display controller.

Runs on the storefront's asyncio event loop. Each `evaluate()` call is one
evaluation cycle: it may install at most one delay timer (time_delay) or one
one-shot mouseleave listener (exit_intent). Starting a new cycle or
unmounting tears the previous cycle's timer/listener down, so a popup
chosen for one page is never displayed after navigating away.
"""
import asyncio
import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Sequence

from reweara.schemas.promotion import PromotionalPopupRead
from reweara.storefront.promotions import PopupSelector

logger = logging.getLogger(__name__)

MOUSELEAVE = "mouseleave"


@dataclass(frozen=True)
class PointerEvent:
    client_x: float = 0.0
    client_y: float = 0.0


EventListener = Callable[[PointerEvent], None]


class ViewportEvents:
    """Minimal document-level event target."""

    def __init__(self):
        self._listeners: dict[str, list[EventListener]] = defaultdict(list)

    def add_listener(self, event_type: str, listener: EventListener) -> None:
        self._listeners[event_type].append(listener)

    def remove_listener(self, event_type: str, listener: EventListener) -> None:
        if listener in self._listeners[event_type]:
            self._listeners[event_type].remove(listener)

    def listener_count(self, event_type: str) -> int:
        return len(self._listeners[event_type])

    def dispatch(self, event_type: str, event: PointerEvent) -> None:
        for listener in list(self._listeners[event_type]):
            listener(event)


class PopupDisplay:
    """
    Decides when the selected popup becomes visible.

      page_load   -> immediately
      time_delay  -> after trigger_value seconds (cancellable timer)
      exit_intent -> when the pointer leaves through the top edge
    """

    def __init__(
        self,
        selector: PopupSelector,
        events: ViewportEvents,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
        on_show: Callable[[PromotionalPopupRead], None] | None = None,
    ):
        self.selector = selector
        self.events = events
        self.on_show = on_show
        self._loop = loop

        self.current: PromotionalPopupRead | None = None
        self.is_visible = False

        self._timer: asyncio.TimerHandle | None = None
        self._exit_listener: EventListener | None = None

    @property
    def has_pending(self) -> bool:
        return self._timer is not None or self._exit_listener is not None

    def evaluate(
        self,
        popups: Sequence[PromotionalPopupRead],
        current_path: str,
        now: datetime | None = None,
    ) -> PromotionalPopupRead | None:
        """
        Start a new evaluation cycle for `current_path`.

        Returns the selected popup (shown now or scheduled), or None when
        nothing is eligible, in which case nothing is installed.
        """
        self._teardown()

        if not popups:
            return None

        popup = self.selector.select(popups, current_path, now)
        if popup is None:
            return None

        if popup.trigger == "time_delay":
            loop = self._loop or asyncio.get_running_loop()
            self._timer = loop.call_later(
                max(popup.trigger_value or 0, 0), self._fire_timer, popup
            )
        elif popup.trigger == "exit_intent":
            self._install_exit_intent(popup)
        else:
            self._show(popup)

        return popup

    def close(self) -> None:
        self.is_visible = False
        self.current = None

    def activate(self) -> str | None:
        """
        Handle the popup's call-to-action: close it and return the URL
        the storefront should navigate to, if any.
        """
        url = self.current.button_url if self.current else None
        self.close()
        return url

    def unmount(self) -> None:
        """Release the pending timer/listener; the view is going away."""
        self._teardown()

    # ---- internals ----

    def _install_exit_intent(self, popup: PromotionalPopupRead) -> None:
        def on_mouseleave(event: PointerEvent) -> None:
            if event.client_y > 0:
                return
            self.events.remove_listener(MOUSELEAVE, on_mouseleave)
            self._exit_listener = None
            self._show(popup)

        self._exit_listener = on_mouseleave
        self.events.add_listener(MOUSELEAVE, on_mouseleave)

    def _fire_timer(self, popup: PromotionalPopupRead) -> None:
        self._timer = None
        self._show(popup)

    def _teardown(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._exit_listener is not None:
            self.events.remove_listener(MOUSELEAVE, self._exit_listener)
            self._exit_listener = None

    def _show(self, popup: PromotionalPopupRead) -> None:
        if self.selector.was_shown_this_session(popup.id):
            return

        self.current = popup
        self.is_visible = True
        self.selector.record_shown(popup)
        logger.debug("Showing popup %s (%s)", popup.id, popup.trigger)

        if self.on_show is not None:
            self.on_show(popup)
