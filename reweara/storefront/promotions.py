# reweara/storefront/promotions.py
"""
Promotional content selection.

`select_popup` decides, for one page view, which popup (if any) is eligible:

  1. inactive popups are dropped
  2. popups outside their start/end window are dropped
  3. popups targeting other pages are dropped ("*" or an empty list
     targets every page)
  4. popups already shown in this app session are dropped
  5. popups shown more recently than their frequency allows are dropped
     (once: ever, daily: < 24h, weekly: < 7 days, always: never)
  6. the highest priority survivor wins, ties keep fetch order

Banners follow the same activation/schedule rules but are throttled by
explicit dismissal instead of frequency, and ranked by sort_order.
"""
import json
import logging
from datetime import datetime, timedelta
from typing import Collection, Iterable, Mapping, Sequence

from reweara.core.clock import as_utc, utcnow, within_window
from reweara.schemas.promotion import BannerRead, PromotionalPopupRead
from reweara.storefront.local_storage import LocalStorage

logger = logging.getLogger(__name__)

WILDCARD = "*"
POPUP_KEY_PREFIX = "popup_"
DISMISSED_BANNERS_KEY = "dismissedBanners"

# Minimum gap between two displays; None means never again
FREQUENCY_INTERVALS: dict[str, timedelta | None] = {
    "once": None,
    "daily": timedelta(days=1),
    "weekly": timedelta(days=7),
}


def popup_key(popup_id: object) -> str:
    return f"{POPUP_KEY_PREFIX}{popup_id}"


def targets_page(target_pages: Sequence[str] | None, current_path: str) -> bool:
    if not target_pages:
        return True
    return current_path in target_pages or WILDCARD in target_pages


def frequency_allows(
    show_frequency: str,
    last_shown: datetime | None,
    now: datetime,
) -> bool:
    """
    Whether a popup last displayed at `last_shown` may be displayed at `now`.
    Unknown policies behave like "always".
    """
    if last_shown is None or show_frequency not in FREQUENCY_INTERVALS:
        return True
    interval = FREQUENCY_INTERVALS[show_frequency]
    if interval is None:
        return False
    return as_utc(now) - as_utc(last_shown) >= interval


def select_popup(
    candidates: Iterable[PromotionalPopupRead],
    *,
    current_path: str,
    now: datetime,
    last_shown: Mapping[str, datetime],
    session_shown: Collection[str] = (),
) -> PromotionalPopupRead | None:
    """
    Pick the popup to display on `current_path`, or None.

    `last_shown` and `session_shown` are keyed by str(popup.id).
    Pure: reads nothing besides its arguments.
    """
    eligible: list[PromotionalPopupRead] = []

    for popup in candidates:
        popup_id = str(popup.id)
        if not popup.is_active:
            continue
        if not within_window(popup.start_date, popup.end_date, now):
            continue
        if not targets_page(popup.target_pages, current_path):
            continue
        if popup_id in session_shown:
            continue
        if not frequency_allows(popup.show_frequency, last_shown.get(popup_id), now):
            continue
        eligible.append(popup)

    if not eligible:
        return None

    # sorted() is stable, so equal priorities keep fetch order
    return sorted(eligible, key=lambda p: p.priority or 0, reverse=True)[0]


def select_banner(
    banners: Iterable[BannerRead],
    *,
    now: datetime,
    dismissed: Collection[str] = (),
) -> BannerRead | None:
    """
    Pick the banner for the announcement bar, or None.
    Banners show on every page; highest sort_order wins.
    """
    eligible = [
        b
        for b in banners
        if b.is_active
        and str(b.id) not in dismissed
        and within_window(b.start_date, b.end_date, now)
    ]
    if not eligible:
        return None
    return sorted(eligible, key=lambda b: b.sort_order or 0, reverse=True)[0]


class PopupSelector:
    """
    Stateful wrapper around select_popup.

    Holds the per-app-load "shown" set and reads/writes last-shown
    timestamps in client-local storage under popup_<id>.
    """

    def __init__(self, storage: LocalStorage):
        self.storage = storage
        self.session_shown: set[str] = set()

    def last_shown(self, popup_id: object) -> datetime | None:
        raw = self.storage.get_item(popup_key(popup_id))
        if raw is None:
            return None
        # JavaScript's toISOString() ends in "Z", which fromisoformat rejects before 3.11
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(raw)
        except ValueError:
            # Presence alone still counts as "shown" for the once policy
            logger.warning("Unparseable last-shown value for popup %s: %r", popup_id, raw)
            return datetime.min

    def select(
        self,
        popups: Sequence[PromotionalPopupRead],
        current_path: str,
        now: datetime | None = None,
    ) -> PromotionalPopupRead | None:
        now = now or utcnow()
        last_shown = {}
        for popup in popups:
            shown_at = self.last_shown(popup.id)
            if shown_at is not None:
                last_shown[str(popup.id)] = shown_at

        chosen = select_popup(
            popups,
            current_path=current_path,
            now=now,
            last_shown=last_shown,
            session_shown=self.session_shown,
        )
        logger.debug(
            "popup selection on %s: %s",
            current_path,
            chosen.id if chosen else None,
        )
        return chosen

    def was_shown_this_session(self, popup_id: object) -> bool:
        return str(popup_id) in self.session_shown

    def record_shown(self, popup: PromotionalPopupRead, now: datetime | None = None) -> None:
        now = as_utc(now or utcnow())
        self.session_shown.add(str(popup.id))
        self.storage.set_item(popup_key(popup.id), now.isoformat())


class BannerSelector:
    """
    Dismissal-aware banner picker. The dismissed id list is persisted as
    JSON under `dismissedBanners`; a corrupt value reads as empty.
    """

    def __init__(self, storage: LocalStorage):
        self.storage = storage
        self.dismissed: list[str] = self._load()

    def _load(self) -> list[str]:
        raw = self.storage.get_item(DISMISSED_BANNERS_KEY)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            return []
        if not isinstance(data, list):
            return []
        return [str(x) for x in data]

    def select(
        self,
        banners: Sequence[BannerRead],
        now: datetime | None = None,
    ) -> BannerRead | None:
        return select_banner(banners, now=now or utcnow(), dismissed=self.dismissed)

    def dismiss(self, banner_id: object) -> None:
        banner_id = str(banner_id)
        if banner_id not in self.dismissed:
            self.dismissed.append(banner_id)
        self.storage.set_item(DISMISSED_BANNERS_KEY, json.dumps(self.dismissed))
