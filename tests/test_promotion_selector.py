"""
Tests for popup eligibility and the storage-backed PopupSelector.
"""
import uuid
from datetime import datetime, timedelta, timezone

import pytest

from reweara.schemas.promotion import PromotionalPopupRead
from reweara.storefront.local_storage import MemoryStorage
from reweara.storefront.promotions import (
    PopupSelector,
    frequency_allows,
    popup_key,
    select_popup,
    targets_page,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def popup(**overrides) -> PromotionalPopupRead:
    data = {
        "id": uuid.uuid4(),
        "title": "Spring sale",
        "background_color": "#ffffff",
        "text_color": "#000000",
        "button_color": "#10b981",
        "position": "center",
        "size": "medium",
        "trigger": "page_load",
        "show_frequency": "always",
        "target_pages": [],
        "is_active": True,
        "priority": 0,
    }
    data.update(overrides)
    return PromotionalPopupRead(**data)


def pick(candidates, path="/", last_shown=None, session_shown=(), now=NOW):
    return select_popup(
        candidates,
        current_path=path,
        now=now,
        last_shown=last_shown or {},
        session_shown=session_shown,
    )


class TestSelectPopup:

    def test_wildcard_with_higher_priority_wins(self):
        a = popup(target_pages=["/"], priority=1)
        b = popup(target_pages=["*"], priority=5)

        assert pick([a, b], path="/") == b

    def test_higher_priority_wins(self):
        low = popup(priority=5)
        high = popup(priority=10)

        assert pick([low, high]) == high

    def test_ties_keep_fetch_order(self):
        first = popup(priority=3)
        second = popup(priority=3)

        assert pick([first, second]) == first
        assert pick([second, first]) == second

    def test_inactive_never_selected(self):
        inactive = popup(is_active=False, priority=100)

        assert pick([inactive]) is None
        assert pick([inactive, popup(priority=1)]).is_active

    def test_empty_candidates(self):
        assert pick([]) is None

    @pytest.mark.parametrize(
        "start, end, eligible",
        [
            (NOW + timedelta(minutes=1), None, False),
            (None, NOW - timedelta(minutes=1), False),
            (NOW - timedelta(days=1), NOW + timedelta(days=1), True),
            (None, None, True),
        ],
    )
    def test_time_window(self, start, end, eligible):
        candidate = popup(start_date=start, end_date=end)
        assert (pick([candidate]) is not None) is eligible

    def test_naive_window_treated_as_utc(self):
        candidate = popup(end_date=datetime(2026, 3, 1, 11, 0))
        assert pick([candidate]) is None

    def test_page_targeting(self):
        shop_only = popup(target_pages=["/shop"])

        assert pick([shop_only], path="/shop") == shop_only
        assert pick([shop_only], path="/") is None

    def test_session_shown_filtered_even_if_always(self):
        candidate = popup(show_frequency="always")
        assert pick([candidate], session_shown={str(candidate.id)}) is None

    def test_once_never_again(self):
        candidate = popup(show_frequency="once")
        shown = {str(candidate.id): NOW - timedelta(days=365)}

        assert pick([candidate], last_shown=shown) is None
        assert pick([candidate]) == candidate

    @pytest.mark.parametrize("hours_ago, eligible", [(23, False), (25, True)])
    def test_daily(self, hours_ago, eligible):
        candidate = popup(show_frequency="daily")
        shown = {str(candidate.id): NOW - timedelta(hours=hours_ago)}

        assert (pick([candidate], last_shown=shown) is not None) is eligible

    @pytest.mark.parametrize("days_ago, eligible", [(6, False), (7, True), (8, True)])
    def test_weekly(self, days_ago, eligible):
        candidate = popup(show_frequency="weekly")
        shown = {str(candidate.id): NOW - timedelta(days=days_ago)}

        assert (pick([candidate], last_shown=shown) is not None) is eligible

    def test_always_ignores_last_shown(self):
        candidate = popup(show_frequency="always")
        shown = {str(candidate.id): NOW - timedelta(seconds=1)}

        assert pick([candidate], last_shown=shown) == candidate

    def test_throttled_high_priority_falls_back(self):
        high = popup(priority=10, show_frequency="once")
        low = popup(priority=1)

        assert pick([high, low], last_shown={str(high.id): NOW}) == low


class TestHelpers:

    def test_targets_page(self):
        assert targets_page([], "/anything")
        assert targets_page(None, "/anything")
        assert targets_page(["*"], "/cart")
        assert targets_page(["/", "/cart"], "/cart")
        assert not targets_page(["/"], "/cart")

    def test_unknown_frequency_behaves_like_always(self):
        assert frequency_allows("hourly", NOW, NOW)

    def test_never_shown_is_allowed(self):
        assert frequency_allows("once", None, NOW)


class TestPopupSelector:

    def test_record_shown_writes_storage_and_session(self):
        storage = MemoryStorage()
        selector = PopupSelector(storage)
        candidate = popup(show_frequency="daily")

        selector.record_shown(candidate, NOW)

        assert selector.was_shown_this_session(candidate.id)
        assert storage.get_item(popup_key(candidate.id)) == NOW.isoformat()
        assert selector.last_shown(candidate.id) == NOW

    def test_select_uses_persisted_timestamps(self):
        candidate = popup(show_frequency="daily")
        storage = MemoryStorage(
            {popup_key(candidate.id): (NOW - timedelta(hours=23)).isoformat()}
        )

        assert PopupSelector(storage).select([candidate], "/", NOW) is None
        assert PopupSelector(storage).select([candidate], "/", NOW + timedelta(hours=2)) == candidate

    def test_throttling_survives_new_session(self):
        """A fresh selector over the same storage models a new app load."""
        storage = MemoryStorage()
        candidate = popup(show_frequency="once")

        PopupSelector(storage).record_shown(candidate, NOW)

        assert PopupSelector(storage).select([candidate], "/", NOW + timedelta(days=30)) is None

    def test_session_set_resets_per_selector(self):
        storage = MemoryStorage()
        candidate = popup(show_frequency="always")

        first = PopupSelector(storage)
        first.record_shown(candidate, NOW)
        assert first.select([candidate], "/", NOW) is None

        assert PopupSelector(storage).select([candidate], "/", NOW) == candidate

    def test_unparseable_timestamp_still_counts_as_shown(self):
        candidate = popup(show_frequency="once")
        storage = MemoryStorage({popup_key(candidate.id): "yesterday-ish"})

        assert PopupSelector(storage).select([candidate], "/", NOW) is None

    def test_zulu_timestamp_from_browser_storage(self):
        candidate = popup(show_frequency="daily")
        storage = MemoryStorage({popup_key(candidate.id): "2026-03-01T11:00:00.000Z"})
        selector = PopupSelector(storage)

        assert selector.last_shown(candidate.id) == NOW - timedelta(hours=1)
        assert selector.select([candidate], "/", NOW) is None
        assert selector.select([candidate], "/", NOW + timedelta(hours=24)) == candidate
