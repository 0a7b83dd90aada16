import json
import uuid
from datetime import datetime, timedelta, timezone

from reweara.schemas.promotion import BannerRead
from reweara.storefront.local_storage import MemoryStorage
from reweara.storefront.promotions import DISMISSED_BANNERS_KEY, BannerSelector, select_banner

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def banner(**overrides) -> BannerRead:
    data = {
        "id": uuid.uuid4(),
        "title": "Free shipping over 500",
        "image_url": "https://cdn.reweara.test/banner.jpg",
        "position": "hero",
        "sort_order": 0,
        "is_active": True,
    }
    data.update(overrides)
    return BannerRead(**data)


class TestSelectBanner:

    def test_highest_sort_order_wins(self):
        low, high = banner(sort_order=1), banner(sort_order=9)
        assert select_banner([low, high], now=NOW) == high

    def test_inactive_and_expired_skipped(self):
        candidates = [
            banner(is_active=False, sort_order=10),
            banner(end_date=NOW - timedelta(hours=1), sort_order=9),
            banner(start_date=NOW + timedelta(hours=1), sort_order=8),
        ]
        assert select_banner(candidates, now=NOW) is None

    def test_dismissed_skipped(self):
        first, second = banner(sort_order=5), banner(sort_order=1)
        assert select_banner([first, second], now=NOW, dismissed=[str(first.id)]) == second


class TestBannerSelector:

    def test_dismiss_persists(self):
        storage = MemoryStorage()
        candidate = banner()

        selector = BannerSelector(storage)
        assert selector.select([candidate], NOW) == candidate

        selector.dismiss(candidate.id)
        assert selector.select([candidate], NOW) is None
        assert json.loads(storage.get_item(DISMISSED_BANNERS_KEY)) == [str(candidate.id)]

        # A new app load still remembers the dismissal
        assert BannerSelector(storage).select([candidate], NOW) is None

    def test_dismiss_twice_stores_once(self):
        storage = MemoryStorage()
        selector = BannerSelector(storage)
        banner_id = uuid.uuid4()

        selector.dismiss(banner_id)
        selector.dismiss(banner_id)

        assert selector.dismissed == [str(banner_id)]

    def test_corrupt_storage_reads_as_empty(self):
        for raw in ("{not json", '{"a": 1}', ""):
            selector = BannerSelector(MemoryStorage({DISMISSED_BANNERS_KEY: raw}))
            assert selector.dismissed == []
