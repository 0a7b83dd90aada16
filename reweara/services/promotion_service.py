# reweara/services/promotion_service.py
import logging
import uuid
from datetime import datetime

from fastapi import HTTPException, status
from sqlmodel import Session

from reweara.core.clock import as_utc, utcnow, within_window
from reweara.models.promotion import Banner, PromotionalPopup
from reweara.repositories.promotion_repo import PromotionRepository
from reweara.schemas.promotion import (
    BannerCreate,
    BannerUpdate,
    PromotionalPopupCreate,
    PromotionalPopupUpdate,
)

logger = logging.getLogger(__name__)


class PromotionService:
    """
    Popups and banners.

    The public reads only prefilter on activation flag and schedule; page
    targeting, frequency throttling and trigger handling are decided by the
    storefront client (reweara.storefront.promotions).
    """

    def __init__(self, repo: PromotionRepository):
        self.repo = repo

    # ----- Public -----

    def active_popups(
        self, session: Session, now: datetime | None = None
    ) -> list[PromotionalPopup]:
        now = now or utcnow()
        return [
            p
            for p in self.repo.list_popups(session, only_active=True)
            if within_window(p.start_date, p.end_date, now)
        ]

    def active_banners(
        self, session: Session, now: datetime | None = None
    ) -> list[Banner]:
        now = now or utcnow()
        return [
            b
            for b in self.repo.list_banners(session, only_active=True)
            if within_window(b.start_date, b.end_date, now)
        ]

    # ----- Admin: popups -----

    def list_popups(self, session: Session) -> list[PromotionalPopup]:
        return self.repo.list_popups(session)

    def get_popup(self, session: Session, popup_id: uuid.UUID) -> PromotionalPopup:
        popup = self.repo.get_popup(session, popup_id)
        if not popup:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Promotional popup not found",
            )
        return popup

    def create_popup(
        self, session: Session, payload: PromotionalPopupCreate
    ) -> PromotionalPopup:
        popup = self.repo.save(session, PromotionalPopup(**payload.model_dump()))
        logger.info("Created popup %s (%s)", popup.id, popup.title)
        return popup

    def update_popup(
        self,
        session: Session,
        popup_id: uuid.UUID,
        payload: PromotionalPopupUpdate,
    ) -> PromotionalPopup:
        popup = self.get_popup(session, popup_id)
        for key, value in payload.model_dump(exclude_unset=True).items():
            setattr(popup, key, value)
        self._check_window(popup.start_date, popup.end_date)
        return self.repo.save(session, popup)

    def delete_popup(self, session: Session, popup_id: uuid.UUID) -> None:
        self.repo.delete(session, self.get_popup(session, popup_id))
        logger.info("Deleted popup %s", popup_id)

    # ----- Admin: banners -----

    def list_banners(self, session: Session) -> list[Banner]:
        return self.repo.list_banners(session)

    def get_banner(self, session: Session, banner_id: uuid.UUID) -> Banner:
        banner = self.repo.get_banner(session, banner_id)
        if not banner:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Banner not found",
            )
        return banner

    def create_banner(self, session: Session, payload: BannerCreate) -> Banner:
        banner = self.repo.save(session, Banner(**payload.model_dump()))
        logger.info("Created banner %s", banner.id)
        return banner

    def update_banner(
        self,
        session: Session,
        banner_id: uuid.UUID,
        payload: BannerUpdate,
    ) -> Banner:
        banner = self.get_banner(session, banner_id)
        for key, value in payload.model_dump(exclude_unset=True).items():
            setattr(banner, key, value)
        self._check_window(banner.start_date, banner.end_date)
        return self.repo.save(session, banner)

    def delete_banner(self, session: Session, banner_id: uuid.UUID) -> None:
        self.repo.delete(session, self.get_banner(session, banner_id))
        logger.info("Deleted banner %s", banner_id)

    @staticmethod
    def _check_window(start: datetime | None, end: datetime | None) -> None:
        if start and end and as_utc(end) < as_utc(start):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="end_date must not be before start_date",
            )
