# reweara/repositories/promotion_repo.py
import uuid

from sqlmodel import Session, select

from reweara.models.promotion import Banner, PromotionalPopup


class PromotionRepository:
    """
    Data access layer for promotional popups and banners.
    Time-window checks happen in the service; SQLite loses tzinfo.
    """

    # ----- Popups -----

    def list_popups(self, session: Session, only_active: bool = False) -> list[PromotionalPopup]:
        stmt = select(PromotionalPopup)
        if only_active:
            stmt = stmt.where(PromotionalPopup.is_active == True)
        stmt = stmt.order_by(PromotionalPopup.priority.desc(), PromotionalPopup.created_at)
        return session.exec(stmt).all()

    def get_popup(self, session: Session, popup_id: uuid.UUID) -> PromotionalPopup | None:
        return session.get(PromotionalPopup, popup_id)

    # ----- Banners -----

    def list_banners(self, session: Session, only_active: bool = False) -> list[Banner]:
        stmt = select(Banner)
        if only_active:
            stmt = stmt.where(Banner.is_active == True)
        stmt = stmt.order_by(Banner.sort_order.desc(), Banner.created_at.desc())
        return session.exec(stmt).all()

    def get_banner(self, session: Session, banner_id: uuid.UUID) -> Banner | None:
        return session.get(Banner, banner_id)

    # ----- Shared -----

    def save(self, session: Session, row: PromotionalPopup | Banner):
        session.add(row)
        session.commit()
        session.refresh(row)
        return row

    def delete(self, session: Session, row: PromotionalPopup | Banner) -> None:
        session.delete(row)
        session.commit()
