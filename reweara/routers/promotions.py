# reweara/routers/promotions.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from reweara.core.auth import require_admin
from reweara.database import get_session
from reweara.repositories.promotion_repo import PromotionRepository
from reweara.schemas.promotion import (
    BannerCreate,
    BannerRead,
    BannerUpdate,
    PromotionalPopupCreate,
    PromotionalPopupRead,
    PromotionalPopupUpdate,
)
from reweara.services.promotion_service import PromotionService

router = APIRouter(tags=["Promotions"])

repo = PromotionRepository()
service = PromotionService(repo)


# -------- Public endpoints --------


@router.get("/promotional-popups/active", response_model=list[PromotionalPopupRead])
def list_active_popups(session: Session = Depends(get_session)):
    """
    Active popups inside their schedule. Page targeting and frequency
    throttling are applied by the storefront.
    """
    return service.active_popups(session)


@router.get("/banners", response_model=list[BannerRead])
def list_active_banners(session: Session = Depends(get_session)):
    return service.active_banners(session)


# -------- Admin: popups --------


@router.get(
    "/admin/promotional-popups",
    response_model=list[PromotionalPopupRead],
    dependencies=[Depends(require_admin)],
)
def list_popups(session: Session = Depends(get_session)):
    return service.list_popups(session)


@router.get(
    "/admin/promotional-popups/{popup_id}",
    response_model=PromotionalPopupRead,
    dependencies=[Depends(require_admin)],
)
def get_popup(popup_id: uuid.UUID, session: Session = Depends(get_session)):
    return service.get_popup(session, popup_id)


@router.post(
    "/admin/promotional-popups",
    response_model=PromotionalPopupRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_popup(
    payload: PromotionalPopupCreate,
    session: Session = Depends(get_session),
):
    return service.create_popup(session, payload)


@router.patch(
    "/admin/promotional-popups/{popup_id}",
    response_model=PromotionalPopupRead,
    dependencies=[Depends(require_admin)],
)
def update_popup(
    popup_id: uuid.UUID,
    payload: PromotionalPopupUpdate,
    session: Session = Depends(get_session),
):
    return service.update_popup(session, popup_id, payload)


@router.delete(
    "/admin/promotional-popups/{popup_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_popup(popup_id: uuid.UUID, session: Session = Depends(get_session)):
    service.delete_popup(session, popup_id)


# -------- Admin: banners --------


@router.get(
    "/admin/banners",
    response_model=list[BannerRead],
    dependencies=[Depends(require_admin)],
)
def list_banners(session: Session = Depends(get_session)):
    return service.list_banners(session)


@router.get(
    "/admin/banners/{banner_id}",
    response_model=BannerRead,
    dependencies=[Depends(require_admin)],
)
def get_banner(banner_id: uuid.UUID, session: Session = Depends(get_session)):
    return service.get_banner(session, banner_id)


@router.post(
    "/admin/banners",
    response_model=BannerRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_banner(payload: BannerCreate, session: Session = Depends(get_session)):
    return service.create_banner(session, payload)


@router.patch(
    "/admin/banners/{banner_id}",
    response_model=BannerRead,
    dependencies=[Depends(require_admin)],
)
def update_banner(
    banner_id: uuid.UUID,
    payload: BannerUpdate,
    session: Session = Depends(get_session),
):
    return service.update_banner(session, banner_id, payload)


@router.delete(
    "/admin/banners/{banner_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_banner(banner_id: uuid.UUID, session: Session = Depends(get_session)):
    service.delete_banner(session, banner_id)
