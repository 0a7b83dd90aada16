# reweara/routers/coupons.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from reweara.core.auth import require_admin
from reweara.database import get_session
from reweara.repositories.coupon_repo import CouponRepository
from reweara.schemas.coupon import (
    CouponCreate,
    CouponRead,
    CouponUpdate,
    CouponValidateRequest,
    CouponValidation,
)
from reweara.services.coupon_service import CouponService

router = APIRouter(tags=["Coupons"])

repo = CouponRepository()
service = CouponService(repo)


@router.post("/coupons/validate", response_model=CouponValidation)
def validate_coupon(
    payload: CouponValidateRequest,
    session: Session = Depends(get_session),
):
    """
    Check a code against a cart subtotal and report the discount it grants.
    Does not consume the coupon.
    """
    return service.validate(session, payload.code, payload.subtotal)


# -------- Admin endpoints --------


@router.get(
    "/admin/coupons",
    response_model=list[CouponRead],
    dependencies=[Depends(require_admin)],
)
def list_coupons(session: Session = Depends(get_session)):
    return service.list_coupons(session)


@router.post(
    "/admin/coupons",
    response_model=CouponRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_coupon(payload: CouponCreate, session: Session = Depends(get_session)):
    return service.create_coupon(session, payload)


@router.patch(
    "/admin/coupons/{coupon_id}",
    response_model=CouponRead,
    dependencies=[Depends(require_admin)],
)
def update_coupon(
    coupon_id: uuid.UUID,
    payload: CouponUpdate,
    session: Session = Depends(get_session),
):
    return service.update_coupon(session, coupon_id, payload)


@router.delete(
    "/admin/coupons/{coupon_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_coupon(coupon_id: uuid.UUID, session: Session = Depends(get_session)):
    service.delete_coupon(session, coupon_id)
