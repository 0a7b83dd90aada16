# reweara/services/coupon_service.py
import logging
import uuid
from datetime import datetime

from fastapi import HTTPException, status
from sqlmodel import Session

from reweara.core.clock import utcnow, within_window
from reweara.models.coupon import Coupon
from reweara.repositories.coupon_repo import CouponRepository
from reweara.schemas.coupon import (
    CouponCreate,
    CouponUpdate,
    CouponValidation,
)

logger = logging.getLogger(__name__)


def compute_discount(coupon: Coupon, subtotal: float) -> float:
    """
    Discount a coupon grants on `subtotal`.

      - percentage: subtotal * value / 100, capped by max_discount_amount
      - fixed:      value
    Never exceeds the subtotal itself.
    """
    if coupon.discount_type == "percentage":
        discount = subtotal * coupon.discount_value / 100
        if coupon.max_discount_amount is not None:
            discount = min(discount, coupon.max_discount_amount)
    else:
        discount = coupon.discount_value
    return round(min(discount, subtotal), 2)


class CouponService:
    """
    Coupon redemption rules + admin CRUD.
    """

    def __init__(self, repo: CouponRepository):
        self.repo = repo

    def _reject(self, reason: str) -> HTTPException:
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=reason)

    def resolve(
        self,
        session: Session,
        code: str,
        subtotal: float,
        now: datetime | None = None,
    ) -> tuple[Coupon, float]:
        """
        Look up a coupon and check it can be redeemed against `subtotal`.

        Returns:
            (coupon, discount_amount)

        Raises:
            HTTPException(404): unknown code
            HTTPException(400): inactive, outside its window, exhausted,
                                or minimum purchase not met
        """
        coupon = self.repo.get_by_code(session, code)
        if coupon is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Coupon not found",
            )

        now = now or utcnow()

        if not coupon.is_active:
            raise self._reject("Coupon is not active")
        if not within_window(coupon.start_date, coupon.end_date, now):
            raise self._reject("Coupon is expired or not yet valid")
        if coupon.usage_limit is not None and coupon.usage_count >= coupon.usage_limit:
            raise self._reject("Coupon usage limit reached")
        if coupon.min_purchase_amount is not None and subtotal < coupon.min_purchase_amount:
            raise self._reject(
                f"Minimum purchase of {coupon.min_purchase_amount:.2f} required"
            )

        return coupon, compute_discount(coupon, subtotal)

    def validate(self, session: Session, code: str, subtotal: float) -> CouponValidation:
        coupon, discount = self.resolve(session, code, subtotal)
        return CouponValidation(
            code=coupon.code,
            discount_type=coupon.discount_type,
            discount_amount=discount,
        )

    # ---- Admin ----

    def list_coupons(self, session: Session) -> list[Coupon]:
        return self.repo.list_all(session)

    def get_coupon(self, session: Session, coupon_id: uuid.UUID) -> Coupon:
        coupon = self.repo.get_by_id(session, coupon_id)
        if not coupon:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Coupon not found",
            )
        return coupon

    def create_coupon(self, session: Session, payload: CouponCreate) -> Coupon:
        if self.repo.get_by_code(session, payload.code) is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Coupon code already exists",
            )
        coupon = self.repo.save(session, Coupon(**payload.model_dump()))
        logger.info("Created coupon %s", coupon.code)
        return coupon

    def update_coupon(
        self, session: Session, coupon_id: uuid.UUID, payload: CouponUpdate
    ) -> Coupon:
        coupon = self.get_coupon(session, coupon_id)
        for key, value in payload.model_dump(exclude_unset=True).items():
            setattr(coupon, key, value)
        return self.repo.save(session, coupon)

    def delete_coupon(self, session: Session, coupon_id: uuid.UUID) -> None:
        coupon = self.get_coupon(session, coupon_id)
        self.repo.delete(session, coupon)
        logger.info("Deleted coupon %s", coupon.code)
