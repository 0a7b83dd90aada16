# reweara/repositories/order_repo.py
import uuid

from sqlmodel import Session, select

from reweara.models.order import Order, OrderItem


class OrderRepository:
    """
    Orders and their line items.

    Writes only flush: checkout touches orders, products, cart items and
    coupons in one transaction, so OrderService owns the commit.
    """

    @staticmethod
    def _newest_first(stmt, skip: int, limit: int):
        return stmt.order_by(Order.created_at.desc()).offset(skip).limit(limit)

    # ---- Reads ----

    def list_for_owner(
        self,
        session: Session,
        *,
        user_id: uuid.UUID | None = None,
        session_id: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        """
        Orders of a signed-in user, or of a guest session when no user id
        is given. Guest lookups never return orders placed while signed in.
        """
        if user_id is not None:
            stmt = select(Order).where(Order.user_id == user_id)
        else:
            stmt = select(Order).where(Order.session_id == session_id, Order.user_id == None)
        return session.exec(self._newest_first(stmt, skip, limit)).all()

    def list_all(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        status: str | None = None,
    ) -> list[Order]:
        stmt = select(Order)
        if status:
            stmt = stmt.where(Order.status == status)
        return session.exec(self._newest_first(stmt, skip, limit)).all()

    def get_by_id(self, session: Session, order_id: uuid.UUID) -> Order | None:
        return session.get(Order, order_id)

    def list_items_for_order(self, session: Session, order_id: uuid.UUID) -> list[OrderItem]:
        return session.exec(select(OrderItem).where(OrderItem.order_id == order_id)).all()

    # ---- Writes (flush only) ----

    def add_order(self, session: Session, order: Order) -> Order:
        session.add(order)
        session.flush()
        session.refresh(order)
        return order

    def add_items(self, session: Session, items: list[OrderItem]) -> list[OrderItem]:
        session.add_all(items)
        session.flush()
        return items
