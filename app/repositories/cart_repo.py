# app/repositories/cart_repo.py
from sqlalchemy import func
from sqlmodel import Session, col, select

from app.models.cart import CartItem


class CartRepository:

    # Lookups
    def get_item(
        self,
        session: Session,
        user_id: int,
        course_id: int,
        bought: bool | None = None,
    ) -> CartItem | None:
        """Row for (user, course); `bought=None` matches either partition."""
        stmt = select(CartItem).where(
            CartItem.user_id == user_id, CartItem.course_id == course_id
        )
        if bought is not None:
            stmt = stmt.where(CartItem.bought == bought)
        return session.exec(stmt).first()

    def list_for_user(
        self,
        session: Session,
        user_id: int,
        bought: bool,
        limit: int | None = None,
    ) -> list[CartItem]:
        stmt = (
            select(CartItem)
            .where(CartItem.user_id == user_id, CartItem.bought == bought)
            .order_by(col(CartItem.added_at).desc(), col(CartItem.id).desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(session.exec(stmt).all())

    def count_unbought(self, session: Session, user_id: int) -> int:
        stmt = select(func.count()).select_from(CartItem).where(
            CartItem.user_id == user_id, col(CartItem.bought).is_(False)
        )
        return int(session.exec(stmt).one())

    # CRUD
    def create(self, session: Session, item: CartItem) -> CartItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def delete(self, session: Session, item: CartItem) -> None:
        session.delete(item)
        session.commit()

    # Bulk operations over the active (unbought) cart
    def mark_all_bought(self, session: Session, user_id: int) -> int:
        rows = self.list_for_user(session, user_id, bought=False)
        for row in rows:
            row.bought = True
            session.add(row)
        session.commit()
        return len(rows)

    def delete_all_unbought(self, session: Session, user_id: int) -> int:
        rows = self.list_for_user(session, user_id, bought=False)
        for row in rows:
            session.delete(row)
        session.commit()
        return len(rows)
