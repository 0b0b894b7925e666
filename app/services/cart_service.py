# app/services/cart_service.py
import logging

from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from app.core.errors import AlreadyInCart, AlreadyPurchased
from app.models.cart import CartItem
from app.repositories.cart_repo import CartRepository
from app.schemas.cart import CartItemRead

logger = logging.getLogger(__name__)


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - one row per (user, course), bought or not
      - keep purchased rows (bought=True) immutable through cart edits
      - checkout-commit and abandon-cart as two distinct bulk operations
    """

    def __init__(self, engine: Engine, cart_repo: CartRepository):
        self.engine = engine
        self.cart_repo = cart_repo

    # ---- internal helpers ----

    @staticmethod
    def _conflict_for(existing: CartItem) -> AlreadyPurchased | AlreadyInCart:
        return AlreadyPurchased() if existing.bought else AlreadyInCart()

    # ---- public operations ----

    def add_to_cart(self, user_id: int, course_id: int) -> CartItemRead:
        """
        Put a course in the user's active cart.

        Rules:
          - already bought  => AlreadyPurchased
          - already in cart => AlreadyInCart
        A concurrent add that slips past the lookup is rejected by the
        unique constraint and reported the same way.
        """
        with Session(self.engine) as session:
            existing = self.cart_repo.get_item(session, user_id, course_id)
            if existing:
                raise self._conflict_for(existing)

            try:
                item = self.cart_repo.create(
                    session, CartItem(user_id=user_id, course_id=course_id)
                )
            except IntegrityError:
                session.rollback()
                existing = self.cart_repo.get_item(session, user_id, course_id)
                if existing is None:
                    raise
                raise self._conflict_for(existing)
            result = CartItemRead.model_validate(item)

        logger.info("Course %s added to cart for user %s", course_id, user_id)
        return result

    def remove_from_cart(self, user_id: int, course_id: int) -> bool:
        """
        Delete an unbought row. Purchased rows are left alone.

        Returns whether a row was removed.
        """
        with Session(self.engine) as session:
            item = self.cart_repo.get_item(session, user_id, course_id, bought=False)
            if not item:
                return False
            self.cart_repo.delete(session, item)

        logger.info("Course %s removed from cart for user %s", course_id, user_id)
        return True

    def get_items(self, user_id: int, bought: bool) -> list[CartItemRead]:
        """Active cart (bought=False) or purchase history (bought=True), newest first."""
        with Session(self.engine) as session:
            rows = self.cart_repo.list_for_user(session, user_id, bought)
            return [CartItemRead.model_validate(r) for r in rows]

    def get_recently_added(self, user_id: int, limit: int = 5) -> list[CartItemRead]:
        with Session(self.engine) as session:
            rows = self.cart_repo.list_for_user(session, user_id, bought=False, limit=limit)
            return [CartItemRead.model_validate(r) for r in rows]

    def checkout(self, user_id: int) -> bool:
        """
        Checkout-commit: every unbought row of the user becomes bought.

        Returns whether any row changed.
        """
        with Session(self.engine) as session:
            changed = self.cart_repo.mark_all_bought(session, user_id)

        if changed:
            logger.info("Checkout committed %s item(s) for user %s", changed, user_id)
        return changed > 0

    def abandon_cart(self, user_id: int) -> bool:
        """
        Drop every unbought row of the user. Purchase history is untouched.

        Returns whether any row was deleted.
        """
        with Session(self.engine) as session:
            removed = self.cart_repo.delete_all_unbought(session, user_id)

        if removed:
            logger.info("Cart cleared (%s item(s)) for user %s", removed, user_id)
        return removed > 0

    def clear_cart(self, user_id: int, bought: bool) -> bool:
        """Entry point for `DELETE /cart/clear?bought=`; see checkout / abandon_cart."""
        if bought:
            return self.checkout(user_id)
        return self.abandon_cart(user_id)

    def get_cart_item_count(self, user_id: int) -> int:
        """Number of rows in the active cart (purchase history excluded)."""
        with Session(self.engine) as session:
            return self.cart_repo.count_unbought(session, user_id)

    def is_in_cart(self, user_id: int, course_id: int) -> bool:
        with Session(self.engine) as session:
            return self.cart_repo.get_item(session, user_id, course_id, bought=False) is not None

    def get_cart_item(self, user_id: int, course_id: int) -> CartItemRead | None:
        with Session(self.engine) as session:
            item = self.cart_repo.get_item(session, user_id, course_id, bought=False)
            return CartItemRead.model_validate(item) if item else None
