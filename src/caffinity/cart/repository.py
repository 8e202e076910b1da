"""Repository for the Cart aggregate."""

from caffinity.cart.cart import Cart
from caffinity.domain import caffinity


@caffinity.repository(part_of=Cart)
class CartRepository:
    def find_by_user(self, user_id) -> Cart | None:
        carts = self._dao.query.filter(user_id=str(user_id)).all().items
        return carts[0] if carts else None

    def find_guest_cart(self, session_id: str) -> Cart | None:
        """The session's cart, as long as no user has claimed it yet."""
        carts = self._dao.query.filter(session_id=session_id).all().items
        guest_carts = [cart for cart in carts if not cart.user_id]
        return guest_carts[0] if guest_carts else None
