"""Cart resolution — find the cart for a user or session, merging a guest cart on sign-in.

A user ends up with at most one cart. When a user signs in with a guest cart
on the same browser session:

- no user cart yet: the guest cart is claimed by the user
- user cart exists: guest lines are merged into it and the guest cart is deleted
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from caffinity.cart.cart import Cart
from caffinity.domain import caffinity, logger
from caffinity.identity.user import User


def get_or_create_cart(user_id=None, session_id=None, create=True):
    """Return the cart to use for this user and/or session.

    Returns None only when `create` is False and no cart exists.
    Raises ObjectNotFoundError for an unknown user, before any cart is touched.
    """
    if not user_id and not session_id:
        raise ValidationError({"cart": ["A user id or a session id is required"]})

    repo = current_domain.repository_for(Cart)

    if not user_id:
        cart = repo.find_guest_cart(session_id)
        if cart is None and create:
            cart = Cart.create(session_id=session_id)
            repo.add(cart)
            logger.info("Guest cart created", cart_id=str(cart.id), session_id=session_id)
        return cart

    # User must exist before a cart is created or claimed for it
    current_domain.repository_for(User).get(user_id)

    user_cart = repo.find_by_user(user_id)
    guest_cart = repo.find_guest_cart(session_id) if session_id else None

    if guest_cart is not None:
        if user_cart is None:
            guest_cart.claim(user_id)
            repo.add(guest_cart)
            logger.info("Guest cart claimed", cart_id=str(guest_cart.id), user_id=str(user_id))
            return guest_cart

        user_cart.merge(guest_cart)
        repo.add(user_cart)
        repo._dao.delete(guest_cart)
        logger.info(
            "Guest cart merged",
            cart_id=str(user_cart.id),
            source_cart_id=str(guest_cart.id),
            user_id=str(user_id),
        )
        return user_cart

    if user_cart is None and create:
        user_cart = Cart.create(user_id=user_id, session_id=session_id)
        repo.add(user_cart)
        logger.info("User cart created", cart_id=str(user_cart.id), user_id=str(user_id))
    return user_cart


@caffinity.command(part_of="Cart")
class ResolveCart:
    """Settle which cart a user or session uses. Issued after sign-in."""

    user_id = Identifier()
    session_id = String(max_length=255)


@caffinity.command_handler(part_of=Cart)
class ResolveCartHandler:
    @handle(ResolveCart)
    def resolve_cart(self, command):
        cart = get_or_create_cart(user_id=command.user_id, session_id=command.session_id)
        return str(cart.id)
