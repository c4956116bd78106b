# order_service/domain/status_policy.py
from order_service.domain.errors import InvalidStatusTransition, ValidationError

ORDER_STATUSES = (
    "pending",
    "confirmed",
    "processing",
    "shipped",
    "delivered",
    "cancelled",
    "failed",
)

# failed ustawia tylko saga
SETTABLE_STATUSES = tuple(s for s in ORDER_STATUSES if s != "failed")

_FORWARD = {
    "pending": {"confirmed", "processing", "shipped", "delivered", "cancelled"},
    "confirmed": {"processing", "shipped", "delivered", "cancelled"},
    "processing": {"shipped", "delivered", "cancelled"},
    "shipped": {"delivered"},
    "delivered": set(),
    "cancelled": set(),
    "failed": set(),
}


class OrderStatusPolicy:
    """
    Polityka zmian statusu zamowienia.

    - permissive: dowolny status po dowolnym (zachowanie referencyjne), poza wyjsciem z failed
    - forward_only: tylko do przodu w cyklu realizacji, cancelled przed shipped
    """

    PERMISSIVE = "permissive"
    FORWARD_ONLY = "forward_only"

    def __init__(self, mode: str = PERMISSIVE):
        if mode not in (self.PERMISSIVE, self.FORWARD_ONLY):
            raise ValueError(f"Unknown order status policy: {mode}")
        self.mode = mode

    def check(self, current: str, requested: str) -> None:
        if requested not in SETTABLE_STATUSES:
            raise ValidationError(
                f"Invalid status: {requested}",
                allowed=list(SETTABLE_STATUSES),
            )

        # stock oddany przez kompensacje, z failed nie ma wyjscia
        if current == "failed":
            raise InvalidStatusTransition(current, requested)

        if self.mode == self.PERMISSIVE:
            return

        if requested == current:
            return

        if requested not in _FORWARD.get(current, set()):
            raise InvalidStatusTransition(current, requested)
