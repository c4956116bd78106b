import pytest

from order_service.domain.errors import InvalidStatusTransition, ValidationError
from order_service.domain.status_policy import OrderStatusPolicy


def test_unknown_mode():
    with pytest.raises(ValueError):
        OrderStatusPolicy("strict")


@pytest.mark.parametrize("mode", ["permissive", "forward_only"])
def test_failed_is_never_settable(mode):
    with pytest.raises(ValidationError):
        OrderStatusPolicy(mode).check("confirmed", "failed")


@pytest.mark.parametrize(
    "current, requested",
    [("delivered", "pending"), ("cancelled", "confirmed"), ("confirmed", "pending")],
)
def test_permissive_allows_anything(current, requested):
    OrderStatusPolicy("permissive").check(current, requested)


@pytest.mark.parametrize(
    "current, requested",
    [
        ("pending", "confirmed"),
        ("confirmed", "processing"),
        ("processing", "shipped"),
        ("shipped", "delivered"),
        ("confirmed", "cancelled"),
        ("shipped", "shipped"),
    ],
)
def test_forward_only_allows_advances(current, requested):
    OrderStatusPolicy("forward_only").check(current, requested)


@pytest.mark.parametrize(
    "current, requested",
    [
        ("delivered", "pending"),
        ("shipped", "cancelled"),
        ("cancelled", "processing"),
        ("failed", "confirmed"),
    ],
)
def test_forward_only_rejects(current, requested):
    with pytest.raises(InvalidStatusTransition):
        OrderStatusPolicy("forward_only").check(current, requested)


@pytest.mark.parametrize("mode", ["permissive", "forward_only"])
@pytest.mark.parametrize("requested", ["pending", "confirmed", "delivered", "cancelled"])
def test_failed_is_terminal(mode, requested):
    with pytest.raises(InvalidStatusTransition):
        OrderStatusPolicy(mode).check("failed", requested)
