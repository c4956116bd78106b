# order_service/domain/errors.py
"""
Taksonomia bledow serwisu.

Kazdy blad ma stabilny `kind` i czytelny `message`; warstwa HTTP
zamienia go na `{"error": {"kind": ..., "message": ...}}` z `status_code`.
"""


class ServiceError(Exception):
    kind = "InternalError"
    status_code = 500

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"kind": self.kind, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class NotFound(ServiceError):
    kind = "NotFound"
    status_code = 404


class ProductNotFound(NotFound):
    kind = "ProductNotFound"

    def __init__(self, product_id: str):
        super().__init__(f"Product {product_id} not found", product_id=product_id)


class OrderNotFound(NotFound):
    kind = "OrderNotFound"

    def __init__(self, order_id: str):
        super().__init__(f"Order {order_id} not found", order_id=order_id)


class CartItemNotFound(NotFound):
    kind = "CartItemNotFound"

    def __init__(self, product_id: str):
        super().__init__(f"Product {product_id} is not in the cart", product_id=product_id)


class ValidationError(ServiceError):
    kind = "ValidationError"
    status_code = 400


class EmptyCart(ValidationError):
    kind = "EmptyCart"

    def __init__(self):
        super().__init__("Cart is empty")


class InvalidStatusTransition(ValidationError):
    kind = "InvalidStatusTransition"

    def __init__(self, current: str, requested: str):
        super().__init__(
            f"Cannot change order status from {current} to {requested}",
            current=current,
            requested=requested,
        )


class InsufficientStock(ServiceError):
    """Odrzucenie biznesowe, nie awaria systemu."""

    kind = "InsufficientStock"
    status_code = 400

    def __init__(self, product_name: str, **details):
        super().__init__(f"Insufficient stock for {product_name}", product=product_name, **details)
        self.product_name = product_name


class UpstreamUnavailable(ServiceError):
    kind = "UpstreamUnavailable"
    status_code = 503


class CatalogUnavailable(UpstreamUnavailable):
    kind = "CatalogUnavailable"


class Unauthorized(ServiceError):
    kind = "Unauthorized"
    status_code = 401


class ConcurrentModification(ServiceError):
    kind = "ConcurrentModification"
    status_code = 409


class InternalError(ServiceError):
    kind = "InternalError"
    status_code = 500
