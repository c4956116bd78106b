from decimal import Decimal
from typing import Dict, Any, List, Tuple

from sqlalchemy.orm import Session

from order_service.data.models.cart_item import CartItemModel
from order_service.domain.errors import (
    CartItemNotFound,
    ServiceError,
    ValidationError,
)
from order_service.repos.cart_repo import CartRepo
from order_service.services.product_client import ProductClient
from order_service.services.lock_service import LockService
from order_service.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Cart Store - use case dla domeny cart
    commands (add, update, remove, clear) modyfikuja stan pod lockiem usera
    query (get) tylko odczyt
    """

    def __init__(
        self,
        db: Session,
        product_client: ProductClient,
        lock_service: LockService,
    ):
        self.repo = CartRepo(db)
        self.product_client = product_client
        self.lock_service = lock_service

    #query - odczyt
    def get_lines(self, user_id: str) -> List[Tuple[str, int]]:
        """Linie koszyka jako (product_id, quantity); pusta lista gdy brak koszyka."""
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            return []
        return [(i.product_id, i.quantity) for i in cart.items]

    def get_cart(self, user_id: str) -> Dict[str, Any]:
        """
        Widok koszyka wzbogacony o nazwe/cene/obrazek z katalogu.
        Produkty, ktorych nie da sie pobrac, sa pomijane.
        """
        items = []
        total = Decimal("0.00")

        for product_id, quantity in self.get_lines(user_id):
            try:
                product = self.product_client.get_product(product_id)
            except ServiceError as e:
                logger.warning(f"Pomijam produkt {product_id} w koszyku usera {user_id}: {e}")
                continue

            subtotal = product.price * quantity
            items.append(
                {
                    "product_id": product_id,
                    "name": product.name,
                    "price": product.price,
                    "quantity": quantity,
                    "image": product.image,
                    "subtotal": subtotal,
                }
            )
            total += subtotal

        return {"items": items, "total": total}

    #commands
    def add_item(self, user_id: str, product_id: str, quantity: int = 1) -> Dict[str, Any]:
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than 0")

        # produkt musi istniec w katalogu (ProductNotFound / CatalogUnavailable)
        logger.info(f"Sprawdzam produkt {product_id} w product-service")
        self.product_client.get_product(product_id)

        with self.lock_service.user_lock(user_id):
            try:
                cart = self.repo.get_or_create_cart(user_id)
                existing_item = self.repo.get_cart_item(cart.id, product_id)

                if existing_item:
                    logger.info(
                        f"Produkt {product_id} juz jest w koszyku, zwiekszam ilosc "
                        f"z {existing_item.quantity} do {existing_item.quantity + quantity}"
                    )
                    existing_item.quantity += quantity
                else:
                    logger.info(f"Dodaje nowy produkt {product_id} do koszyka usera {user_id}")
                    self.repo.add_cart_item(
                        CartItemModel(
                            cart_id=cart.id,
                            product_id=product_id,
                            quantity=quantity,
                        )
                    )

                self.repo.touch(cart)
                self.repo.commit()
            except Exception:
                self.repo.rollback()
                raise

        return self.get_cart(user_id)

    def update_item(self, user_id: str, product_id: str, quantity: int) -> Dict[str, Any]:
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than 0")

        with self.lock_service.user_lock(user_id):
            cart = self.repo.get_cart_by_user(user_id)
            item = self.repo.get_cart_item(cart.id, product_id) if cart else None
            if not item:
                raise CartItemNotFound(product_id)

            item.quantity = quantity
            self.repo.touch(cart)
            self.repo.commit()

        logger.info(f"Ilosc produktu {product_id} w koszyku usera {user_id} = {quantity}")
        return self.get_cart(user_id)

    def remove_item(self, user_id: str, product_id: str) -> Dict[str, Any]:
        with self.lock_service.user_lock(user_id):
            cart = self.repo.get_cart_by_user(user_id)
            if cart:
                removed = self.repo.delete_cart_item(cart.id, product_id)
                self.repo.touch(cart)
                self.repo.commit()
                logger.info(f"Usunieto produkt {product_id} z koszyka usera {user_id} ({removed})")

        return self.get_cart(user_id)

    def remove_cart(self, user_id: str) -> None:
        """Idempotentne - czyszczenie nieistniejacego koszyka to no-op."""
        with self.lock_service.user_lock(user_id):
            self.clear(user_id)

    def clear(self, user_id: str) -> bool:
        # bez locka - wolane przez checkout, ktory juz trzyma lock usera
        deleted = self.repo.delete_cart(user_id)
        self.repo.commit()
        if deleted:
            logger.info(f"Koszyk usera {user_id} wyczyszczony")
        return deleted
