# order_service/product_service/main.py
import threading
from typing import Literal

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

app = FastAPI(title="Product Service (dev mock)")

_lock = threading.Lock()

SEED_PRODUCTS = {
    "1": {"id": "1", "name": "iPhone 14 Pro", "price": 999, "stock": 50, "image": "https://picsum.photos/300/300?random=1"},
    "2": {"id": "2", "name": "Samsung Galaxy S23", "price": 899, "stock": 30, "image": "https://picsum.photos/300/300?random=2"},
    "3": {"id": "3", "name": "MacBook Air M2", "price": 1199, "stock": 25, "image": "https://picsum.photos/300/300?random=3"},
    "4": {"id": "4", "name": "Nike Air Max 270", "price": 150, "stock": 100, "image": "https://picsum.photos/300/300?random=4"},
    "5": {"id": "5", "name": "Sony WH-1000XM5", "price": 349, "stock": 40, "image": "https://picsum.photos/300/300?random=5"},
    "6": {"id": "6", "name": "iPad Pro 12.9", "price": 1099, "stock": 20, "image": "https://picsum.photos/300/300?random=6"},
}

PRODUCTS = {pid: dict(p) for pid, p in SEED_PRODUCTS.items()}


class StockIn(BaseModel):
    quantity: int = Field(..., gt=0)
    operation: Literal["increase", "decrease"]


@app.get("/products/{product_id}")
def get_product(product_id: str):
    product = PRODUCTS.get(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@app.patch("/products/{product_id}/stock")
def update_stock(product_id: str, payload: StockIn):
    # check-and-decrement pod jednym lockiem
    with _lock:
        product = PRODUCTS.get(product_id)
        if not product:
            raise HTTPException(status_code=404, detail="Product not found")

        if payload.operation == "decrease":
            if product["stock"] < payload.quantity:
                raise HTTPException(status_code=400, detail="Insufficient stock")
            product["stock"] -= payload.quantity
        else:
            product["stock"] += payload.quantity

        return {"message": "Stock updated", "newStock": product["stock"]}


@app.post("/init-data")
def init_data():
    with _lock:
        PRODUCTS.clear()
        PRODUCTS.update({pid: dict(p) for pid, p in SEED_PRODUCTS.items()})
    return {"message": "Sample data initialized successfully", "productsCreated": len(PRODUCTS)}
