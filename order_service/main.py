# order_service/main.py
from order_service.api import create_app
from order_service.data.database import Base, engine
from order_service.utils.logging import get_logger
import uvicorn

# import wszystkich modeli przed create_all
from order_service.data.models import CartModel, CartItemModel, OrderModel, OrderItemModel  # noqa: F401

logger = get_logger(__name__)


def init_db():
    logger.info(f"Models registered in Base.metadata: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise


init_db()

app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=5003)
