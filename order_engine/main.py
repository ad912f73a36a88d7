# order_engine/main.py
import uvicorn

from order_engine.api import create_app
from order_engine.data.database import Base, engine
from order_engine.data import models  # noqa: F401  rejestracja tabel w Base.metadata
from order_engine.utils.logging import get_logger

logger = get_logger(__name__)

# tabele przy imporcie modulu, zanim uvicorn przyjmie pierwszy request
logger.info(f"Creating tables: {list(Base.metadata.tables.keys())}")
try:
    Base.metadata.create_all(bind=engine)
except Exception as e:
    logger.error(f"Failed to create tables: {e}")
    raise

app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
