import logging

# -------------------- ЛОГИ --------------------
from civic.core.config import settings
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger("civic")

from civic.main import app  # noqa: E402


if __name__ == "__main__":
    import uvicorn
    logger.info("API running on http://%s:%s", settings.HOST, settings.PORT)
    uvicorn.run("server:app", host=settings.HOST, port=settings.PORT)
