import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from civic.core.errors import StoreUnavailable
from civic.db.session import get_db

router = APIRouter(tags=["health"])
logger = logging.getLogger("civic")

@router.get("/health")
def health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("health check: store unreachable")
        raise StoreUnavailable(status="error")
    return {"status": "ok"}
