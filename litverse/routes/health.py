import logging
from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, text

from litverse.database import get_session
from litverse.realtime import hub
from litverse.utils.clock import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
def health_check(session: Session = Depends(get_session)):
    db_status = "ok"

    try:
        # simple DB ping
        session.exec(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check database ping failed: {e}")
        db_status = "failed"

    return {
        "status": "OK",
        "database": db_status,
        "connections": len(hub.connections),
        "timestamp": utc_now().isoformat()
    }
