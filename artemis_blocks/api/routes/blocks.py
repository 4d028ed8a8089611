"""
GET /api/blocks — catalogue complet
"""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...catalog import block_dict, list_all
from ...database import get_db
from ...errors import BackendFailure

log = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["Blocks"])


@router.get("/blocks")
def api_list_blocks(db: Session = Depends(get_db)):
    try:
        blocks = list_all(db)
    except SQLAlchemyError:
        log.exception("Lecture du catalogue impossible")
        raise BackendFailure("Failed to fetch blocks")
    return [block_dict(b) for b in blocks]
