"""
POST /api/selections        — enregistre la sélection courante (remplace l'ancienne)
GET  /api/selections/latest — ids de la dernière sélection
"""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...database import get_db
from ...errors import BackendFailure
from ...models import SelectionInput
from ...selection import get_latest, replace_selection, validate_selection

log = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["Selections"])


@router.post("/selections", status_code=201)
def api_save_selection(data: SelectionInput, db: Session = Depends(get_db)):
    """
    Corps : {"blockIds": ["<id>", ...]}

    400 si blockIds n'est pas un tableau ou référence un block inexistant.
    Réponse 201 :
    {
      "message": "Selection saved successfully",
      "selection": {"id": "...", "blockIds": [{block}, ...], "timestamp": "..."}
    }
    """
    try:
        block_ids = validate_selection(db, data.block_ids)
    except SQLAlchemyError:
        log.exception("Validation de la sélection impossible")
        raise BackendFailure("Validation failed. Please try again.")

    try:
        selection = replace_selection(db, block_ids)
    except SQLAlchemyError:
        log.exception("Enregistrement de la sélection impossible")
        raise BackendFailure("Failed to save selection. Please try again.")

    return {"message": "Selection saved successfully", "selection": selection}


@router.get("/selections/latest")
def api_latest_selection(db: Session = Depends(get_db)):
    try:
        return {"blockIds": get_latest(db)}
    except SQLAlchemyError:
        log.exception("Lecture de la dernière sélection impossible")
        raise BackendFailure("Failed to fetch latest selection")
