"""
Sélection courante — validation, remplacement, lecture de la dernière.

Flux : ids candidats → validate_selection (existence dans le catalogue)
       → replace_selection (delete + insert, une transaction)
       → get_latest (ids re-résolus contre le catalogue)
"""
import logging
from typing import Any, List

from sqlalchemy.orm import Session

from .catalog import block_dict
from .database import db_find_blocks, db_latest_selection, db_replace_selection, db_resolve_blocks, jl
from .errors import InvalidInput, UnknownReference

log = logging.getLogger(__name__)


def validate_selection(db: Session, block_ids: Any) -> List[str]:
    """
    Vérifie les ids candidats contre le catalogue.

    - absent / pas une liste → InvalidInput
    - éléments non-str → UnknownReference
    - nb de blocks trouvés != nb d'ids → UnknownReference
      (couvre les ids inconnus ET les doublons, qui se fusionnent au lookup)

    Retourne la séquence d'origine, telle quelle. Une liste vide est valide.
    """
    if block_ids is None or not isinstance(block_ids, list):
        log.warning("Sélection rejetée : blockIds absent ou pas un tableau")
        raise InvalidInput()
    if not all(isinstance(i, str) for i in block_ids):
        # aucun id de block n'est non textuel : même issue qu'un id inconnu
        log.warning("Sélection rejetée : blockIds contient des valeurs non textuelles")
        raise UnknownReference()

    found = db_find_blocks(db, block_ids)
    if len(found) != len(block_ids):
        log.warning("Sélection rejetée : %d/%d ids reconnus", len(found), len(block_ids))
        raise UnknownReference()
    return block_ids


def replace_selection(db: Session, block_ids: List[str]) -> dict:
    """Remplace la sélection courante, retourne la nouvelle avec les blocks résolus."""
    sel = db_replace_selection(db, block_ids)
    blocks = db_resolve_blocks(db, jl(sel.block_ids))
    log.info("Sélection enregistrée — %d block(s)", len(block_ids))
    return {
        "id":        sel.id,
        "blockIds":  [block_dict(b) for b in blocks],
        "timestamp": sel.timestamp.isoformat() if sel.timestamp else None,
    }


def get_latest(db: Session) -> List[str]:
    """Ids de la dernière sélection encore présents au catalogue ([] si aucune sélection)."""
    sel = db_latest_selection(db)
    if not sel:
        return []
    return [b.id for b in db_resolve_blocks(db, jl(sel.block_ids))]
