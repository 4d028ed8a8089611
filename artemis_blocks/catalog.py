"""
Catalogue de blocks — listing + seed initial.

Le seed tourne une fois au démarrage, uniquement si la table est vide.
Deux process démarrant en même temps sur un store vide peuvent tous deux
voir "vide" et insérer deux fois : course connue, non traitée.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from .database import db_count_blocks, db_create_blocks, db_list_blocks
from .models import BlockCreate, BlockDB

log = logging.getLogger(__name__)


INITIAL_BLOCKS: List[BlockCreate] = [
    BlockCreate(title="Block 1",          description="FM Companies",  type="grouped", icon="/icons/ico-org.png"),
    BlockCreate(title="Academy",                                       type="grouped", icon="/icons/ico-academy.png"),
    BlockCreate(title="Event Companies",  description="Description 3", type="grouped", icon="/icons/ico-event.png"),
    BlockCreate(title="Local Clubs",      description="Description 3", type="single",  icon="/icons/ico-local-club.png"),
    BlockCreate(title="Community Groups", description="Description 3", type="single",  icon="/icons/ico-org.png"),
]


def list_all(db: Session) -> List[BlockDB]:
    return db_list_blocks(db)


def seed_if_empty(db: Session, initial: Optional[List[BlockCreate]] = None) -> int:
    """Insère le catalogue initial si aucun block n'existe. Retourne le nombre inséré."""
    count = db_count_blocks(db)
    if count:
        log.info("Catalogue déjà présent (%d blocks) — seed ignoré", count)
        return 0
    created = db_create_blocks(db, INITIAL_BLOCKS if initial is None else initial)
    log.info("Catalogue initialisé — %d blocks", len(created))
    return len(created)


def block_dict(b: BlockDB) -> dict:
    return {
        "id":          b.id,
        "title":       b.title,
        "description": b.description,
        "type":        b.type,
        "icon":        b.icon,
        "selected":    bool(b.selected),
    }
