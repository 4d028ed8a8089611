"""SQLite — init + session + CRUD helpers"""
import json, logging, os
from pathlib import Path
from typing import List, Optional

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base, BlockCreate, BlockDB, SelectionDB

log = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent.parent / "data"

DB_PATH      = os.getenv("DB_PATH", str(DATA_DIR / "artemis_blocks.db"))
ENGINE       = None
SessionLocal = sessionmaker(autocommit=False, autoflush=False)


def configure(db_url: Optional[str] = None):
    """(Re)lie le moteur et la fabrique de sessions. Sans argument : DB_PATH."""
    global ENGINE
    if db_url is None:
        path = Path(DB_PATH)
        path.parent.mkdir(parents=True, exist_ok=True)
        db_url = f"sqlite:///{path}"
    kwargs = {"connect_args": {"check_same_thread": False}}
    if db_url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    if ENGINE is not None:
        ENGINE.dispose()
    ENGINE = create_engine(db_url, **kwargs)
    SessionLocal.configure(bind=ENGINE)
    log.info("Store configuré : %s", db_url)
    return ENGINE


def init_db():
    if ENGINE is None:
        configure()
    Base.metadata.create_all(bind=ENGINE)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ── JSON helpers ──
def jl(s: str) -> list:
    try: return json.loads(s or "[]")
    except json.JSONDecodeError: return []

def jd(o) -> str:
    return json.dumps(o, ensure_ascii=False)


# ── Block ──
def db_count_blocks(db: Session) -> int:
    return db.query(BlockDB).count()

def db_list_blocks(db: Session) -> List[BlockDB]:
    return db.query(BlockDB).all()

def db_find_blocks(db: Session, block_ids: List[str]) -> List[BlockDB]:
    return db.query(BlockDB).filter(BlockDB.id.in_(block_ids)).all()

def db_create_blocks(db: Session, items: List[BlockCreate]) -> List[BlockDB]:
    objs = [BlockDB(**{**i.model_dump(), "type": i.type.value}) for i in items]
    db.add_all(objs); db.commit()
    for o in objs:
        db.refresh(o)
    return objs

def db_resolve_blocks(db: Session, block_ids: List[str]) -> List[BlockDB]:
    """Jointure Selection → Block : un seul batch, ordre de block_ids conservé, ids orphelins ignorés."""
    if not block_ids:
        return []
    found = {b.id: b for b in db_find_blocks(db, list(set(block_ids)))}
    return [found[i] for i in block_ids if i in found]


# ── Selection ──
def db_replace_selection(db: Session, block_ids: List[str]) -> SelectionDB:
    """Supprime toutes les sélections et insère la nouvelle dans la même transaction."""
    obj = SelectionDB(block_ids=jd(block_ids))
    try:
        db.query(SelectionDB).delete(synchronize_session=False)
        db.add(obj)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(obj); return obj

def db_latest_selection(db: Session) -> Optional[SelectionDB]:
    return db.query(SelectionDB).order_by(SelectionDB.timestamp.desc()).first()

def db_count_selections(db: Session) -> int:
    return db.query(SelectionDB).count()
