import importlib
import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from app.config import settings

log = logging.getLogger(__name__)

DATABASE_URL = settings.DATABASE_URL
engine = create_engine(DATABASE_URL, future=True, echo=settings.SQL_ECHO)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

# Categories an item may be listed under
CATEGORIES = [
    "books",
    "clothing",
    "toys",
    "games",
    "accessories",
    "decorations",
    "office",
]

# Model modules to import so metadata is populated
MODEL_MODULES = [
    "app.models.account",
    "app.models.category",
    "app.models.item",
    "app.models.cart",
    "app.models.cart_entry",
    "app.models.order",
]


def init_db(reset: bool = False):
    """
    Initialize DB schema.

    Behavior:
      - reset=True drops & recreates every table (tests, RESET_DB=1).
      - Otherwise existing tables are left in place.
      - The fixed category list is seeded idempotently.
    """
    for mod in MODEL_MODULES:
        importlib.import_module(mod)

    if reset:
        log.info("Resetting database schema")
        Base.metadata.drop_all(bind=engine)

    Base.metadata.create_all(bind=engine)

    from app.models.category import Category

    s = SessionLocal()
    try:
        existing = {name for (name,) in s.query(Category.name).all()}
        missing = [name for name in CATEGORIES if name not in existing]
        for name in missing:
            s.add(Category(name=name))
        if missing:
            s.commit()
            log.info("Seeded %d categories", len(missing))
    finally:
        s.close()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
