# order_engine/data/database.py
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from order_engine.utils.settings import DATABASE_URL


class Base(DeclarativeBase):
    pass


engine = create_engine(DATABASE_URL, pool_pre_ping=True)

# expire_on_commit=False - zamowienie zwracane po commicie nie robi kolejnych SELECTow
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Jedna atomowa transakcja: commit przy sukcesie, rollback przy kazdym wyjatku.
    Stan magazynu zarezerwowany w srodku wraca sam przez rollback.
    """
    if db.in_transaction():
        # zamknij autobegin z wczesniejszych odczytow
        db.commit()
    with db.begin():
        yield db
