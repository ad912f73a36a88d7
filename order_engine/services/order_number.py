# order_engine/services/order_number.py
from datetime import datetime, timezone
from typing import Callable, Protocol

import redis
from redis.exceptions import RedisError
from sqlalchemy import Connection, Engine, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from order_engine.data.models.order_sequence import OrderSequenceModel
from order_engine.domain.errors import GenerationError
from order_engine.utils.retry import redis_retry
from order_engine.utils.settings import REDIS_URL
from order_engine.utils.logging import get_logger

logger = get_logger(__name__)

MAX_DAILY_SEQUENCE = 99999

_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class DailySequence(Protocol):
    def next_value(self, day: str) -> int: ...


class DatabaseDailySequence:
    """
    Licznik w tabeli order_sequences, inkrementowany upsertem we wlasnej,
    od razu zatwierdzanej transakcji. Wiersz dnia jest zablokowany tylko na
    czas upsertu, nie do commita zamowienia. Wycofane zamowienie zostawia
    dziure w numeracji, numer nigdy nie wraca do puli.
    """

    def __init__(self, bind: Engine | Connection):
        self.bind = bind

    def next_value(self, day: str) -> int:
        dialect = self.bind.dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise GenerationError(f"Brak wsparcia upsert dla dialektu {dialect}")

        table = OrderSequenceModel.__table__
        stmt = insert(table).values(day=day, value=1)
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.day],
            set_={"value": table.c.value + 1},
        )
        try:
            with Session(bind=self.bind) as session, session.begin():
                session.execute(stmt)
                return session.execute(
                    select(table.c.value).where(table.c.day == day)
                ).scalar_one()
        except SQLAlchemyError as e:
            raise GenerationError(f"Blad licznika zamowien: {e}") from e


class RedisDailySequence:
    """
    INCR order_seq:YYYYMMDD - redis wykonuje INCR atomowo,
    kazda instancja serwisu dostaje inna wartosc.
    """

    KEY_TTL_SECONDS = 2 * 24 * 60 * 60

    def __init__(self, client: redis.Redis | None = None, url: str | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @redis_retry()
    def _incr(self, key: str) -> int:
        value = self.redis.incr(key)
        if value == 1:
            # klucz wygasa sam, nie trzeba recznie czyscic starych dni
            self.redis.expire(key, self.KEY_TTL_SECONDS)
        return int(value)

    def next_value(self, day: str) -> int:
        key = f"order_seq:{day}"
        try:
            return self._incr(key)
        except RedisError as e:
            raise GenerationError(f"Blad licznika zamowien w redis: {e}") from e


class OrderNumberGenerator:
    """ORD-<YYYYMMDD UTC>-<NNNNN>, sekwencja per dzien z licznika w storage."""

    def __init__(
        self,
        sequence: DailySequence,
        clock: Callable[[], datetime] | None = None,
    ):
        self.sequence = sequence
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def generate(self) -> str:
        day = self.clock().astimezone(timezone.utc).strftime("%Y%m%d")
        value = self.sequence.next_value(day)

        if value > MAX_DAILY_SEQUENCE:
            raise GenerationError(
                f"Wyczerpano pule numerow zamowien na dzien {day}"
            )

        order_number = f"ORD-{day}-{value:05d}"
        logger.info(f"Generated order number {order_number}")
        return order_number
