"""
Credential store backed by SQLAlchemy.

Accepts any SQLAlchemy URL; SQLite is the default and what the tests use.
Every method is a single-record read or write in its own session.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import create_engine, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from dialectbase.errors import DuplicateEmail, NotFound
from dialectbase.users.models import Base, Subscription, User, UserRow, utcnow

logger = logging.getLogger(__name__)


def _to_db(value: datetime) -> datetime:
    # Columns hold naive UTC
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _from_db(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class UserStore:
    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for UserStore")
        engine_kwargs = {"future": True}
        if database_url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in database_url or database_url.rstrip("/").endswith("sqlite:"):
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs["pool_pre_ping"] = True
            engine_kwargs["pool_recycle"] = 1800
        self.engine = create_engine(database_url, **engine_kwargs)
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    @staticmethod
    def _to_user(row: UserRow) -> User:
        return User(
            id=row.id,
            name=row.name,
            age=row.age,
            email=row.email,
            password=row.password,
            searches_this_week=row.searches_this_week,
            last_search_reset=_from_db(row.last_search_reset),
            subscription=Subscription(row.subscription),
            created_at=_from_db(row.created_at),
            updated_at=_from_db(row.updated_at),
        )

    def create_user(self, name: str, age: int, email: str, password_hash: str) -> User:
        now = _to_db(utcnow())
        with self.Session() as session:
            row = UserRow(
                name=name,
                age=age,
                email=email,
                password=password_hash,
                searches_this_week=0,
                last_search_reset=now,
                subscription=Subscription.FREE.value,
                created_at=now,
                updated_at=now,
            )
            session.add(row)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                raise DuplicateEmail()
            session.refresh(row)
            logger.info(f"Created user {row.id}")
            return self._to_user(row)

    def find_by_email(self, email: str) -> Optional[User]:
        with self.Session() as session:
            row = session.execute(
                select(UserRow).where(UserRow.email == email)
            ).scalar_one_or_none()
            return self._to_user(row) if row else None

    def find_by_id(self, user_id: int) -> Optional[User]:
        with self.Session() as session:
            row = session.get(UserRow, user_id)
            return self._to_user(row) if row else None

    def _update(self, user_id: int, **values) -> None:
        values["updated_at"] = _to_db(utcnow())
        with self.Session() as session:
            result = session.execute(
                update(UserRow).where(UserRow.id == user_id).values(**values)
            )
            session.commit()
            if result.rowcount == 0:
                raise NotFound(f"User {user_id} not found")

    def update_search_count(self, user_id: int, count: int) -> None:
        if count < 0:
            raise ValueError("search count cannot be negative")
        self._update(user_id, searches_this_week=count)

    def reset_weekly_searches(self, user_id: int, now: datetime) -> None:
        self._update(user_id, searches_this_week=0, last_search_reset=_to_db(now))

    def set_subscription(self, user_id: int, subscription: Subscription) -> None:
        self._update(user_id, subscription=Subscription(subscription).value)
