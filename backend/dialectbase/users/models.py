from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Subscription(str, Enum):
    FREE = "free"
    PREMIUM = "premium"


@dataclass
class User:
    id: int
    name: str
    age: int
    email: str
    password: str  # bcrypt hash
    searches_this_week: int
    last_search_reset: datetime
    subscription: Subscription
    created_at: datetime
    updated_at: datetime

    @property
    def is_premium(self) -> bool:
        return self.subscription == Subscription.PREMIUM

    def public(self, include_searches: bool = False) -> dict:
        """Fields safe to return to clients. Never includes the password hash."""
        data = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "age": self.age,
            "subscription": self.subscription.value,
        }
        if include_searches:
            data["searchesThisWeek"] = self.searches_this_week
        return data


class UserRow(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    age = Column(Integer, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)
    searches_this_week = Column(Integer, nullable=False, default=0)
    last_search_reset = Column(DateTime, nullable=False)
    subscription = Column(String, nullable=False, default=Subscription.FREE.value)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)
