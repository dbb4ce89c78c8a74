"""
SQLAlchemy Mapping of the Initialized Schema.

The schema itself is created by the raw script in `ddl.py`, never by
`metadata.create_all`. This mapping exists so that the job and the tests can
read back what the script produced (`sampledb.users`) through the ORM instead
of hand-written SQL strings.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import TIMESTAMP, Integer, MetaData, String, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .ddl import SCHEMA_NAME, USERS_TABLE

metadata_obj = MetaData(
    schema=SCHEMA_NAME,
    naming_convention={
        "pk": "%(table_name)s_pkey",
    },
)


class Base(DeclarativeBase):
    """Declarative base bound to the `sampledb` schema."""

    metadata = metadata_obj


class User(Base):
    """
    A row of `sampledb.users`.

    Attributes:
        id: Serial primary key.
        username: Natural key of the seed row (`lambdainit`).
        email: Contact address.
        last_updated: Defaults to the insertion time on the server.
    """

    __tablename__ = USERS_TABLE

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(10), nullable=False)
    email: Mapped[str] = mapped_column(String(50), nullable=False)
    last_updated: Mapped[datetime | None] = mapped_column(
        TIMESTAMP, server_default=text("CURRENT_TIMESTAMP")
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username!r})>"
