"""Repository for reading back the initialized schema."""

from __future__ import annotations

from sqlalchemy import Connection, func, select, text

from ..ddl import SCHEMA_NAME, SEED_USERNAME, USERS_TABLE
from ..tables import User


class SeedRepository:
    """
    Read-only queries over the objects created by the initialization script.

    The repository works on a plain SQLAlchemy `Connection` because the job
    keeps exactly one short-lived connection per invocation.
    """

    def __init__(self, connection: Connection):
        """
        Initialize the repository with an open connection.

        Args:
            connection: Active SQLAlchemy connection
        """
        self.connection = connection

    def schema_exists(self, schema_name: str = SCHEMA_NAME) -> bool:
        """Returns True if the namespace exists."""
        stmt = text(
            "SELECT 1 FROM information_schema.schemata WHERE schema_name = :schema_name"
        )
        return self.connection.execute(stmt, {"schema_name": schema_name}).first() is not None

    def table_exists(self, schema_name: str = SCHEMA_NAME, table_name: str = USERS_TABLE) -> bool:
        """Returns True if the table exists inside the namespace."""
        stmt = text(
            "SELECT 1 FROM information_schema.tables "
            "WHERE table_schema = :schema_name AND table_name = :table_name"
        )
        params = {"schema_name": schema_name, "table_name": table_name}
        return self.connection.execute(stmt, params).first() is not None

    def count_users(self) -> int:
        """Counts all rows of `sampledb.users`."""
        stmt = select(func.count(User.id))
        return int(self.connection.execute(stmt).scalar_one())

    def count_seed_rows(self, username: str = SEED_USERNAME) -> int:
        """
        Counts rows carrying the seed row's natural key.

        Args:
            username: The natural key to count (defaults to the seed user)

        Returns:
            Number of matching rows; 1 after any number of successful runs
        """
        stmt = select(func.count(User.id)).where(User.username == username)
        return int(self.connection.execute(stmt).scalar_one())
