from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector

# Must match the table charset in database/schema.sql so participant names and
# external ids round-trip unchanged.
DEFAULT_CHARSET = "utf8mb4"
DEFAULT_COLLATION = "utf8mb4_unicode_ci"


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    charset: str = DEFAULT_CHARSET

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        """Build from a settings module's DB_CONFIG dict; missing keys fall back to local defaults."""
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "qr_attendance")),
            charset=str(db_config.get("charset", DEFAULT_CHARSET)),
        )


class DatabaseConnection:
    """Process-wide connection factory for the attendance store.

    Each repository call opens its own short-lived connection, so two stations
    scanning at once never share a session and the UNIQUE key on
    attendance_records is what settles their race.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance.config != config:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self, *, with_database: bool = True):
        """Open a connection; `with_database=False` is used before the schema exists."""
        kwargs = dict(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            charset=self._config.charset,
        )
        if self._config.charset == DEFAULT_CHARSET:
            kwargs["collation"] = DEFAULT_COLLATION
        if with_database:
            kwargs["database"] = self._config.database
        return mysql.connector.connect(**kwargs)
