from __future__ import annotations

from dataclasses import dataclass

import mysql.connector
from mysql.connector.constants import ClientFlag

from ..core.constants import DEFAULT_ISOLATION_LEVEL

# REPEATABLE READ is left out: its snapshot would hide ledger rows committed
# while a scan waited on the child row lock.
_ISOLATION_LEVELS = {"READ COMMITTED", "SERIALIZABLE"}


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    isolation_level: str = DEFAULT_ISOLATION_LEVEL

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config["host"]),
            port=int(db_config.get("port", 3306)),
            user=str(db_config["user"]),
            password=str(db_config["password"]),
            database=str(db_config["database"]),
            isolation_level=str(db_config.get("isolation_level", DEFAULT_ISOLATION_LEVEL)).upper(),
        )


class DatabaseConnection:
    """DB connection factory.

    Built once by the application entry point and passed to whoever needs it.
    Each unit of work opens its own short-lived connection.
    """

    def __init__(self, config: DBConfig):
        if config.isolation_level not in _ISOLATION_LEVELS:
            raise ValueError(f"Unsupported isolation level: {config.isolation_level!r}")
        self._config = config

    @property
    def isolation_level(self) -> str:
        return self._config.isolation_level

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            autocommit=False,
            # rowcount = matched rows, so an UPDATE to the same values still counts.
            client_flags=[ClientFlag.FOUND_ROWS],
        )
