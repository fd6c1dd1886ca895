from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector

DEFAULT_DATABASE = "school_attendance"


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str = DEFAULT_DATABASE

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        """Build from a settings module's DB_CONFIG mapping, filling local defaults."""
        return cls(
            host=str(db_config.get("host") or "localhost"),
            port=int(db_config.get("port") or 3306),
            user=str(db_config.get("user") or "root"),
            password=str(db_config.get("password") or ""),
            database=str(db_config.get("database") or DEFAULT_DATABASE),
        )


class DatabaseConnection:
    """Process-wide factory for short-lived MySQL connections.

    Each repository call opens its own connection and closes it when done, so
    one attendance submission maps onto exactly one transaction.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self.config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance.config != config:
            cls._instance = cls(config)
        return cls._instance

    def connect(self, *, with_database: bool = True):
        # the server-level connection is only needed to CREATE DATABASE
        params = {
            "host": self.config.host,
            "port": self.config.port,
            "user": self.config.user,
            "password": self.config.password,
            "autocommit": False,
        }
        if with_database:
            params["database"] = self.config.database
        return mysql.connector.connect(**params)
