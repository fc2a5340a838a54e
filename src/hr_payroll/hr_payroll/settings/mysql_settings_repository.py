from __future__ import annotations

from typing import Mapping, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .repository import SettingsRepository


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_setting(self, key: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT setting_value FROM system_settings WHERE setting_key=%s", (key,))
            row = fetchone(cur)
            return row["setting_value"] if row else None

    def get_all(self) -> dict[str, str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT setting_key, setting_value FROM system_settings ORDER BY setting_key")
            return {r["setting_key"]: r["setting_value"] for r in fetchall(cur)}

    def upsert_many(self, values: Mapping[str, str]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            for key, value in values.items():
                cur.execute(
                    """
                    INSERT INTO system_settings(setting_key, setting_value)
                    VALUES(%s,%s)
                    ON DUPLICATE KEY UPDATE setting_value=VALUES(setting_value)
                    """,
                    (key, value),
                )
