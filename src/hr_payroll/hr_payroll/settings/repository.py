from __future__ import annotations

from typing import Mapping, Optional, Protocol


class SettingsRepository(Protocol):
    """Key/value system configuration (``system_settings`` table)."""

    def get_setting(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def get_all(self) -> dict[str, str]:
        raise NotImplementedError

    def upsert_many(self, values: Mapping[str, str]) -> None:
        """Insert or update every pair in one transaction."""

        raise NotImplementedError
