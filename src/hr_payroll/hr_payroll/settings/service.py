from __future__ import annotations

import logging
from typing import Any, Mapping

from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_STANDARD_HOURS_PER_DAY, STANDARD_HOURS_SETTING
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ConfigurationError, ValidationError
from .repository import SettingsRepository

logger = logging.getLogger(__name__)


def parse_standard_hours(raw: Any) -> int:
    """Standard working hours per weekday. Must be a positive whole number."""

    try:
        text = str(raw).strip()
        hours = int(text)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{STANDARD_HOURS_SETTING} must be an integer, got {raw!r}")
    if hours <= 0:
        raise ConfigurationError(f"{STANDARD_HOURS_SETTING} must be greater than zero, got {hours}")
    return hours


class SettingsService:
    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def get_settings(self) -> dict[str, str]:
        return self._settings.get_all()

    def update_settings(self, *, current_role: Role, values: Mapping[str, Any]) -> dict[str, str]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can change settings")
        if not values:
            raise ValidationError("No settings supplied")

        cleaned: dict[str, str] = {}
        for key, value in values.items():
            key = require_non_empty(str(key), "Setting key")
            if value is None:
                raise ValidationError(f"Setting {key} must have a value")
            if key == STANDARD_HOURS_SETTING:
                try:
                    value = parse_standard_hours(value)
                except ConfigurationError as e:
                    raise ValidationError(str(e))
            cleaned[key] = str(value)

        self._settings.upsert_many(cleaned)
        logger.info("[settings] updated keys=%s", sorted(cleaned))
        return self._settings.get_all()

    def resolve_standard_hours(self) -> int:
        """Read ``standard_hours`` once; absent means the default of 8."""

        raw = self._settings.get_setting(STANDARD_HOURS_SETTING)
        if raw is None or str(raw).strip() == "":
            return DEFAULT_STANDARD_HOURS_PER_DAY
        return parse_standard_hours(raw)
