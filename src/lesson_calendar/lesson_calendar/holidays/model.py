from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Holiday:
    """Public holiday keyed by its exact calendar date."""

    day: date
    name: str
    is_holiday: bool = True

    @property
    def key(self) -> str:
        return self.day.strftime("%Y-%m-%d")

    def to_dict(self) -> dict:
        return {"date": self.key, "name": self.name, "isHoliday": self.is_holiday}
