from __future__ import annotations

from datetime import date
from typing import Optional

from loguru import logger

from .data import FIXED_HOLIDAYS, SHIFTING_HOLIDAYS
from .model import Holiday
from .provider import HolidayProvider, HolidayProviderError


class HolidayCalendar:
    """Fixed + per-year shifting holidays, optionally backed by a provider.

    `holiday_for` always answers from the static tables so it stays a pure
    lookup; month/year listings prefer the provider when one is configured
    and quietly fall back to the tables when it fails.
    """

    def __init__(
        self,
        *,
        provider: Optional[HolidayProvider] = None,
        fixed: Optional[dict[str, str]] = None,
        shifting: Optional[dict[int, dict[str, str]]] = None,
    ):
        self._provider = provider
        self._fixed = FIXED_HOLIDAYS if fixed is None else fixed
        self._shifting = SHIFTING_HOLIDAYS if shifting is None else shifting
        self._provider_cache: dict[tuple[int, int], list[Holiday]] = {}

    def static_holidays_for_month(self, year: int, month: int) -> list[Holiday]:
        prefix = f"{int(month):02d}-"
        holidays: list[Holiday] = []

        for mmdd, name in self._fixed.items():
            if mmdd.startswith(prefix):
                holidays.append(Holiday(day=_on(year, mmdd), name=name))

        for mmdd, name in self._shifting.get(int(year), {}).items():
            if mmdd.startswith(prefix):
                holidays.append(Holiday(day=_on(year, mmdd), name=name))

        return holidays

    def holidays_for_month(self, year: int, month: int) -> list[Holiday]:
        if self._provider is None:
            return self.static_holidays_for_month(year, month)

        key = (int(year), int(month))
        if key in self._provider_cache:
            return list(self._provider_cache[key])

        try:
            holidays = self._provider.fetch_month(year, month)
        except HolidayProviderError as e:
            logger.warning("Holiday provider unavailable for {}-{:02d}, using static table: {}", year, month, e)
            return self.static_holidays_for_month(year, month)

        self._provider_cache[key] = list(holidays)
        return list(holidays)

    def holidays_for_year(self, year: int) -> list[Holiday]:
        out: list[Holiday] = []
        for month in range(1, 13):
            out.extend(self.holidays_for_month(year, month))
        return sorted(out, key=lambda h: h.day)

    def holiday_for(self, day: date) -> Optional[Holiday]:
        mmdd = day.strftime("%m-%d")

        name = self._fixed.get(mmdd)
        if name is not None:
            return Holiday(day=day, name=name)

        name = self._shifting.get(day.year, {}).get(mmdd)
        if name is not None:
            return Holiday(day=day, name=name)
        return None

    def month_map(self, year: int, month: int) -> dict[str, Holiday]:
        """{YYYY-MM-DD: Holiday}; later entries for the same date do not override earlier ones."""
        out: dict[str, Holiday] = {}
        for h in self.holidays_for_month(year, month):
            out.setdefault(h.key, h)
        return out

    def is_holiday_or_sunday(self, day: date) -> bool:
        return day.weekday() == 6 or self.holiday_for(day) is not None


def _on(year: int, mmdd: str) -> date:
    month, day = mmdd.split("-")
    return date(int(year), int(month), int(day))
