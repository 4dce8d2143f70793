"""External holiday data provider.

Provider: Korean public data portal, SpcdeInfoService/getRestDeInfo
(requires a service key). Looked up per year+month.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

import httpx
from loguru import logger

from ..core.constants import HOLIDAY_API_TIMEOUT_SECONDS, HOLIDAY_API_URL
from .model import Holiday


class HolidayProviderError(Exception):
    """Provider lookup failed; callers fall back to the static table."""


class HolidayProvider(Protocol):
    def fetch_month(self, year: int, month: int) -> list[Holiday]:
        raise NotImplementedError


class PublicDataHolidayProvider(HolidayProvider):
    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = HOLIDAY_API_URL,
        timeout: float = HOLIDAY_API_TIMEOUT_SECONDS,
        client: Optional[httpx.Client] = None,
    ):
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = float(timeout)
        self._client = client

    def fetch_month(self, year: int, month: int) -> list[Holiday]:
        params = {
            "ServiceKey": self._api_key,
            "solYear": f"{int(year):04d}",
            "solMonth": f"{int(month):02d}",
            "_type": "json",
            "numOfRows": 50,
        }
        try:
            if self._client is not None:
                response = self._client.get(self._base_url, params=params)
            else:
                with httpx.Client(timeout=self._timeout) as client:
                    response = client.get(self._base_url, params=params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPStatusError, httpx.RequestError, ValueError) as e:
            logger.debug("Holiday provider request failed for {}-{:02d}: {}", year, month, e)
            raise HolidayProviderError(str(e)) from e

        try:
            return self._parse(data)
        except (AttributeError, TypeError) as e:
            raise HolidayProviderError(f"unexpected payload: {e}") from e

    @staticmethod
    def _parse(data: dict) -> list[Holiday]:
        try:
            body = data["response"]["body"]
        except (KeyError, TypeError) as e:
            raise HolidayProviderError(f"unexpected payload: {e}") from e

        if not isinstance(body, dict):
            raise HolidayProviderError(f"unexpected body: {body!r}")

        # An empty month comes back as "items": "" and a single hit as a dict.
        items = body.get("items") or {}
        if not isinstance(items, dict):
            raise HolidayProviderError(f"unexpected items: {items!r}")
        raw = items.get("item") or []
        if isinstance(raw, dict):
            raw = [raw]

        out: list[Holiday] = []
        for item in raw:
            try:
                day = datetime.strptime(str(item["locdate"]), "%Y%m%d").date()
                name = str(item["dateName"])
            except (KeyError, TypeError, ValueError) as e:
                raise HolidayProviderError(f"malformed holiday item: {item!r}") from e
            if str(item.get("isHoliday", "Y")).upper() != "Y":
                continue
            out.append(Holiday(day=day, name=name))
        return out
