from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Protocol


@dataclass(frozen=True)
class CalendarColor:
    bg: str
    light: str
    text: str

    def to_dict(self) -> dict:
        return {"bg": self.bg, "light": self.light, "text": self.text}


CALENDAR_COLORS: tuple[CalendarColor, ...] = (
    CalendarColor("bg-blue-600", "bg-blue-500/20 dark:bg-blue-400/20", "text-blue-800 dark:text-blue-200"),
    CalendarColor("bg-emerald-600", "bg-emerald-500/20 dark:bg-emerald-400/20", "text-emerald-800 dark:text-emerald-200"),
    CalendarColor("bg-amber-600", "bg-amber-500/20 dark:bg-amber-400/20", "text-amber-800 dark:text-amber-200"),
    CalendarColor("bg-purple-600", "bg-purple-500/20 dark:bg-purple-400/20", "text-purple-800 dark:text-purple-200"),
    CalendarColor("bg-rose-600", "bg-rose-500/20 dark:bg-rose-400/20", "text-rose-800 dark:text-rose-200"),
    CalendarColor("bg-cyan-600", "bg-cyan-500/20 dark:bg-cyan-400/20", "text-cyan-800 dark:text-cyan-200"),
    CalendarColor("bg-orange-600", "bg-orange-500/20 dark:bg-orange-400/20", "text-orange-800 dark:text-orange-200"),
    CalendarColor("bg-slate-600", "bg-slate-500/20 dark:bg-slate-400/20", "text-slate-800 dark:text-slate-200"),
)

DEFAULT_EVENT_COLOR = CALENDAR_COLORS[0]

HOLIDAY_COLOR = CalendarColor("bg-red-500", "bg-red-200 dark:bg-red-900/60", "text-red-600 dark:text-red-400")


def color_by_index(index: int, palette: tuple[CalendarColor, ...] = CALENDAR_COLORS) -> CalendarColor:
    return palette[index % len(palette)]


def create_color_map(ids: Iterable[str], palette: tuple[CalendarColor, ...] = CALENDAR_COLORS) -> dict[str, CalendarColor]:
    """Map each id to palette[index of its first appearance % len(palette)].

    Built fresh for every id list; a repeated id keeps its first colour.
    """
    out: dict[str, CalendarColor] = {}
    for idx, key in enumerate(ids):
        if key in out:
            continue
        out[key] = color_by_index(idx, palette)
    return out


class _Colorable(Protocol):
    is_academy_holiday: bool
    location_id: Optional[str]
    group_id: Optional[str]


def resolve_color(item: _Colorable, color_map: dict[str, CalendarColor]) -> CalendarColor:
    if item.is_academy_holiday:
        return HOLIDAY_COLOR
    if item.location_id and item.location_id in color_map:
        return color_map[item.location_id]
    if item.group_id and item.group_id in color_map:
        return color_map[item.group_id]
    return DEFAULT_EVENT_COLOR
