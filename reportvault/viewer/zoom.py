"""Bounded display zoom. Purely a rendering transform."""

from __future__ import annotations

from dataclasses import dataclass

MIN_ZOOM = 0.5
MAX_ZOOM = 2.5
ZOOM_STEP = 0.15
DEFAULT_ZOOM = 1.0


@dataclass
class Zoom:
    level: float = DEFAULT_ZOOM

    def __post_init__(self):
        self.level = self._clamp(self.level)

    @staticmethod
    def _clamp(level: float) -> float:
        return round(min(MAX_ZOOM, max(MIN_ZOOM, level)), 2)

    @property
    def can_zoom_in(self) -> bool:
        return self.level < MAX_ZOOM

    @property
    def can_zoom_out(self) -> bool:
        return self.level > MIN_ZOOM

    @property
    def percent(self) -> int:
        return round(self.level * 100)

    def zoom_in(self) -> float:
        self.level = self._clamp(self.level + ZOOM_STEP)
        return self.level

    def zoom_out(self) -> float:
        self.level = self._clamp(self.level - ZOOM_STEP)
        return self.level

    def reset(self) -> float:
        self.level = DEFAULT_ZOOM
        return self.level

    def page_width(self, base: int) -> int:
        return max(1, round(base * self.level))
