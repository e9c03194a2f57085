"""
Run Summary

Counters collected while a report runs, logged as JSON at the end.
"""

from typing import Dict, Optional

from pydantic import BaseModel, Field


class ThingStats(BaseModel):
    total: int = 0
    skipped: int = 0
    by_category: Dict[str, int] = Field(default_factory=dict)


class PointStats(BaseModel):
    total: int = 0
    used: int = 0
    unused: int = 0
    skipped: int = 0
    used_by_category: Dict[str, int] = Field(default_factory=dict)


class RunSummary(BaseModel):
    """Totals for one report run."""
    things: ThingStats = Field(default_factory=ThingStats)
    points: PointStats = Field(default_factory=PointStats)
    rows_written: Dict[str, int] = Field(default_factory=dict)

    def count_thing(self, category: Optional[str]) -> None:
        self.things.total += 1
        if category:
            self.things.by_category[category] = self.things.by_category.get(category, 0) + 1

    def count_point(self, unused: bool, category: Optional[str]) -> None:
        self.points.total += 1
        if unused:
            self.points.unused += 1
            return
        self.points.used += 1
        if category:
            self.points.used_by_category[category] = (
                self.points.used_by_category.get(category, 0) + 1
            )
