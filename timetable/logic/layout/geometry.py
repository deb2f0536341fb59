"""Vertical geometry of the week grid.

Converts period indices into offsets and heights expressed as a percentage
of the layout's total row weight. Break rows take part in the sums, so a
class that spans the lunch break is drawn over the break as well.
"""
from __future__ import annotations
from typing import Any, Dict, List

from timetable.domain.Layout import Layout, REFERENCE_LAYOUT

__all__ = ["PlacementError", "InvalidPeriod", "top_percent", "height_percent",
           "runs_past_end", "row_spans"]


class PlacementError(ValueError):
    """A course entry cannot be resolved against the layout."""


class InvalidPeriod(PlacementError):
    def __init__(self, period_index: int, message: str | None = None):
        self.period_index = period_index
        super().__init__(message or f"No period {period_index} in layout")


def _start_position(period_index: int, layout: Layout) -> int:
    pos = layout.position_of(period_index)
    if pos is None:
        raise InvalidPeriod(period_index)
    return pos


def top_percent(period_index: int, layout: Layout = REFERENCE_LAYOUT) -> float:
    """Offset of the period's row: weight of all preceding rows over the total."""
    pos = _start_position(period_index, layout)
    weight_sum = sum(row.weight for row in layout.rows[:pos])
    return weight_sum / layout.total_weight * 100


def height_percent(period_start: int, period_count: int, layout: Layout = REFERENCE_LAYOUT) -> float:
    """Height covering period_count periods from period_start, breaks in between included.

    Running out of rows before period_count periods are covered is not an
    error: the height stops at the bottom of the grid.
    """
    if period_count < 1:
        raise InvalidPeriod(period_start, f"Period count must be at least 1, got {period_count}")
    pos = _start_position(period_start, layout)
    weight_sum = 0
    covered = 0
    for row in layout.rows[pos:]:
        weight_sum += row.weight
        if row.is_period:
            covered += 1
            if covered >= period_count:
                break
    return weight_sum / layout.total_weight * 100


def runs_past_end(period_start: int, period_count: int, layout: Layout = REFERENCE_LAYOUT) -> bool:
    """True when the last covered period does not exist, i.e. height_percent clamps."""
    return layout.position_of(period_start + period_count - 1) is None


def row_spans(layout: Layout = REFERENCE_LAYOUT) -> List[Dict[str, Any]]:
    """Every row with its own top/height percent, for the background grid and time column."""
    spans: List[Dict[str, Any]] = []
    running = 0
    for row in layout.rows:
        span = row.to_dict()
        span['top'] = running / layout.total_weight * 100
        span['height'] = row.weight / layout.total_weight * 100
        spans.append(span)
        running += row.weight
    return spans
