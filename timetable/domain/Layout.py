"""Layout domain entity: the fixed sequence of period and break rows of a school day."""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, List, Optional

from timetable.utilities.constants import DEFAULT_LAYOUT
from timetable.utilities.validators import LayoutRowInput

PERIOD = "period"
BREAK = "break"


@dataclass(frozen=True)
class LayoutRow:
    kind: str
    weight: float
    display_label: str = ""
    period_index: Optional[int] = None
    name: str = ""  # break rows only, e.g. "Lunch"

    @property
    def is_period(self) -> bool:
        return self.kind == PERIOD

    def __str__(self) -> str:
        title = f"Period {self.period_index}" if self.is_period else (self.name or "Break")
        return f"{title} ({self.display_label}) w={self.weight:g}"

    @staticmethod
    def from_dict(data):
        '''Creates a LayoutRow from a dictionary, validating kind, index and weight.'''
        row = LayoutRowInput.model_validate(data)
        return LayoutRow(kind=row.kind, weight=row.weight, display_label=row.display_label,
                         period_index=row.period_index, name=row.name)

    def to_dict(self):
        d = {"kind": self.kind, "weight": self.weight, "display_label": self.display_label}
        if self.is_period:
            d["period_index"] = self.period_index
        else:
            d["name"] = self.name
        return d


class Layout:
    """Immutable ordered rows plus the derived normalization data.

    The total weight of all rows is the denominator of every geometry
    computation. Period rows must be numbered 1..n in order, without gaps.
    """

    def __init__(self, rows: Iterable[LayoutRow]):
        self._rows = tuple(rows)
        if not self._rows:
            raise ValueError("Layout must contain at least one row")
        positions = {}
        expected = 1
        for pos, row in enumerate(self._rows):
            if row.weight <= 0:
                raise ValueError(f"Row weight must be positive: {row}")
            if row.kind not in (PERIOD, BREAK):
                raise ValueError(f"Unknown row kind: {row.kind!r}")
            if row.is_period:
                if row.period_index != expected:
                    raise ValueError(
                        f"Period rows must be numbered consecutively from 1; "
                        f"expected {expected}, got {row.period_index}")
                positions[row.period_index] = pos
                expected += 1
        if not positions:
            raise ValueError("Layout must contain at least one period row")
        self._positions = MappingProxyType(positions)
        self._total_weight = sum(row.weight for row in self._rows)

    @property
    def rows(self) -> tuple:
        return self._rows

    @property
    def total_weight(self) -> float:
        return self._total_weight

    @property
    def period_count(self) -> int:
        return len(self._positions)

    def position_of(self, period_index: int) -> Optional[int]:
        '''Returns the row position of the given period, or None if there is no such period.'''
        return self._positions.get(period_index)

    def period_row(self, period_index: int) -> Optional[LayoutRow]:
        pos = self.position_of(period_index)
        return None if pos is None else self._rows[pos]

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[LayoutRow]:
        return iter(self._rows)

    def __str__(self) -> str:
        rows_str = ",\n\t".join(str(row) for row in self._rows)
        return f"Layout (total weight {self._total_weight:g}):\n\t{rows_str}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Builds a Layout from a list of row dictionaries.'''
        return Layout(LayoutRow.from_dict(item) for item in data)

    def to_dict(self) -> List[dict]:
        return [row.to_dict() for row in self._rows]


REFERENCE_LAYOUT = Layout.from_dict(DEFAULT_LAYOUT)
