"""Session-scoped selection of up to three listings for side-by-side display."""

from __future__ import annotations

from typing import Generic, List, Sequence, Tuple, TypeVar

from ..models.property import ComparisonRow, PropertyRecord
from ..utils.formatting import format_number, format_price, type_label

MAX_COMPARE = 3

R = TypeVar("R", bound=PropertyRecord)


class ComparisonError(Exception):
    """A comparison change was rejected; the set is left untouched."""

    def __init__(self, message: str, property_id: int) -> None:
        super().__init__(message)
        self.property_id = property_id


class AlreadyPresent(ComparisonError):
    def __init__(self, property_id: int) -> None:
        super().__init__("Property is already in comparison", property_id)


class CapacityExceeded(ComparisonError):
    def __init__(self, property_id: int, capacity: int = MAX_COMPARE) -> None:
        super().__init__(f"You can only compare up to {capacity} properties at once", property_id)
        self.capacity = capacity


class ComparisonSet(Generic[R]):
    def __init__(self, capacity: int = MAX_COMPARE) -> None:
        self.capacity = capacity
        self._records: List[R] = []

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(tuple(self._records))

    @property
    def records(self) -> Tuple[R, ...]:
        return tuple(self._records)

    @property
    def ids(self) -> List[int]:
        return [record.id for record in self._records]

    @property
    def is_full(self) -> bool:
        return len(self._records) >= self.capacity

    def contains(self, property_id: int) -> bool:
        return any(record.id == property_id for record in self._records)

    def add(self, record: R) -> None:
        if self.contains(record.id):
            raise AlreadyPresent(record.id)
        if self.is_full:
            raise CapacityExceeded(record.id, self.capacity)
        self._records.append(record)

    def remove(self, property_id: int) -> None:
        self._records = [record for record in self._records if record.id != property_id]

    def clear(self) -> None:
        self._records = []

    def toggle(self, record: R) -> bool:
        """Remove the record if selected, otherwise add it. Returns membership."""
        if self.contains(record.id):
            self.remove(record.id)
            return False
        self.add(record)
        return True


def comparison_rows(records: Sequence[PropertyRecord]) -> List[ComparisonRow]:
    if not records:
        return []

    def row(label: str, values) -> ComparisonRow:
        return ComparisonRow(label=label, values=list(values))

    return [
        row("Price", (format_price(r.price, r.status) for r in records)),
        row("Location", (f"{r.location.city}, {r.location.state}" for r in records)),
        row("Bedrooms", (format_number(r.bedrooms) for r in records)),
        row("Bathrooms", (format_number(r.bathrooms) for r in records)),
        row("Square Feet", (format_number(r.square_feet) for r in records)),
        row("Property Type", (type_label(r.property_type) for r in records)),
        row("Year Built", (str(r.year_built) for r in records)),
        row("Lot Size", (f"{format_number(r.lot_size)} acres" if r.lot_size > 0 else "N/A" for r in records)),
        row("Garage", (f"{format_number(r.garage)} cars" if r.garage > 0 else "None" for r in records)),
    ]


__all__ = [
    "MAX_COMPARE",
    "ComparisonError",
    "AlreadyPresent",
    "CapacityExceeded",
    "ComparisonSet",
    "comparison_rows",
]
