"""
Dataset and record model.

A Dataset is one parsed table: its declared headers, its rows, the
entity kind it holds and the file it came from. Datasets are immutable;
an edit upstream produces a new Dataset.

RecordView wraps a single row and is the only way rules read cells.
It returns None for blank cells and routes every conversion through
``coerce``, so a bad value always fails the same way.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from . import coerce
from .errors import DatasetKindError, SchemaViolationError
from .schema import REQUIRED_COLUMNS, is_entity_kind

Record = Mapping[str, Any]


@dataclass(frozen=True)
class Dataset:
    """
    One parsed table for a single entity kind.

    Attributes:
        kind: Entity kind ('clients', 'workers' or 'tasks').
        headers: Ordered column names as declared by the source.
        rows: Ordered rows; each row's keys must be a subset of headers.
        file_name: Origin file name, for display only.
    """
    kind: str
    headers: Tuple[str, ...]
    rows: Tuple[Record, ...] = ()
    file_name: Optional[str] = None
    _header_set: frozenset = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not is_entity_kind(self.kind):
            raise DatasetKindError(f"unknown entity kind {self.kind!r}")

        headers = tuple(self.headers)
        header_set = frozenset(headers)
        rows = []
        for index, row in enumerate(self.rows):
            undeclared = [key for key in row if key not in header_set]
            if undeclared:
                raise SchemaViolationError(
                    f"{self.kind} row {index} has undeclared columns: {undeclared}"
                )
            rows.append(MappingProxyType(dict(row)))

        # Frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, 'headers', headers)
        object.__setattr__(self, 'rows', tuple(rows))
        object.__setattr__(self, '_header_set', header_set)

    @classmethod
    def from_records(
        cls,
        kind: str,
        records: Iterable[Record],
        headers: Optional[Sequence[str]] = None,
        file_name: Optional[str] = None,
    ) -> 'Dataset':
        """
        Build a Dataset from row dicts.

        When ``headers`` is omitted it is inferred from the records in
        order of first appearance.
        """
        records = list(records)
        if headers is None:
            seen: Dict[str, None] = {}
            for record in records:
                for key in record:
                    seen.setdefault(key, None)
            headers = list(seen)
        return cls(kind=kind, headers=tuple(headers), rows=tuple(records), file_name=file_name)

    @classmethod
    def from_frame(cls, kind: str, df: pd.DataFrame, file_name: Optional[str] = None) -> 'Dataset':
        """
        Build a Dataset from a DataFrame.

        Missing cells (NaN, None) are left out of the row rather than
        stored, so they read as blank.
        """
        headers = [str(col) for col in df.columns]
        frame = df.astype(object)
        frame.columns = headers
        records = [
            {col: value for col, value in row.items() if not coerce.is_missing(value)}
            for row in frame.to_dict(orient='records')
        ]
        return cls(kind=kind, headers=tuple(headers), rows=tuple(records), file_name=file_name)

    def to_frame(self) -> pd.DataFrame:
        """Return the table as an object-dtype DataFrame (blank cells are None)."""
        data = [[row.get(col) for col in self.headers] for row in self.rows]
        return pd.DataFrame(data, columns=list(self.headers), dtype=object)

    def has_column(self, column: str) -> bool:
        return column in self._header_set

    def missing_columns(self) -> List[str]:
        """Required columns for this kind that the headers do not declare."""
        return [col for col in REQUIRED_COLUMNS[self.kind] if col not in self._header_set]

    def views(self) -> Iterator['RecordView']:
        """Iterate typed accessors over the rows, in row order."""
        for index, row in enumerate(self.rows):
            yield RecordView(self.kind, index, row)

    def column_values(self, column: str) -> List[Any]:
        """Raw values of one column, None where a row omits it."""
        return [row.get(column) for row in self.rows]

    def __len__(self) -> int:
        return len(self.rows)


class RecordView:
    """
    Schema-aware accessor over one row.

    Every typed getter returns None when the cell is blank and raises
    ``coerce.CoercionError`` when the cell is present but unreadable.
    """

    __slots__ = ('kind', 'index', '_row')

    def __init__(self, kind: str, index: int, row: Record):
        self.kind = kind
        self.index = index
        self._row = row

    def raw(self, column: str) -> Any:
        """The cell exactly as supplied (None if the row omits it)."""
        return self._row.get(column)

    def is_blank(self, column: str) -> bool:
        return coerce.is_blank(self._row.get(column))

    def _present(self, column: str) -> Any:
        value = self._row.get(column)
        return None if coerce.is_blank(value) else value

    def text(self, column: str) -> Optional[str]:
        value = self._present(column)
        return None if value is None else str(value).strip()

    def integer(self, column: str) -> Optional[int]:
        value = self._present(column)
        return None if value is None else coerce.to_int(value)

    def number(self, column: str) -> Optional[float]:
        value = self._present(column)
        return None if value is None else coerce.to_float(value)

    def number_list(self, column: str) -> Optional[List[float]]:
        value = self._present(column)
        return None if value is None else coerce.to_number_list(value)

    def json(self, column: str) -> Any:
        value = self._present(column)
        return None if value is None else coerce.to_json(value)

    def items(self, column: str) -> List[str]:
        """Comma-separated list items; empty when the cell is blank."""
        value = self._present(column)
        return [] if value is None else coerce.to_items(value)

    def __repr__(self) -> str:
        return f"RecordView({self.kind!r}, row={self.index})"
