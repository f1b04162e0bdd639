"""
Issue model.

An Issue is one reported defect: which rule found it, how severe it
is, and where it sits (file, row, column). Issues are immutable and
carry a deterministic id so the same defect gets the same id on every
run.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .coerce import is_missing


class Severity(str, Enum):
    ERROR = 'error'
    WARNING = 'warning'
    INFO = 'info'


@dataclass(frozen=True)
class Issue:
    """A single defect found by a rule."""
    id: str
    rule_code: str
    severity: Severity
    message: str
    file: str
    row: Optional[int] = None
    column: Optional[str] = None
    value: Any = None
    suggestion: Optional[str] = None

    @staticmethod
    def make_id(rule_code: str, file: str, row: Optional[int], discriminator: Any) -> str:
        """
        Deterministic id from the defect's location.

        ``discriminator`` is the column name for cell-level defects and
        the offending value where one cell can hold several defects
        (an unknown task id, a missing skill).
        """
        parts = [rule_code, file]
        if row is not None:
            parts.append(str(row))
        parts.append(str(discriminator))
        return '-'.join(parts)

    @classmethod
    def create(
        cls,
        rule_code: str,
        severity: Severity,
        message: str,
        file: str,
        row: Optional[int] = None,
        column: Optional[str] = None,
        value: Any = None,
        suggestion: Optional[str] = None,
        discriminator: Any = None,
    ) -> 'Issue':
        if discriminator is None:
            discriminator = column
        return cls(
            id=cls.make_id(rule_code, file, row, discriminator),
            rule_code=rule_code,
            severity=Severity(severity),
            message=message,
            file=file,
            row=row,
            column=column,
            value=value,
            suggestion=suggestion,
        )

    @property
    def location(self) -> str:
        where = self.file
        if self.row is not None:
            where += f" row {self.row}"
        if self.column:
            where += f" [{self.column}]"
        return where

    def to_dict(self) -> Dict[str, Any]:
        """JSON-compatible form; absent optional fields and missing values are omitted."""
        out: Dict[str, Any] = {
            'id': self.id,
            'ruleCode': self.rule_code,
            'severity': self.severity.value,
            'message': self.message,
            'file': self.file,
        }
        optional = (
            ('row', self.row),
            ('column', self.column),
            ('value', None if is_missing(self.value) else self.value),
            ('suggestion', self.suggestion),
        )
        for key, val in optional:
            if val is not None:
                out[key] = val
        return out
