"""
Validation report generation.

Groups issues by the file they implicate, counts them, and derives the
single validity flag downstream consumers gate on.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .errors import InvalidDataError
from .issues import Issue, Severity
from .schema import ENTITY_KINDS


def partition_by_file(issues: Sequence[Issue]) -> Dict[str, List[Issue]]:
    """
    Stable partition of issues by file.

    The three entity files are always present (possibly empty); any
    other file follows in order of first appearance.
    """
    grouped: Dict[str, List[Issue]] = {kind: [] for kind in ENTITY_KINDS}
    for issue in issues:
        grouped.setdefault(issue.file, []).append(issue)
    return grouped


@dataclass(frozen=True)
class ValidationReport:
    """
    Structured output from a validation run.

    Attributes:
        issues: Every issue, in rule order.
        issues_by_file: Issues partitioned by file, emission order kept.
        counts_by_file: Number of issues per file.
        name: Name of the validation run.
        row_counts: Rows checked per supplied dataset.
    """
    issues: tuple
    issues_by_file: Mapping[str, tuple]
    counts_by_file: Mapping[str, int]
    name: str = 'validation'
    row_counts: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def is_valid(self) -> bool:
        """True only when no issue of any severity was found."""
        return len(self.issues) == 0

    @property
    def total(self) -> int:
        return len(self.issues)

    @property
    def has_errors(self) -> bool:
        """True if any issue has error severity."""
        return any(i.severity is Severity.ERROR for i in self.issues)

    def by_severity(self, severity) -> List[Issue]:
        severity = Severity(severity)
        return [i for i in self.issues if i.severity is severity]

    def errors_only(self) -> List[Issue]:
        return self.by_severity(Severity.ERROR)

    def by_rule(self, code: str) -> List[Issue]:
        return [i for i in self.issues if i.rule_code == code]

    def severity_counts(self) -> Dict[str, int]:
        counts = {s.value: 0 for s in Severity}
        for issue in self.issues:
            counts[issue.severity.value] += 1
        return counts

    def issues_for_row(self, file: str, row: int) -> List[Issue]:
        """Issues pinned to one row of one file."""
        return [i for i in self.issues_by_file.get(file, ()) if i.row == row]

    def rows_with_issues(self, file: str) -> List[int]:
        """Sorted row indexes of a file that have at least one issue."""
        return sorted({i.row for i in self.issues_by_file.get(file, ()) if i.row is not None})

    def ensure_valid(self) -> 'ValidationReport':
        """
        Gate for export and allocation.

        Returns the report when it is valid, otherwise raises
        InvalidDataError.
        """
        if not self.is_valid:
            raise InvalidDataError(self)
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            'issues': [i.to_dict() for i in self.issues],
            'issuesByFile': {
                file: [i.to_dict() for i in issues]
                for file, issues in self.issues_by_file.items()
            },
            'countsByFile': dict(self.counts_by_file),
            'isValid': self.is_valid,
        }

    def print_summary(self) -> None:
        """Print a concise summary to stdout."""
        status = 'VALID' if self.is_valid else 'INVALID'
        severities = self.severity_counts()
        print(f"\n{'=' * 60}")
        print(f"  Validation: {self.name}")
        print(f"  Status:     {status}")
        print(
            f"  Issues:     {self.total} "
            f"({severities['error']} errors, {severities['warning']} warnings, "
            f"{severities['info']} info)"
        )
        for file, count in self.counts_by_file.items():
            rows = self.row_counts.get(file)
            checked = f"{rows:,} rows" if rows is not None else 'not supplied'
            print(f"  {file:<11} {count} issue(s), {checked}")
        print(f"{'=' * 60}")

    def print_failures(self) -> None:
        """Print every issue, grouped by file."""
        if self.is_valid:
            print("  No issues.")
            return

        for file, issues in self.issues_by_file.items():
            if not issues:
                continue
            print(f"\n  {file} ({len(issues)}):")
            print(f"  {'-' * 56}")
            for issue in issues:
                print(f"  {issue.severity.value.upper():<8} {issue.rule_code:<4} {issue.location}")
                print(f"           {issue.message}")
                if issue.suggestion:
                    print(f"           hint: {issue.suggestion}")


def build_report(
    issues: Sequence[Issue],
    name: str = 'validation',
    row_counts: Optional[Dict[str, int]] = None,
) -> ValidationReport:
    """Build a report from a flat issue list."""
    issues = tuple(issues)
    grouped = partition_by_file(issues)
    return ValidationReport(
        issues=issues,
        issues_by_file=MappingProxyType({file: tuple(items) for file, items in grouped.items()}),
        counts_by_file=MappingProxyType({file: len(items) for file, items in grouped.items()}),
        name=name,
        row_counts=MappingProxyType(dict(row_counts or {})),
    )
