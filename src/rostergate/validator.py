"""
Core validation engine.

DataValidator runs an ordered rule set against the clients, workers and
tasks datasets and produces a ValidationReport. Every caller (upload,
re-validation, edit handlers) goes through ``validate`` so the rule set
lives in one place.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from .dataset import Dataset
from .errors import DatasetKindError, DatasetTypeError
from .issues import Issue
from .report import ValidationReport, build_report
from .rules import DEFAULT_RULES, Rule, RuleSet
from .schema import ENTITY_KINDS


def normalize_datasets(datasets: Mapping[str, Optional[Dataset]]) -> Mapping[str, Dataset]:
    """
    Check the caller's input and drop absent datasets.

    Raises:
        DatasetKindError: A key is not an entity kind, or a dataset is
            registered under a key that differs from its own kind.
        DatasetTypeError: A value is neither None nor a Dataset.
    """
    present: Dict[str, Dataset] = {}
    for kind, dataset in datasets.items():
        if kind not in ENTITY_KINDS:
            raise DatasetKindError(f"unknown entity kind {kind!r}; expected one of {ENTITY_KINDS}")
        if dataset is None:
            continue
        if not isinstance(dataset, Dataset):
            raise DatasetTypeError(
                f"{kind} must be a Dataset, got {type(dataset).__name__}"
            )
        if dataset.kind != kind:
            raise DatasetKindError(f"{dataset.kind} dataset passed as {kind!r}")
        present[kind] = dataset
    return MappingProxyType(present)


class DataValidator:
    """
    Validate a trio of datasets against an ordered rule set.

    Usage:
        from rostergate import DataValidator, Dataset

        v = DataValidator("upload")
        report = v.validate({"clients": clients, "workers": workers, "tasks": tasks})
        report.print_summary()

        if not report.is_valid:
            report.print_failures()

    Args:
        name: Name of this validation run, carried onto the report.
        rules: Rules to run, in order. Defaults to V1..V12.
        max_workers: Threads used to evaluate rules. 1 runs them
            sequentially; the report is identical either way.
    """

    def __init__(self, name: str = 'validation', rules: Optional[List[Rule]] = None,
                 max_workers: int = 1):
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self.name = name
        self.max_workers = max_workers
        self._ruleset = RuleSet(name, list(DEFAULT_RULES) if rules is None else rules)
        self.logger = logging.getLogger(self.__class__.__name__)

    def add_rule(self, rule: Rule) -> 'DataValidator':
        """Add a single rule."""
        self._ruleset.add(rule)
        return self

    def add_rules(self, rules: List[Rule]) -> 'DataValidator':
        """Add multiple rules at once."""
        for rule in rules:
            self._ruleset.add(rule)
        return self

    @property
    def rule_count(self) -> int:
        return len(self._ruleset)

    @property
    def rule_codes(self) -> List[str]:
        return [rule.code for rule in self._ruleset]

    def _run_rule(self, rule: Rule, datasets: Mapping[str, Dataset]) -> List[Issue]:
        issues = rule.evaluate(datasets)
        self.logger.debug(f"{rule.code} ({rule.name}): {len(issues)} issue(s)")
        return issues

    def _evaluate(self, datasets: Mapping[str, Dataset]) -> List[List[Issue]]:
        rules = list(self._ruleset)
        if self.max_workers == 1 or len(rules) < 2:
            return [self._run_rule(rule, datasets) for rule in rules]

        # map() yields in submission order, so output order is rule order
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            return list(pool.map(lambda rule: self._run_rule(rule, datasets), rules))

    def validate(self, datasets: Mapping[str, Optional[Dataset]]) -> ValidationReport:
        """
        Run all rules against the datasets.

        Absent datasets (missing keys or None) are skipped by the rules
        that need them. Returns a ValidationReport; data problems never
        raise.
        """
        present = normalize_datasets(datasets)
        per_rule = self._evaluate(present)
        issues = [issue for rule_issues in per_rule for issue in rule_issues]

        row_counts = {kind: len(dataset) for kind, dataset in present.items()}
        report = build_report(issues, name=self.name, row_counts=row_counts)

        self.logger.info(
            f"{self.name}: {sum(row_counts.values()):,} rows in "
            f"{len(present)}/{len(ENTITY_KINDS)} datasets, "
            f"{report.total} issue(s), valid={report.is_valid}"
        )
        return report


def validate(
    datasets: Optional[Mapping[str, Optional[Dataset]]] = None,
    *,
    clients: Optional[Dataset] = None,
    workers: Optional[Dataset] = None,
    tasks: Optional[Dataset] = None,
    max_workers: int = 1,
) -> ValidationReport:
    """
    Validate datasets with the default rule set.

    Datasets can be passed as a mapping or by keyword; keywords win.
    """
    merged: Dict[str, Optional[Dataset]] = dict(datasets or {})
    for kind, dataset in (('clients', clients), ('workers', workers), ('tasks', tasks)):
        if dataset is not None:
            merged[kind] = dataset
    return DataValidator(max_workers=max_workers).validate(merged)
