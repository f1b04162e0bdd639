"""
Validation rule definitions.

Each rule is a named pure function from the input datasets to a list of
Issues. Rules share no state and do not depend on each other's output;
DEFAULT_RULES fixes the order they run in, which only affects the order
of issues in the report.

A rule emits nothing when a dataset it needs is absent.
"""

from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, List, Mapping, Optional, Set

import pandas as pd

from .coerce import CoercionError, is_blank
from .dataset import Dataset
from .issues import Issue, Severity
from .schema import (
    CLIENTS,
    DURATION_MIN,
    ENTITY_KINDS,
    ID_COLUMNS,
    NUMBER_LIST_COLUMNS,
    PRIORITY_MAX,
    PRIORITY_MIN,
    TASKS,
    WORKERS,
)

Datasets = Mapping[str, Dataset]
CheckFn = Callable[[Datasets], List[Issue]]


@dataclass(frozen=True)
class Rule:
    """
    A single named check.

    Attributes:
        code: Rule code reported on every Issue (e.g. 'V2').
        name: Short description of what the rule checks.
        severity: Severity of every Issue the rule emits.
        check: Pure function (datasets) -> issues.
    """
    code: str
    name: str
    severity: Severity
    check: CheckFn

    def evaluate(self, datasets: Datasets) -> List[Issue]:
        """Run this rule against the datasets and return its issues."""
        return list(self.check(datasets))


def _hashable(value):
    # Ids decoded from JSON may be lists; compare them by their text
    try:
        hash(value)
    except TypeError:
        return repr(value)
    return value


# --- V1 ----------------------------------------------------------------------

def check_required_columns(datasets: Datasets) -> List[Issue]:
    """V1: every required column is declared in the headers."""
    issues = []
    for kind in ENTITY_KINDS:
        dataset = datasets.get(kind)
        if dataset is None:
            continue
        for column in dataset.missing_columns():
            issues.append(Issue.create(
                'V1', Severity.ERROR,
                message=f"Missing required column: {column}",
                file=kind,
                column=column,
                suggestion=f"Add column '{column}' to your {kind} file",
            ))
    return issues


# --- V2 ----------------------------------------------------------------------

def check_duplicate_ids(datasets: Datasets) -> List[Issue]:
    """
    V2: id values are unique within each table.

    Every row holding a repeated id is reported, so an id that occurs
    three times yields three issues. Blank ids are not compared.
    """
    issues = []
    for kind in ENTITY_KINDS:
        dataset = datasets.get(kind)
        id_column = ID_COLUMNS[kind]
        if dataset is None or not dataset.has_column(id_column):
            continue

        keys = pd.Series(
            [None if is_blank(value) else _hashable(value)
             for value in dataset.column_values(id_column)],
            dtype=object,
        )
        counts = keys.dropna().value_counts()
        repeated = set(counts[counts > 1].index)
        if not repeated:
            continue

        for view in dataset.views():
            key = keys.iloc[view.index]
            if key is None or key not in repeated:
                continue
            value = view.raw(id_column)
            issues.append(Issue.create(
                'V2', Severity.ERROR,
                message=f"Duplicate ID found: {value}",
                file=kind,
                row=view.index,
                column=id_column,
                value=value,
                suggestion=f"Make sure each {id_column} is unique",
            ))
    return issues


# --- V3 ----------------------------------------------------------------------

def check_number_lists(datasets: Datasets) -> List[Issue]:
    """
    V3: phase-list columns decode to arrays of numbers.

    Only string cells are decoded; values that arrive already decoded
    are trusted.
    """
    issues = []
    for kind, columns in NUMBER_LIST_COLUMNS.items():
        dataset = datasets.get(kind)
        if dataset is None:
            continue
        for column in columns:
            if not dataset.has_column(column):
                continue
            for view in dataset.views():
                if not isinstance(view.raw(column), str):
                    continue
                try:
                    view.number_list(column)
                except CoercionError as exc:
                    issues.append(Issue.create(
                        'V3', Severity.ERROR,
                        message=f"Malformed list in {column}: {exc.value} ({exc.reason})",
                        file=kind,
                        row=view.index,
                        column=column,
                        value=exc.value,
                        suggestion="Format as JSON array: [1, 2, 3]",
                    ))
    return issues


# --- V4 ----------------------------------------------------------------------

def _out_of_range(kind: str, view, column: str, message: str, suggestion: str) -> Issue:
    return Issue.create(
        'V4', Severity.ERROR,
        message=message,
        file=kind,
        row=view.index,
        column=column,
        value=view.raw(column),
        suggestion=suggestion,
    )


def check_value_ranges(datasets: Datasets) -> List[Issue]:
    """
    V4: PriorityLevel is an integer in 1..5 and Duration is at least 1.

    A blank or non-numeric value is reported the same way as an
    out-of-range one.
    """
    issues = []

    clients = datasets.get(CLIENTS)
    if clients is not None and clients.has_column('PriorityLevel'):
        for view in clients.views():
            try:
                priority = view.integer('PriorityLevel')
            except CoercionError:
                priority = None
            if priority is None or not PRIORITY_MIN <= priority <= PRIORITY_MAX:
                issues.append(_out_of_range(
                    CLIENTS, view, 'PriorityLevel',
                    f"PriorityLevel must be between {PRIORITY_MIN}-{PRIORITY_MAX}, "
                    f"got: {view.raw('PriorityLevel')}",
                    f"Set PriorityLevel to a whole number between {PRIORITY_MIN} and {PRIORITY_MAX}",
                ))

    tasks = datasets.get(TASKS)
    if tasks is not None and tasks.has_column('Duration'):
        for view in tasks.views():
            try:
                duration = view.number('Duration')
            except CoercionError:
                duration = None
            if duration is None or duration < DURATION_MIN:
                issues.append(_out_of_range(
                    TASKS, view, 'Duration',
                    f"Duration must be >= {DURATION_MIN:g}, got: {view.raw('Duration')}",
                    f"Set Duration to a number greater than or equal to {DURATION_MIN:g}",
                ))

    return issues


# --- V5 ----------------------------------------------------------------------

def check_attributes_json(datasets: Datasets) -> List[Issue]:
    """V5: AttributesJSON, when present, is well-formed JSON."""
    clients = datasets.get(CLIENTS)
    if clients is None or not clients.has_column('AttributesJSON'):
        return []

    issues = []
    for view in clients.views():
        try:
            view.json('AttributesJSON')
        except CoercionError as exc:
            issues.append(Issue.create(
                'V5', Severity.ERROR,
                message=f"Invalid JSON in AttributesJSON ({exc.reason})",
                file=CLIENTS,
                row=view.index,
                column='AttributesJSON',
                value=exc.value,
                suggestion="Fix JSON syntax or use {} for empty object",
            ))
    return issues


# --- V6 ----------------------------------------------------------------------

def check_task_references(datasets: Datasets) -> List[Issue]:
    """V6: every task id a client requests exists in the tasks table."""
    clients = datasets.get(CLIENTS)
    tasks = datasets.get(TASKS)
    if clients is None or tasks is None or not clients.has_column('RequestedTaskIDs'):
        return []

    known = {view.text('TaskID') for view in tasks.views()}
    known.discard(None)

    issues = []
    for view in clients.views():
        reported: Set[str] = set()
        for task_id in view.items('RequestedTaskIDs'):
            if task_id in known or task_id in reported:
                continue
            reported.add(task_id)
            issues.append(Issue.create(
                'V6', Severity.ERROR,
                message=f"Unknown TaskID reference: {task_id}",
                file=CLIENTS,
                row=view.index,
                column='RequestedTaskIDs',
                value=task_id,
                suggestion=f"Make sure TaskID '{task_id}' exists in the tasks file",
                discriminator=task_id,
            ))
    return issues


# --- V9 ----------------------------------------------------------------------

def check_worker_load(datasets: Datasets) -> List[Issue]:
    """
    V9: a worker has at least as many available slots as MaxLoadPerPhase.

    Rows whose slots or load cannot be read are skipped; V3 already
    reports malformed slot lists.
    """
    workers = datasets.get(WORKERS)
    if workers is None:
        return []

    issues = []
    for view in workers.views():
        try:
            slots = view.number_list('AvailableSlots')
            max_load = view.integer('MaxLoadPerPhase')
        except CoercionError:
            continue
        if slots is None or max_load is None:
            continue

        if len(slots) < max_load:
            issues.append(Issue.create(
                'V9', Severity.WARNING,
                message=(
                    f"Worker has MaxLoadPerPhase ({max_load}) > "
                    f"AvailableSlots count ({len(slots)})"
                ),
                file=WORKERS,
                row=view.index,
                column='MaxLoadPerPhase',
                value=max_load,
                suggestion=(
                    f"Reduce MaxLoadPerPhase to {len(slots)} or add more available slots"
                ),
                discriminator='overload',
            ))
    return issues


# --- V11 / V12 ---------------------------------------------------------------

def _worker_skill_sets(workers: Dataset) -> List[FrozenSet[str]]:
    """Skill set of each worker that lists any skills."""
    skill_sets = []
    for view in workers.views():
        skills = view.items('Skills')
        if skills:
            skill_sets.append(frozenset(skills))
    return skill_sets


def check_skill_coverage(datasets: Datasets) -> List[Issue]:
    """V11: every skill a task requires is held by at least one worker."""
    workers = datasets.get(WORKERS)
    tasks = datasets.get(TASKS)
    if workers is None or tasks is None:
        return []

    available: Set[str] = set()
    for skills in _worker_skill_sets(workers):
        available |= skills

    issues = []
    for view in tasks.views():
        reported: Set[str] = set()
        for skill in view.items('RequiredSkills'):
            if skill in available or skill in reported:
                continue
            reported.add(skill)
            issues.append(Issue.create(
                'V11', Severity.ERROR,
                message=f"No worker has required skill: {skill}",
                file=TASKS,
                row=view.index,
                column='RequiredSkills',
                value=skill,
                suggestion=f"Add a worker with skill '{skill}' or remove this skill requirement",
                discriminator=skill,
            ))
    return issues


def check_concurrency_feasibility(datasets: Datasets) -> List[Issue]:
    """
    V12: enough qualified workers exist to run a task at MaxConcurrent.

    A worker qualifies when their skills contain all of the task's
    required skills. Counts are memoised per distinct skill requirement.
    """
    workers = datasets.get(WORKERS)
    tasks = datasets.get(TASKS)
    if workers is None or tasks is None:
        return []

    skill_sets = _worker_skill_sets(workers)
    qualified: Dict[FrozenSet[str], int] = {}

    issues = []
    for view in tasks.views():
        try:
            max_concurrent = view.integer('MaxConcurrent')
        except CoercionError:
            continue
        if max_concurrent is None:
            continue

        required = frozenset(view.items('RequiredSkills'))
        if required not in qualified:
            qualified[required] = sum(1 for skills in skill_sets if required <= skills)
        count = qualified[required]

        if max_concurrent > count:
            issues.append(Issue.create(
                'V12', Severity.WARNING,
                message=f"MaxConcurrent ({max_concurrent}) exceeds qualified workers ({count})",
                file=TASKS,
                row=view.index,
                column='MaxConcurrent',
                value=max_concurrent,
                suggestion=f"Reduce MaxConcurrent to {count} or add more qualified workers",
                discriminator='concurrency',
            ))
    return issues


DEFAULT_RULES = (
    Rule('V1', 'required columns', Severity.ERROR, check_required_columns),
    Rule('V2', 'duplicate ids', Severity.ERROR, check_duplicate_ids),
    Rule('V3', 'malformed number lists', Severity.ERROR, check_number_lists),
    Rule('V4', 'out-of-range values', Severity.ERROR, check_value_ranges),
    Rule('V5', 'broken JSON', Severity.ERROR, check_attributes_json),
    Rule('V6', 'unknown task references', Severity.ERROR, check_task_references),
    Rule('V9', 'overloaded workers', Severity.WARNING, check_worker_load),
    Rule('V11', 'skill coverage', Severity.ERROR, check_skill_coverage),
    Rule('V12', 'concurrency feasibility', Severity.WARNING, check_concurrency_feasibility),
)


class RuleSet:
    """
    An ordered collection of rules that run together.

    Usage:
        rules = RuleSet("roster")
        rules.add(DEFAULT_RULES[0]).add(DEFAULT_RULES[1])
        issues = rules.evaluate(datasets)
    """

    def __init__(self, name: str = 'default', rules: Optional[List[Rule]] = None):
        self.name = name
        self.rules: List[Rule] = list(rules or [])

    def add(self, rule: Rule) -> 'RuleSet':
        self.rules.append(rule)
        return self

    def get(self, code: str) -> Optional[Rule]:
        for rule in self.rules:
            if rule.code == code:
                return rule
        return None

    def evaluate(self, datasets: Datasets) -> List[List[Issue]]:
        """Issues of each rule, in rule order."""
        return [rule.evaluate(datasets) for rule in self.rules]

    def __iter__(self):
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)
