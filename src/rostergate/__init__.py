"""
rostergate: cross-entity validation gate for client, worker and task tables.

Usage:
    from rostergate import Dataset, validate

    report = validate(clients=clients, workers=workers, tasks=tasks)
    report.ensure_valid()
"""

from .coerce import CoercionError
from .dataset import Dataset, RecordView
from .errors import (
    DatasetKindError,
    DatasetTypeError,
    InvalidDataError,
    RosterGateError,
    SchemaViolationError,
)
from .issues import Issue, Severity
from .report import ValidationReport, build_report
from .rules import DEFAULT_RULES, Rule, RuleSet
from .schema import CLIENTS, ENTITY_KINDS, REQUIRED_COLUMNS, TASKS, WORKERS
from .validator import DataValidator, validate

__version__ = '0.1.0'

__all__ = [
    'CLIENTS',
    'WORKERS',
    'TASKS',
    'ENTITY_KINDS',
    'REQUIRED_COLUMNS',
    'CoercionError',
    'Dataset',
    'RecordView',
    'Issue',
    'Severity',
    'Rule',
    'RuleSet',
    'DEFAULT_RULES',
    'DataValidator',
    'ValidationReport',
    'build_report',
    'validate',
    'RosterGateError',
    'SchemaViolationError',
    'DatasetTypeError',
    'DatasetKindError',
    'InvalidDataError',
]
