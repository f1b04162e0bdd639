"""
Exception hierarchy.

Data-quality problems never raise; they become Issues. These exceptions
cover caller mistakes (precondition violations) and the export gate.
"""


class RosterGateError(Exception):
    """Base class for all rostergate exceptions."""


class SchemaViolationError(RosterGateError):
    """A row introduces a column that is not declared in the headers."""


class DatasetTypeError(RosterGateError, TypeError):
    """A value passed as a dataset is not a Dataset."""


class DatasetKindError(RosterGateError, ValueError):
    """A dataset is registered under an unknown or mismatched entity kind."""


class InvalidDataError(RosterGateError):
    """
    Raised by the export gate when a report is not valid.

    The offending report is kept on ``report`` so callers can surface
    the issues that blocked export.
    """

    def __init__(self, report, message=None):
        self.report = report
        if message is None:
            message = (
                f"data failed validation with {len(report.issues)} issue(s); "
                f"do not use it for allocation"
            )
        super().__init__(message)
