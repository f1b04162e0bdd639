"""
Expected table schemas.

The three entity kinds and the column vocabulary every rule refers to.
These are fixed; they are not read from input data.
"""

from typing import Dict, Tuple

CLIENTS = 'clients'
WORKERS = 'workers'
TASKS = 'tasks'

ENTITY_KINDS: Tuple[str, ...] = (CLIENTS, WORKERS, TASKS)

REQUIRED_COLUMNS: Dict[str, Tuple[str, ...]] = {
    CLIENTS: (
        'ClientID',
        'ClientName',
        'PriorityLevel',
        'RequestedTaskIDs',
        'GroupTag',
        'AttributesJSON',
    ),
    WORKERS: (
        'WorkerID',
        'WorkerName',
        'Skills',
        'AvailableSlots',
        'MaxLoadPerPhase',
        'WorkerGroup',
        'QualificationLevel',
    ),
    TASKS: (
        'TaskID',
        'TaskName',
        'Category',
        'Duration',
        'RequiredSkills',
        'PreferredPhases',
        'MaxConcurrent',
    ),
}

ID_COLUMNS: Dict[str, str] = {
    CLIENTS: 'ClientID',
    WORKERS: 'WorkerID',
    TASKS: 'TaskID',
}

# Columns holding a JSON array of phase numbers
NUMBER_LIST_COLUMNS: Dict[str, Tuple[str, ...]] = {
    WORKERS: ('AvailableSlots',),
    TASKS: ('PreferredPhases',),
}

PRIORITY_MIN = 1
PRIORITY_MAX = 5
DURATION_MIN = 1.0


def is_entity_kind(kind: str) -> bool:
    return kind in REQUIRED_COLUMNS
