"""Shared test fixtures and path setup."""
import sys
from pathlib import Path

# Add src/ to sys.path so tests can import rostergate without installing
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

import pytest
import pandas as pd

from rostergate import Dataset


CLIENT_HEADERS = [
    'ClientID', 'ClientName', 'PriorityLevel', 'RequestedTaskIDs', 'GroupTag', 'AttributesJSON',
]
WORKER_HEADERS = [
    'WorkerID', 'WorkerName', 'Skills', 'AvailableSlots', 'MaxLoadPerPhase',
    'WorkerGroup', 'QualificationLevel',
]
TASK_HEADERS = [
    'TaskID', 'TaskName', 'Category', 'Duration', 'RequiredSkills', 'PreferredPhases',
    'MaxConcurrent',
]


# --- Clean roster: passes every rule ---

@pytest.fixture
def clean_clients():
    return Dataset.from_records('clients', [
        {'ClientID': 'C1', 'ClientName': 'Acme Corp', 'PriorityLevel': '3',
         'RequestedTaskIDs': 'T1,T2', 'GroupTag': 'GroupA', 'AttributesJSON': '{"location": "NY"}'},
        {'ClientID': 'C2', 'ClientName': 'Globex', 'PriorityLevel': 5,
         'RequestedTaskIDs': 'T3', 'GroupTag': 'GroupB', 'AttributesJSON': ''},
        {'ClientID': 'C3', 'ClientName': 'Initech', 'PriorityLevel': '1',
         'RequestedTaskIDs': ' T1 , T3 ', 'GroupTag': 'GroupA', 'AttributesJSON': '{}'},
    ], headers=CLIENT_HEADERS, file_name='clients.csv')


@pytest.fixture
def clean_workers():
    return Dataset.from_records('workers', [
        {'WorkerID': 'W1', 'WorkerName': 'Ada', 'Skills': 'python,sql',
         'AvailableSlots': '[1, 2, 3]', 'MaxLoadPerPhase': '2', 'WorkerGroup': 'GroupA',
         'QualificationLevel': '4'},
        {'WorkerID': 'W2', 'WorkerName': 'Grace', 'Skills': 'python, design',
         'AvailableSlots': '[2, 4]', 'MaxLoadPerPhase': 1, 'WorkerGroup': 'GroupB',
         'QualificationLevel': '5'},
        {'WorkerID': 'W3', 'WorkerName': 'Linus', 'Skills': 'sql,ops',
         'AvailableSlots': [1, 5], 'MaxLoadPerPhase': '2', 'WorkerGroup': 'GroupA',
         'QualificationLevel': '3'},
    ], headers=WORKER_HEADERS, file_name='workers.csv')


@pytest.fixture
def clean_tasks():
    return Dataset.from_records('tasks', [
        {'TaskID': 'T1', 'TaskName': 'ETL', 'Category': 'Data', 'Duration': '2',
         'RequiredSkills': 'python', 'PreferredPhases': '[1, 2]', 'MaxConcurrent': '2'},
        {'TaskID': 'T2', 'TaskName': 'Reports', 'Category': 'Data', 'Duration': 1,
         'RequiredSkills': 'sql', 'PreferredPhases': '[3]', 'MaxConcurrent': 1},
        {'TaskID': 'T3', 'TaskName': 'Mockups', 'Category': 'Design', 'Duration': '1.5',
         'RequiredSkills': 'python,design', 'PreferredPhases': [2, 4], 'MaxConcurrent': '1'},
    ], headers=TASK_HEADERS, file_name='tasks.csv')


@pytest.fixture
def clean_datasets(clean_clients, clean_workers, clean_tasks):
    return {'clients': clean_clients, 'workers': clean_workers, 'tasks': clean_tasks}


# --- Messy roster: each rule fires at least once ---

@pytest.fixture
def messy_datasets():
    clients = Dataset.from_records('clients', [
        {'ClientID': 'C1', 'ClientName': 'Acme', 'PriorityLevel': '0',
         'RequestedTaskIDs': 'T1, T9', 'AttributesJSON': '{"broken": '},
        {'ClientID': 'C1', 'ClientName': 'Acme again', 'PriorityLevel': '3',
         'RequestedTaskIDs': 'T2', 'AttributesJSON': '{}'},
    ], headers=[h for h in CLIENT_HEADERS if h != 'GroupTag'])
    workers = Dataset.from_records('workers', [
        {'WorkerID': 'W1', 'WorkerName': 'Ada', 'Skills': 'python',
         'AvailableSlots': '[1, "two"]', 'MaxLoadPerPhase': '3', 'WorkerGroup': 'A',
         'QualificationLevel': '4'},
        {'WorkerID': 'W2', 'WorkerName': 'Grace', 'Skills': 'python',
         'AvailableSlots': '[1]', 'MaxLoadPerPhase': '3', 'WorkerGroup': 'A',
         'QualificationLevel': '4'},
    ], headers=WORKER_HEADERS)
    tasks = Dataset.from_records('tasks', [
        {'TaskID': 'T1', 'TaskName': 'ETL', 'Category': 'Data', 'Duration': '-1',
         'RequiredSkills': 'python,rust', 'PreferredPhases': 'phase one', 'MaxConcurrent': '1'},
        {'TaskID': 'T2', 'TaskName': 'Scripts', 'Category': 'Data', 'Duration': '3',
         'RequiredSkills': 'python', 'PreferredPhases': '[1]', 'MaxConcurrent': '5'},
    ], headers=TASK_HEADERS)
    return {'clients': clients, 'workers': workers, 'tasks': tasks}


@pytest.fixture
def tasks_frame():
    """Tasks as a collaborator's CSV parser would hand them over."""
    return pd.DataFrame({
        'TaskID': ['T1', 'T2', 'T3'],
        'TaskName': ['ETL', 'Reports', None],
        'Category': ['Data', 'Data', 'Design'],
        'Duration': [2, 1, 3],
        'RequiredSkills': ['python', 'sql', 'design'],
        'PreferredPhases': ['[1, 2]', '[3]', None],
        'MaxConcurrent': [1, 1, 2],
    })
