#!/usr/bin/env python3
"""
Example: Validate a clients / workers / tasks roster before allocation.

Loads the three CSV files with pandas, runs the full rule set, prints the
report, and shows how an export step gates on the result.

Usage:
    python examples/validate_roster.py [data_dir]
"""

import json
import logging
import sys
from pathlib import Path

import pandas as pd

sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from rostergate import ENTITY_KINDS, Dataset, InvalidDataError, validate

DATA_DIR = Path(__file__).parent / 'data'


def load_roster(data_dir: Path) -> dict:
    """
    Read <kind>.csv for each entity kind that exists in data_dir.

    Every column is read as text, the way an upload parser hands cells
    over; the engine does its own coercion.
    """
    datasets = {}
    for kind in ENTITY_KINDS:
        path = data_dir / f"{kind}.csv"
        if not path.exists():
            print(f"  {kind}: no file, skipping")
            continue
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
        datasets[kind] = Dataset.from_frame(kind, df, file_name=path.name)
        print(f"  {kind}: {len(df):,} rows x {len(df.columns)} columns from {path.name}")
    return datasets


def main():
    logging.basicConfig(level=logging.INFO, format='%(name)s %(levelname)s %(message)s')

    data_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else DATA_DIR
    print(f"Loading roster from {data_dir} ...")
    datasets = load_roster(data_dir)

    report = validate(datasets)
    report.print_summary()
    report.print_failures()

    # Errors-only view, as a UI panel might filter it
    print(f"\nErrors only: {len(report.errors_only())} of {report.total}")

    try:
        report.ensure_valid()
    except InvalidDataError as exc:
        print(f"\nExport blocked: {exc}")
    else:
        print("\nExport allowed.")

    print("\nReport JSON (first 2 issues):")
    payload = report.to_dict()
    payload['issues'] = payload['issues'][:2]
    del payload['issuesByFile']
    print(json.dumps(payload, indent=2))


if __name__ == '__main__':
    main()
