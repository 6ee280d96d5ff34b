#!/usr/bin/env python3
"""
Check maintenance calendar data files (schedules and tracking) against schema.yaml.

Usage:
  validate_yaml.py                 # every data/*.yaml and data/*.yml
  validate_yaml.py plant.yaml ...  # the given files
"""
import sys
from pathlib import Path
from typing import List, Optional

import yaml
from jsonschema import validate, ValidationError

ROOT = Path(__file__).parent
DATA_DIR = ROOT / "data"


def load_schema() -> dict:
    """Data file schema, stored as YAML next to this script."""
    with open(ROOT / "schema.yaml") as f:
        return yaml.safe_load(f)


def validate_data_file(filepath: Path, schema: dict) -> List[str]:
    """Problems found in one data file; empty when it is valid."""
    try:
        with open(filepath) as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return [f"YAML parse error: {e}"]
    except OSError as e:
        return [f"Error: cannot read data file: {e}"]

    try:
        validate(instance=_stringify_dates(content), schema=schema)
    except ValidationError as e:
        problems = [f"Schema validation error: {e.message}"]
        if e.path:
            location = ".".join(str(p) for p in e.path)
            problems.append(f"  at path: {location}")
        return problems
    return []


def _stringify_dates(value):
    """Unquoted YAML dates load as date objects; the schema expects strings."""
    if isinstance(value, dict):
        return {k: _stringify_dates(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_stringify_dates(v) for v in value]
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


def find_data_files(paths: List[str]) -> Optional[List[Path]]:
    """Files named on the command line, else the data directory; None if it is missing."""
    if paths:
        return [Path(p) for p in paths]
    if not DATA_DIR.exists():
        return None
    return sorted(DATA_DIR.glob("*.yaml")) + sorted(DATA_DIR.glob("*.yml"))


def main(argv=None):
    """Returns 0 when every data file is valid, 1 otherwise."""
    files = find_data_files(sys.argv[1:] if argv is None else argv)
    if files is None:
        print(f"Error: data directory not found: {DATA_DIR}")
        return 1
    if not files:
        print("Warning: no schedule or tracking files to check")
        return 0

    schema = load_schema()
    failed = 0
    for filepath in files:
        problems = validate_data_file(filepath, schema)
        if not problems:
            print(f"OK: {filepath.name}")
            continue
        failed += 1
        print(f"FAIL: {filepath.name}")
        for problem in problems:
            print(f"  {problem}")

    print(f"{len(files) - failed} of {len(files)} data files valid")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
