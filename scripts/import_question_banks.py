#!/usr/bin/env python3
"""
Bulk import of question banks into the database.

This script:
1. Scans a directory for files named <type>_<id>.json (e.g. chapter_1.json, mock_2.json)
2. Validates each file the same way the upload endpoint does
3. Stores valid banks, replacing any previously uploaded set

Usage:
    python scripts/import_question_banks.py path/to/banks
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from api.database import SessionLocal, init_db
from api.services.question_service import save_bank
from api.utils import read_json_file
from models import TestType
from serialization import QuestionBankError, parse_question_bank


def parse_bank_name(path: Path) -> tuple[TestType, str] | None:
    """Split a file stem like ``mock_3`` into (TestType.MOCK, "3")."""
    kind, sep, test_id = path.stem.partition("_")
    if not sep or not test_id:
        return None
    try:
        return TestType(kind.lower()), test_id
    except ValueError:
        return None


def import_banks(source: Path) -> bool:
    """Main import function."""
    files = sorted(source.glob("*.json"))
    print(f"Found {len(files)} JSON files in {source}")

    init_db()
    db = SessionLocal()
    imported = 0
    failed = 0
    try:
        for path in files:
            parsed = parse_bank_name(path)
            if parsed is None:
                print(f"  Skipping {path.name}: expected <chapter|mock>_<id>.json")
                continue
            test_type, test_id = parsed
            try:
                questions = parse_question_bank(read_json_file(path, []), test_type)
            except (QuestionBankError, json.JSONDecodeError) as e:
                print(f"  FAILED {path.name}: {e}")
                failed += 1
                continue
            save_bank(db, test_type, test_id, questions)
            imported += 1
            print(f"  Imported {len(questions)} questions for {test_type.value} {test_id}")
    except Exception as e:
        db.rollback()
        print(f"ERROR: Import failed: {e}")
        return False
    finally:
        db.close()

    print(f"\nImported {imported} banks, {failed} failed")
    return failed == 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Import question bank JSON files")
    parser.add_argument("source", type=Path, help="Directory with <type>_<id>.json files")
    args = parser.parse_args()

    print("=== Question Bank Import ===\n")
    success = import_banks(args.source)
    sys.exit(0 if success else 1)
