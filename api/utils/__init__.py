"""Utility modules."""
from api.utils.file_utils import is_json_upload, read_upload_limited, safe_child_path
from api.utils.json_utils import json_load, read_json_file
from api.utils.time_utils import parse_iso_timestamp, utc_now
from api.utils.validation import parse_test_type, validate_id

__all__ = [
    "is_json_upload",
    "read_upload_limited",
    "safe_child_path",
    "json_load",
    "read_json_file",
    "parse_iso_timestamp",
    "utc_now",
    "parse_test_type",
    "validate_id",
]
