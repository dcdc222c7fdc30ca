"""
Compact JSON serialization of ECS records.
"""

import json
from typing import Any


def stringify(record: Any) -> str:
    """
    Serialize a record as one compact JSON line.

    Key order is preserved. Values JSON cannot represent (framework objects,
    datetimes) are rendered with str().
    """
    return json.dumps(record, separators=(",", ":"), ensure_ascii=False, default=str)
