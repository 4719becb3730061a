"""
Truck record mapper.

Rewrites a partial truck record so its field names match the columns that
actually exist on the live ``trucks`` table. Pure: output depends only on
the record and the ColumnAvailability passed in.

Per ambiguous field:
1. canonical (snake_case) column present -> keep the canonical name
2. alternate column present -> write under the alternate name
3. neither present -> drop the field (no error)

``current_project``'s alternate is the numeric ``project_id`` column, so a
current-project value is only written there when it parses as an integer.
When ``project_id`` exists the parsed integer is written to it in addition
to whatever happened to ``current_project``.
"""

import re
from typing import Any, Dict, Optional

from haulops.services.schema_service import ColumnAvailability

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_project_id(value: Any) -> Optional[int]:
    """Parse a project reference as an integer (leading digits, like a form field)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value))
    if not match:
        return None
    return int(match.group(1))


def _rename(record: Dict[str, Any], canonical: str, alternate: str,
            columns: ColumnAvailability) -> None:
    if canonical not in record:
        return
    value = record.pop(canonical)
    if getattr(columns, canonical):
        record[canonical] = value
    elif getattr(columns, alternate):
        record[alternate] = value


def adapt_truck_to_schema(truck: Dict[str, Any], columns: ColumnAvailability) -> Dict[str, Any]:
    """
    Return a copy of ``truck`` that is safe to write to the live schema.

    Args:
        truck: Partial truck record using canonical field names
        columns: Column availability of the ``trucks`` table

    Returns:
        New dict; the input is not modified.
    """
    adapted = dict(truck)

    _rename(adapted, "load_volume", "loadVolume", columns)
    _rename(adapted, "plate_number", "plateNumber", columns)

    if "current_project" in adapted:
        value = adapted.pop("current_project")
        if columns.current_project:
            adapted["current_project"] = value

        if columns.project_id and value:
            project_id = parse_project_id(value)
            if project_id is not None:
                adapted["project_id"] = project_id

    return adapted
