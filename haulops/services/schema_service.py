"""
Schema service.

The ``trucks`` table has been migrated by hand more than once, and live
projects disagree on several column names (``current_project`` vs
``project_id``, ``load_volume`` vs ``loadVolume``, ``plate_number`` vs
``plateNumber``). This module finds out which variants exist so writes can
be adapted before they reach the backend.

Probing strategies:
- Primary: the ``execute_sql`` RPC against ``information_schema.columns``
- Fallback: a zero-row select per candidate column

Probe results are not cached here. ``ColumnAvailabilityMemo`` keeps the first
successful result per table for the lifetime of the process; it has no TTL,
so a column added or renamed later is not seen until restart.
"""

import asyncio
import logging
from dataclasses import asdict, dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

from supabase import Client

from haulops.db.query import error_message, execute_query, is_undefined_column_error

logger = logging.getLogger(__name__)

# Attribute name -> lower-cased column name as reported by information_schema
CANDIDATE_COLUMNS: Dict[str, str] = {
    "current_project": "current_project",
    "project_id": "project_id",
    "load_volume": "load_volume",
    "loadVolume": "loadvolume",
    "plate_number": "plate_number",
    "plateNumber": "platenumber",
}

# (canonical, alternate) pairs surfaced in schema warnings
COLUMN_PAIRS = [
    ("load_volume", "loadVolume"),
    ("current_project", "project_id"),
    ("plate_number", "plateNumber"),
]


class SchemaVerificationError(Exception):
    """Raised when no probing strategy could read a table's columns."""


class SchemaVerificationUnavailable(SchemaVerificationError):
    """Raised when schema verification keeps failing after all retries."""


@dataclass(frozen=True)
class ColumnAvailability:
    """
    Which of the historically renamed columns exist on a table.

    Produced fresh by every probe.
    """
    current_project: bool = False
    project_id: bool = False
    load_volume: bool = False
    loadVolume: bool = False
    plate_number: bool = False
    plateNumber: bool = False

    @classmethod
    def from_column_names(cls, column_names: List[str]) -> "ColumnAvailability":
        present = {name.lower() for name in column_names}
        return cls(**{
            attr: column in present
            for attr, column in CANDIDATE_COLUMNS.items()
        })

    @classmethod
    def permissive(cls) -> "ColumnAvailability":
        """Degraded default used when the schema cannot be verified: legacy plain names only."""
        return cls(current_project=True, load_volume=True, plate_number=True)

    def to_dict(self) -> Dict[str, bool]:
        return asdict(self)


def _column_names_from_payload(data: Any) -> List[str]:
    """Read column names out of an ``execute_sql`` payload (strings or row dicts)."""
    if data is None:
        return []
    if not isinstance(data, list):
        raise SchemaVerificationError(
            f"Unexpected execute_sql payload type: {type(data).__name__}"
        )

    names: List[str] = []
    for row in data:
        if isinstance(row, str):
            names.append(row.lower())
        elif isinstance(row, dict) and row.get("column_name"):
            names.append(str(row["column_name"]).lower())
    return names


async def probe_columns_by_select(client: Client, table_name: str) -> ColumnAvailability:
    """
    Probe candidate columns with zero-row selects.

    A column is absent when the backend answers with an undefined-column
    error. Any other error leaves that column unverified (reported absent).

    Raises:
        SchemaVerificationError: If no candidate column could be verified.
    """
    flags: Dict[str, bool] = {}
    failures: List[str] = []

    for attr in CANDIDATE_COLUMNS:
        try:
            client.table(table_name).select(attr).limit(0).execute()
            flags[attr] = True
        except Exception as e:
            if is_undefined_column_error(e):
                flags[attr] = False
            else:
                flags[attr] = False
                failures.append(f"{attr}: {error_message(e)}")

    if len(failures) == len(CANDIDATE_COLUMNS):
        raise SchemaVerificationError(
            f"Could not probe any column of '{table_name}': {failures[0]}"
        )

    if failures:
        logger.warning(f"Partial column probe for '{table_name}': {failures}")

    return ColumnAvailability(**flags)


FallbackProber = Callable[[Client, str], Awaitable[ColumnAvailability]]


async def check_table_columns(
    client: Client,
    table_name: str,
    fallback: FallbackProber = probe_columns_by_select,
) -> ColumnAvailability:
    """
    Determine which candidate columns exist on a table.

    Args:
        client: Supabase client
        table_name: Table to inspect (in the ``public`` schema)
        fallback: Alternate prober used when the metadata query fails

    Returns:
        ColumnAvailability for the table as of this call

    Raises:
        SchemaVerificationError: If both strategies fail.
    """
    sql_query = (
        "SELECT column_name FROM information_schema.columns "
        f"WHERE table_name = '{table_name}' AND table_schema = 'public'"
    )

    try:
        response = client.rpc("execute_sql", {"sql_query": sql_query}).execute()
        column_names = _column_names_from_payload(response.data)
    except Exception as e:
        logger.warning(
            f"Metadata query for '{table_name}' failed ({error_message(e)}); "
            "probing columns directly"
        )
        return await fallback(client, table_name)

    columns = ColumnAvailability.from_column_names(column_names)
    logger.debug(f"Columns for '{table_name}': {columns}")
    return columns


async def verify_table_schema(
    client: Client,
    table_name: str,
    attempts: int = 3,
    delay_seconds: float = 1.0,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> ColumnAvailability:
    """
    Probe a table with a bounded retry loop.

    Raises:
        SchemaVerificationUnavailable: After ``attempts`` failed probes.
    """
    last_error: Optional[Exception] = None

    for attempt in range(1, attempts + 1):
        try:
            return await check_table_columns(client, table_name)
        except SchemaVerificationError as e:
            last_error = e
            logger.error(f"Schema check for '{table_name}' attempt {attempt} failed: {e}")
            if attempt < attempts:
                await sleep(delay_seconds)

    raise SchemaVerificationUnavailable(
        f"Schema verification unavailable for '{table_name}' "
        f"after {attempts} attempts: {last_error}"
    )


def missing_column_groups(columns: ColumnAvailability) -> List[str]:
    """List ``canonical/alternate`` labels for pairs with neither variant present."""
    flags = columns.to_dict()
    return [
        f"{canonical}/{alternate}"
        for canonical, alternate in COLUMN_PAIRS
        if not flags[canonical] and not flags[alternate]
    ]


class ColumnAvailabilityMemo:
    """
    First-success memo of column availability per table.

    Once a table has been probed successfully its result is kept for the
    life of this object. Failed verifications fall back to the permissive
    default without being remembered, so the next call probes again.
    """

    def __init__(self, attempts: int = 3, delay_seconds: float = 1.0):
        self.attempts = attempts
        self.delay_seconds = delay_seconds
        self._columns: Dict[str, ColumnAvailability] = {}

    def peek(self, table_name: str) -> Optional[ColumnAvailability]:
        return self._columns.get(table_name)

    async def get(self, client: Client, table_name: str) -> ColumnAvailability:
        known = self._columns.get(table_name)
        if known is not None:
            return known

        try:
            columns = await verify_table_schema(
                client,
                table_name,
                attempts=self.attempts,
                delay_seconds=self.delay_seconds,
            )
        except SchemaVerificationUnavailable as e:
            logger.warning(f"{e}; assuming legacy column names")
            return ColumnAvailability.permissive()

        # Concurrent first probes may both finish; the first stored wins
        return self._columns.setdefault(table_name, columns)


def _execute_sql_safely(client: Client, sql_query: str) -> bool:
    result = execute_query(
        client.rpc("execute_sql", {"sql_query": sql_query}),
        f"execute_sql ({sql_query})"
    )
    return result.ok


async def repair_trucks_schema(client: Client) -> bool:
    """
    Add or rename missing ``trucks`` columns through the ``execute_sql`` RPC.

    Returns:
        True when the repair pass ran, False when the table could not be probed.
    """
    try:
        columns = await probe_columns_by_select(client, "trucks")
    except SchemaVerificationError as e:
        logger.error(f"Cannot repair trucks schema: {e}")
        return False

    if not columns.current_project:
        _execute_sql_safely(client, "ALTER TABLE trucks ADD COLUMN current_project TEXT;")

    if not columns.project_id:
        _execute_sql_safely(client, "ALTER TABLE trucks ADD COLUMN project_id INTEGER;")

    if not columns.load_volume and not columns.loadVolume:
        _execute_sql_safely(client, "ALTER TABLE trucks ADD COLUMN load_volume INTEGER;")
    elif not columns.load_volume and columns.loadVolume:
        _execute_sql_safely(client, "ALTER TABLE trucks RENAME COLUMN loadvolume TO load_volume;")

    logger.info(f"Trucks schema repair finished (columns before repair: {columns})")
    return True
