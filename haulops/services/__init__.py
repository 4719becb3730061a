"""
Service layer for the HaulOps backend.

Services wrap Supabase table, RPC and metadata calls for trucks, trips,
operators and projects. They normalize backend failures into empty lists,
fallback values or ``QueryResult`` pairs so routes stay simple.

Services act as the glue between routes (HTTP layer) and the database.
"""

from .cache import MISSING, ReadThroughCache
from .operator_service import (
    check_login_exists,
    create_operator,
    delete_operator,
    get_operators,
    update_operator,
    update_operator_projects,
    update_operator_trucks,
)
from .project_service import (
    complete_project,
    create_project,
    delete_project,
    get_active_projects,
    get_clients,
    get_clients_with_projects,
    get_completed_projects,
    get_projects,
    update_project,
)
from .record_mapper import adapt_truck_to_schema
from .schema_service import (
    ColumnAvailability,
    ColumnAvailabilityMemo,
    SchemaVerificationError,
    SchemaVerificationUnavailable,
    check_table_columns,
    missing_column_groups,
    probe_columns_by_select,
    repair_trucks_schema,
    verify_table_schema,
)
from .trip_service import (
    DailyVolumeResult,
    get_daily_volume,
    get_ongoing_trips,
    get_trip_history,
    resolve_daily_volume,
)
from .truck_service import (
    create_truck,
    delete_truck,
    get_active_trucks,
    get_inactive_trucks,
    get_trucks,
    update_truck,
)

__all__ = [
    "MISSING",
    "ReadThroughCache",
    "get_operators",
    "check_login_exists",
    "create_operator",
    "update_operator",
    "delete_operator",
    "update_operator_trucks",
    "update_operator_projects",
    "get_projects",
    "get_active_projects",
    "get_completed_projects",
    "create_project",
    "update_project",
    "complete_project",
    "delete_project",
    "get_clients",
    "get_clients_with_projects",
    "adapt_truck_to_schema",
    "ColumnAvailability",
    "ColumnAvailabilityMemo",
    "SchemaVerificationError",
    "SchemaVerificationUnavailable",
    "check_table_columns",
    "probe_columns_by_select",
    "verify_table_schema",
    "missing_column_groups",
    "repair_trucks_schema",
    "DailyVolumeResult",
    "resolve_daily_volume",
    "get_daily_volume",
    "get_ongoing_trips",
    "get_trip_history",
    "get_trucks",
    "get_active_trucks",
    "get_inactive_trucks",
    "create_truck",
    "update_truck",
    "delete_truck",
]
