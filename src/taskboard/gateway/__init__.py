"""Gateway layer - contracts, row mapping and HTTP implementations."""

from src.taskboard.gateway.mappers import (
    MODELS,
    TABLES,
    from_row,
    record_to_row,
    rows_to_records,
    to_row,
)
from src.taskboard.gateway.protocols import (
    AuthSession,
    NotificationFeed,
    NotificationHandler,
    RemoteDataGateway,
    Row,
    Subscription,
    Table,
    UserProvisioner,
)
from src.taskboard.gateway.rest import FunctionUserProvisioner, PostgrestGateway

__all__ = [
    # Contracts
    "AuthSession",
    "NotificationFeed",
    "NotificationHandler",
    "RemoteDataGateway",
    "Row",
    "Subscription",
    "Table",
    "UserProvisioner",
    # Mapping
    "MODELS",
    "TABLES",
    "from_row",
    "record_to_row",
    "rows_to_records",
    "to_row",
    # HTTP
    "FunctionUserProvisioner",
    "PostgrestGateway",
]
