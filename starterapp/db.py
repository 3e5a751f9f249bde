"""Database connection and schema migration."""

from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine

from .config import ApiSettings, api_settings
from .entities import Base, Event, Participant

ODBC_DRIVER = "ODBC Driver 18 for SQL Server"

_log = logging.getLogger(__name__)


def build_connection_string(settings: ApiSettings) -> str:
    """Return the SQL Server data source string for a service principal login."""
    return (
        f"server={settings.db_host};"
        f"user id={settings.aad_sp_client_id}@{settings.aad_sp_tenant_id};"
        f"password={settings.aad_sp_client_secret};"
        f"port={settings.db_port};"
        f"database={settings.db_database};"
        f"fedauth={settings.db_fedauth};"
    )


def _odbc_value(value: str) -> str:
    if any(ch in value for ch in ";{}"):
        return "{" + value.replace("}", "}}") + "}"
    return value


def _odbc_connect(settings: ApiSettings) -> str:
    server = settings.db_host
    if settings.db_port:
        server = f"{server},{settings.db_port}"
    parts = {
        "Driver": "{" + ODBC_DRIVER + "}",
        "Server": _odbc_value(server),
        "Database": _odbc_value(settings.db_database),
        "UID": _odbc_value(f"{settings.aad_sp_client_id}@{settings.aad_sp_tenant_id}"),
        "PWD": _odbc_value(settings.aad_sp_client_secret),
    }
    if settings.db_fedauth:
        parts["Authentication"] = _odbc_value(settings.db_fedauth)
    return "".join(f"{key}={value};" for key, value in parts.items())


def create_db_engine(settings: ApiSettings) -> Engine:
    """Create an engine for the configured SQL Server database, logging statements."""
    url = URL.create("mssql+pyodbc", query={"odbc_connect": _odbc_connect(settings)})
    return create_engine(url, echo=True)


def migrate(engine: Engine) -> list[str]:
    """Create the event and participant tables if missing; return their names."""
    tables = [Event.__table__, Participant.__table__]
    Base.metadata.create_all(engine, tables=tables)
    return [table.name for table in tables]


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the schema migration against the configured database."""
    parser = argparse.ArgumentParser(description="Create the application's database tables.")
    parser.add_argument("--url", help="database URL to use instead of the configured server")
    args = parser.parse_args(argv)

    engine = create_engine(args.url) if args.url else create_db_engine(api_settings())
    try:
        created = migrate(engine)
    finally:
        engine.dispose()
    _log.info("Migrated tables: %s", ", ".join(created))
    return 0