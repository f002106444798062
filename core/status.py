#!/usr/bin/env python3
"""
MyAdmin Status Reader

Bulk readers for SHOW GLOBAL STATUS / VARIABLES and the replication and
InnoDB status statements.
"""

import logging
from typing import Any, Dict, List, Optional

from core.admin_sql import (
    MYSQL_ALL_SLAVES_STATUS, MYSQL_GLOBAL_STATUS, MYSQL_GLOBAL_VARIABLES,
    MYSQL_INNODB_STATUS, MYSQL_MASTER_STATUS, MYSQL_SLAVE_STATUS,
)
from core.errors import EmptyResultError, QueryFailedError
from core.results import name_value, row_to_dict, to_text

logger = logging.getLogger(__name__)


def _fetch_all(connection, sql: str):
    """Run a query and return (rows, description)"""
    try:
        with connection.cursor() as cursor:
            cursor.execute(sql)
            rows = cursor.fetchall()
            description = cursor.description
    except Exception as e:
        raise QueryFailedError(f"error to execute '{sql}': {e}", {'sql': sql}) from e
    return list(rows or []), description


def show_global_status(connection) -> Dict[str, int]:
    """
    Read SHOW GLOBAL STATUS into a name -> int mapping.

    Rows with non-integer values (e.g. Ssl_cipher, Rsa_public_key) are
    skipped.

    Raises:
        QueryFailedError: the statement failed
        EmptyResultError: no integer-valued row was returned
    """
    status: Dict[str, int] = {}
    try:
        rows, _ = _fetch_all(connection, MYSQL_GLOBAL_STATUS)
    except QueryFailedError as e:
        e.details['status'] = status
        raise

    for row in rows:
        name, value = name_value(row)
        try:
            status[to_text(name)] = int(to_text(value))
        except ValueError:
            logger.debug(f"Skipping non-numeric status {name}={value!r}")
            continue

    if not status:
        raise EmptyResultError(f"'{MYSQL_GLOBAL_STATUS}' returned no numeric rows", {'status': status})
    return status


def show_global_variables(connection) -> Dict[str, str]:
    """Read SHOW GLOBAL VARIABLES into a name -> str mapping"""
    rows, _ = _fetch_all(connection, MYSQL_GLOBAL_VARIABLES)
    variables = {}
    for row in rows:
        name, value = name_value(row)
        variables[to_text(name)] = to_text(value)

    if not variables:
        raise EmptyResultError(f"'{MYSQL_GLOBAL_VARIABLES}' returned no rows", {'variables': variables})
    return variables


def show_slave_status(connection) -> List[Dict[str, Any]]:
    """Rows of SHOW SLAVE STATUS (empty list on a server that is not a replica)"""
    rows, description = _fetch_all(connection, MYSQL_SLAVE_STATUS)
    return [row_to_dict(row, description) for row in rows]


def show_all_slaves_status(connection) -> List[Dict[str, Any]]:
    """Rows of SHOW ALL SLAVES STATUS (MariaDB multi-source replication)"""
    rows, description = _fetch_all(connection, MYSQL_ALL_SLAVES_STATUS)
    return [row_to_dict(row, description) for row in rows]


def show_master_status(connection) -> Optional[Dict[str, Any]]:
    """The SHOW MASTER STATUS row, or None when binary logging is off"""
    rows, description = _fetch_all(connection, MYSQL_MASTER_STATUS)
    if not rows:
        return None
    return row_to_dict(rows[0], description)


def show_engine_innodb_status(connection) -> str:
    """The text report from SHOW ENGINE INNODB STATUS"""
    rows, description = _fetch_all(connection, MYSQL_INNODB_STATUS)
    if not rows:
        raise EmptyResultError(f"'{MYSQL_INNODB_STATUS}' returned no rows")
    record = row_to_dict(rows[0], description)
    if 'Status' in record:
        return to_text(record['Status'])
    # Type, Name, Status
    row = rows[0]
    values = list(row.values()) if isinstance(row, dict) else list(row)
    return to_text(values[-1])


def merge_status(base: Dict[str, int], override: Dict[str, int]) -> Dict[str, int]:
    """
    Combine two status snapshots into a new dict.

    Keys present in ``override`` win. Neither input is modified.
    """
    merged = dict(base)
    merged.update(override)
    return merged
