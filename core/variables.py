#!/usr/bin/env python3
"""
MyAdmin Variable Reader and Config Toggler

Reads single system variables and flips server-wide flags with a
set-then-read-back check:

    SET GLOBAL read_only = 1
    SELECT @@global.read_only AS val      -- must report 1

A failed confirmation never undoes the write. The server has already applied
it; the error only tells the caller the new state could not be verified.

Usage:
    conn = pymysql.connect(host='db1', user='admin', password='...')
    enable_read_only(conn)
    check_binlog_format_row_full(conn)
"""

import logging
from dataclasses import dataclass
from typing import Optional

from core.admin_sql import (
    MYSQL_CONNECTION_ID, MYSQL_UNLOCK_TABLES, Scope,
    select_variable_sql, set_global_sql,
)
from core.errors import (
    ConfigMismatchError, ConfirmationFailedError, NotFoundError,
    QueryFailedError, mysql_error_code,
)
from core.results import first_column, to_text

logger = logging.getLogger(__name__)

ER_UNKNOWN_SYSTEM_VARIABLE = 1193
UNKNOWN_VARIABLE_MESSAGE = "Unknown system variable"

BINLOG_FORMATS = ('ROW', 'STATEMENT', 'MIXED')

# Boolean variables come back as 1/0 from SELECT @@ but display as ON/OFF
_SWITCH_STATES = {'1': 'ON', 'ON': 'ON', '0': 'OFF', 'OFF': 'OFF'}


@dataclass(frozen=True)
class GlobalSwitch:
    """An on/off global variable and the tokens the server reports for it"""
    name: str
    on_token: str
    off_token: str
    on_value: str = "1"
    off_value: str = "0"


READ_ONLY = GlobalSwitch('read_only', on_token='1', off_token='0')
SUPER_READ_ONLY = GlobalSwitch('super_read_only', on_token='ON', off_token='OFF')
EVENT_SCHEDULER = GlobalSwitch('event_scheduler', on_token='ON', off_token='OFF')


@dataclass(frozen=True)
class ReadBack:
    """Raw outcome of a SET GLOBAL followed by SELECT @@global"""
    observed: str
    error: Optional[Exception] = None


@dataclass(frozen=True)
class ToggleResult:
    """Confirmed or failed outcome of a set-and-verify operation"""
    variable: str
    desired: str
    expected: str
    observed: str
    confirmed: bool
    reason: str = ""
    error: Optional[Exception] = None

    def raise_if_failed(self):
        """Raise QueryFailedError or ConfirmationFailedError unless confirmed"""
        if self.confirmed:
            return
        details = {
            'variable': self.variable,
            'desired': self.desired,
            'expected': self.expected,
            'observed': self.observed,
        }
        if not self.observed:
            raise QueryFailedError(self.reason, details) from self.error
        raise ConfirmationFailedError(self.reason, details) from self.error


def is_unknown_variable_error(exc: BaseException) -> bool:
    """True if the driver error says the system variable does not exist"""
    code = mysql_error_code(exc)
    if code is not None:
        return code == ER_UNKNOWN_SYSTEM_VARIABLE
    return UNKNOWN_VARIABLE_MESSAGE in str(exc)


def get_variable(connection, name: str, scope: Scope = Scope.GLOBAL) -> str:
    """
    Read one system variable as a string.

    Args:
        connection: Open DB-API connection
        name: Variable name, e.g. ``binlog_row_image``
        scope: Scope.GLOBAL or Scope.SESSION

    Returns:
        The value as the server reports it ('' for NULL)

    Raises:
        NotFoundError: the server does not know the variable
        QueryFailedError: any other failure, or no row returned
    """
    sql = select_variable_sql(name, scope)
    try:
        with connection.cursor() as cursor:
            cursor.execute(sql)
            row = cursor.fetchone()
    except Exception as e:
        if is_unknown_variable_error(e):
            raise NotFoundError(f"no such variable {name}", {'variable': name}) from e
        raise QueryFailedError(f"error to get value of var {name}: {e}", {'variable': name}) from e

    if row is None:
        raise QueryFailedError(f"error to get value of var {name}: no rows returned", {'variable': name})
    return to_text(first_column(row, 'val'))


def set_and_query_global_var(connection, var_name: str, desired_value) -> ReadBack:
    """
    Execute SET GLOBAL and read the variable back on the same connection.

    - SET fails: ``ReadBack('', error)``; no read-back is attempted.
    - Read-back fails: ``ReadBack(desired_value, error)``; the write most
      likely went through.
    - Read-back returns no rows: ``ReadBack('', None)``.
    """
    desired = to_text(desired_value)
    set_sql = set_global_sql(var_name, desired)
    query_sql = select_variable_sql(var_name, Scope.GLOBAL)

    logger.debug(f"Executing: {set_sql}")
    try:
        with connection.cursor() as cursor:
            cursor.execute(set_sql)
    except Exception as e:
        logger.debug(f"{set_sql} failed: {e}")
        return ReadBack("", e)

    try:
        with connection.cursor() as cursor:
            cursor.execute(query_sql)
            row = cursor.fetchone()
    except Exception as e:
        logger.debug(f"{query_sql} failed: {e}")
        return ReadBack(desired, e)

    if row is None:
        return ReadBack("")
    return ReadBack(to_text(first_column(row, 'val')))


def values_match(observed: str, expected: str) -> bool:
    """Compare a read-back value with the expected one (1/ON and 0/OFF are equal)"""
    if observed == expected:
        return True
    observed_state = _SWITCH_STATES.get(observed.upper())
    expected_state = _SWITCH_STATES.get(expected.upper())
    return observed_state is not None and observed_state == expected_state


def toggle_global_var(connection, var_name: str, desired_value, expected: str,
                      action: str = "set") -> ToggleResult:
    """Set a global variable and classify the read-back against ``expected``"""
    desired = to_text(desired_value)
    readback = set_and_query_global_var(connection, var_name, desired)
    observed = readback.observed

    def failed(reason: str) -> ToggleResult:
        return ToggleResult(var_name, desired, expected, observed, False, reason, readback.error)

    if not observed:
        if readback.error is None:
            return failed(f"error to {action} {var_name}: read back returned no rows")
        return failed(f"error to {action} {var_name}: {readback.error}")
    if readback.error is not None:
        return failed(f"OK to {action} {var_name}, but fail to read back value of {var_name}: {readback.error}")
    if not values_match(observed, expected):
        return failed(f"OK to {action} {var_name}, but then read back, "
                      f"the value of {var_name} is {observed}, not expected {expected}")
    return ToggleResult(var_name, desired, expected, observed, True)


def switch_global(connection, switch: GlobalSwitch, enabled: bool) -> ToggleResult:
    """Turn an on/off global variable on or off, raising if it is not confirmed"""
    if enabled:
        result = toggle_global_var(connection, switch.name, switch.on_value, switch.on_token, "enable")
    else:
        result = toggle_global_var(connection, switch.name, switch.off_value, switch.off_token, "disable")

    if result.confirmed:
        logger.info(f"{switch.name} is now {result.observed}")
    else:
        logger.warning(result.reason)
    result.raise_if_failed()
    return result


def enable_read_only(connection) -> ToggleResult:
    return switch_global(connection, READ_ONLY, True)


def disable_read_only(connection) -> ToggleResult:
    return switch_global(connection, READ_ONLY, False)


def enable_super_read_only(connection) -> ToggleResult:
    return switch_global(connection, SUPER_READ_ONLY, True)


def disable_super_read_only(connection) -> ToggleResult:
    return switch_global(connection, SUPER_READ_ONLY, False)


def enable_event_scheduler(connection) -> ToggleResult:
    return switch_global(connection, EVENT_SCHEDULER, True)


def disable_event_scheduler(connection) -> ToggleResult:
    return switch_global(connection, EVENT_SCHEDULER, False)


def set_binlog_format(connection, binlog_format: str) -> ToggleResult:
    """Set binlog_format to ROW, STATEMENT or MIXED and confirm it"""
    fmt = (binlog_format or "").upper()
    if fmt not in BINLOG_FORMATS:
        raise ValueError(f"Invalid binlog_format: {binlog_format}. Use one of {', '.join(BINLOG_FORMATS)}.")

    result = toggle_global_var(connection, 'binlog_format', fmt, fmt, "set")
    if result.confirmed:
        logger.info(f"binlog_format is now {result.observed}")
    else:
        logger.warning(result.reason)
    result.raise_if_failed()
    return result


def check_binlog_format_row_full(connection) -> None:
    """
    Require binlog_format=ROW and binlog_row_image=FULL.

    Servers without binlog_row_image (MySQL < 5.6) pass on the format check
    alone.
    """
    value = get_variable(connection, 'binlog_format', Scope.GLOBAL)
    if value != 'ROW':
        raise ConfigMismatchError(f"binlog_format={value}, must be ROW",
                                  {'variable': 'binlog_format', 'value': value})

    try:
        value = get_variable(connection, 'binlog_row_image', Scope.GLOBAL)
    except NotFoundError:
        logger.debug("binlog_row_image not supported by this server, skipping")
        return

    if value != 'FULL':
        raise ConfigMismatchError(f"binlog_row_image={value}, must be FULL",
                                  {'variable': 'binlog_row_image', 'value': value})


def get_connection_id(connection) -> int:
    """Return CONNECTION_ID() of the given connection"""
    try:
        with connection.cursor() as cursor:
            cursor.execute(MYSQL_CONNECTION_ID)
            row = cursor.fetchone()
    except Exception as e:
        raise QueryFailedError(f"error to get connection id: {e}") from e

    if row is None:
        raise QueryFailedError("error to get connection id: no rows returned")
    return int(first_column(row, 'id'))


def unlock_all_tables(connection) -> None:
    """Release table locks held by this session (UNLOCK TABLES)"""
    try:
        with connection.cursor() as cursor:
            cursor.execute(MYSQL_UNLOCK_TABLES)
    except Exception as e:
        raise QueryFailedError(f"error to unlock tables: {e}") from e
