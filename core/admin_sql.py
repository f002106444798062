#!/usr/bin/env python3
"""
Administrative SQL statements for MySQL/MariaDB

Statements here are built by string formatting because MySQL does not accept
bound parameters for variable names in SET GLOBAL / SELECT @@. Safety is
provided by:
1. Identifier validation (variable names checked against a pattern)
2. Literal validation (values restricted to integers, bare words, or simple
   quoted strings)
3. Writable variable whitelist (SET GLOBAL only accepted for known names)
"""

import re
from enum import Enum

# Fixed statements
MYSQL_ALIVE_QUERY = "SELECT 1"
MYSQL_GLOBAL_STATUS = "SHOW GLOBAL STATUS"
MYSQL_GLOBAL_VARIABLES = "SHOW GLOBAL VARIABLES"
MYSQL_SLAVE_STATUS = "SHOW SLAVE STATUS"
MYSQL_ALL_SLAVES_STATUS = "SHOW ALL SLAVES STATUS"
MYSQL_MASTER_STATUS = "SHOW MASTER STATUS"
MYSQL_INNODB_STATUS = "SHOW ENGINE INNODB STATUS"
MYSQL_UNLOCK_TABLES = "UNLOCK TABLES"
MYSQL_CONNECTION_ID = "SELECT CONNECTION_ID() AS id"

# Global variables that the toggler is allowed to write
WRITABLE_GLOBAL_VARIABLES = {
    'read_only', 'super_read_only', 'event_scheduler',
    'binlog_format', 'binlog_row_image',
    'sync_binlog', 'innodb_flush_log_at_trx_commit',
    'offline_mode', 'max_connections',
}

# Pattern for valid variable names (alphanumeric + underscore only)
IDENTIFIER_PATTERN = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_]*$')

# Integers, bare words (ON, ROW, ...), or single-quoted strings without quotes/backslashes
LITERAL_PATTERN = re.compile(r"^(?:-?\d+|[a-zA-Z_][a-zA-Z0-9_]*|'[^'\\]*')$")


class Scope(Enum):
    """Variable scope"""
    GLOBAL = "global"
    SESSION = "session"


def validate_identifier(name: str) -> bool:
    """Check that a variable name is safe to format into a statement"""
    if not name or not isinstance(name, str):
        return False
    return bool(IDENTIFIER_PATTERN.match(name))


def validate_literal(value: str) -> bool:
    """Check that a value is safe to format into a SET statement"""
    if value is None:
        return False
    return bool(LITERAL_PATTERN.match(str(value)))


def select_variable_sql(name: str, scope: Scope = Scope.GLOBAL) -> str:
    """Build ``SELECT @@<scope>.<name> AS val``"""
    if not validate_identifier(name):
        raise ValueError(f"Invalid variable name: {name!r}")
    return f"SELECT @@{Scope(scope).value}.{name} AS val"


def set_global_sql(name: str, value) -> str:
    """Build ``SET GLOBAL <name> = <value>`` for a whitelisted variable"""
    if not validate_identifier(name):
        raise ValueError(f"Invalid variable name: {name!r}")
    if name.lower() not in WRITABLE_GLOBAL_VARIABLES:
        raise ValueError(f"Variable {name} is not in the writable whitelist")
    if not validate_literal(value):
        raise ValueError(f"Invalid value for {name}: {value!r}")
    return f"SET GLOBAL {name} = {value}"
