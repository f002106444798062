#!/usr/bin/env python3
"""
MyAdmin Liveness Probe

A server that answers a probe with an error is still alive when the error
comes from the server itself and says the statement was rejected, not that
the server is unreachable. Client-side error codes (2000 and above) and
non-driver exceptions mean the server could not be reached.
"""

import logging

from pymysql import MySQLError

from core.admin_sql import MYSQL_ALIVE_QUERY
from core.errors import mysql_error_code

logger = logging.getLogger(__name__)

# Server error codes that prove the server answered
ALIVE_ERROR_CODES = {
    1040,  # ER_CON_COUNT_ERROR (too many connections)
    1044,  # ER_DBACCESS_DENIED_ERROR
    1045,  # ER_ACCESS_DENIED_ERROR
    1054,  # ER_BAD_FIELD_ERROR
    1064,  # ER_PARSE_ERROR
    1142,  # ER_TABLEACCESS_DENIED_ERROR
    1143,  # ER_COLUMNACCESS_DENIED_ERROR
    1146,  # ER_NO_SUCH_TABLE
    1149,  # ER_SYNTAX_ERROR
    1203,  # ER_TOO_MANY_USER_CONNECTIONS
    1205,  # ER_LOCK_WAIT_TIMEOUT
    1213,  # ER_LOCK_DEADLOCK
    1227,  # ER_SPECIFIC_ACCESS_DENIED_ERROR
    3024,  # ER_QUERY_TIMEOUT (max_execution_time exceeded)
}

CLIENT_ERROR_MIN = 2000


def is_alive_error(exc: BaseException) -> bool:
    """True if ``exc`` is a server-side rejection, i.e. the server is up"""
    if not isinstance(exc, MySQLError):
        return False
    code = mysql_error_code(exc)
    if code is None or code >= CLIENT_ERROR_MIN:
        return False
    return code in ALIVE_ERROR_CODES


def check_mysql_alive(connection, probe_query: str = MYSQL_ALIVE_QUERY) -> bool:
    """Run a trivial query and report whether the server responded"""
    try:
        with connection.cursor() as cursor:
            cursor.execute(probe_query)
            cursor.fetchall()
        return True
    except Exception as e:
        if is_alive_error(e):
            logger.debug(f"Probe rejected but server is alive: {e}")
            return True
        logger.warning(f"MySQL liveness probe failed: {e}")
        return False
