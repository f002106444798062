#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
MyAdmin Core Package Initialization
Exports the administrative helpers for clean imports

Version: 1.0.0
"""

from .admin_sql import Scope, WRITABLE_GLOBAL_VARIABLES
from .errors import (
    ErrorCode,
    MyAdminError,
    NotFoundError,
    QueryFailedError,
    ConfirmationFailedError,
    EmptyResultError,
    ConfigMismatchError,
    MailError,
)
from .variables import (
    ReadBack,
    ToggleResult,
    get_variable,
    set_and_query_global_var,
    toggle_global_var,
    enable_read_only,
    disable_read_only,
    enable_super_read_only,
    disable_super_read_only,
    enable_event_scheduler,
    disable_event_scheduler,
    set_binlog_format,
    check_binlog_format_row_full,
    get_connection_id,
    unlock_all_tables,
)
from .status import (
    show_global_status,
    show_global_variables,
    show_slave_status,
    show_all_slaves_status,
    show_master_status,
    show_engine_innodb_status,
    merge_status,
)
from .liveness import check_mysql_alive, is_alive_error

__version__ = "1.0.0"

__all__ = [
    'Scope', 'WRITABLE_GLOBAL_VARIABLES',
    'ErrorCode', 'MyAdminError', 'NotFoundError', 'QueryFailedError',
    'ConfirmationFailedError', 'EmptyResultError', 'ConfigMismatchError', 'MailError',
    'ReadBack', 'ToggleResult', 'get_variable', 'set_and_query_global_var',
    'toggle_global_var', 'enable_read_only', 'disable_read_only',
    'enable_super_read_only', 'disable_super_read_only',
    'enable_event_scheduler', 'disable_event_scheduler', 'set_binlog_format',
    'check_binlog_format_row_full', 'get_connection_id', 'unlock_all_tables',
    'show_global_status', 'show_global_variables', 'show_slave_status',
    'show_all_slaves_status', 'show_master_status', 'show_engine_innodb_status',
    'merge_status', 'check_mysql_alive', 'is_alive_error',
]
