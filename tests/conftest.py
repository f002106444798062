#!/usr/bin/env python3
"""
MyAdmin Test Configuration - PyTest Configuration and Fixtures

Provides a scripted in-memory MySQL server and PyMySQL-shaped connection so
the administrative helpers can be tested without a live database. Errors are
raised as real PyMySQL exception classes carrying real MySQL error codes.
"""

import os
import re
import sys

import pytest
from pymysql.err import OperationalError, ProgrammingError

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.secure_config import ConfigManager

SET_GLOBAL_RE = re.compile(r'^SET GLOBAL (\w+) = (.+)$', re.IGNORECASE)
SELECT_VAR_RE = re.compile(r'^SELECT @@(global|session)\.(\w+) AS val$', re.IGNORECASE)

# Variables the server reports as ON/OFF; the rest keep the raw value
DISPLAY_ON_OFF = {'super_read_only', 'event_scheduler'}


def unknown_variable(name):
    return OperationalError(1193, f"Unknown system variable '{name}'")


class FakeMySQLServer:
    """Minimal MySQL behaviour for the statements the helpers issue"""

    def __init__(self):
        self.global_vars = {
            'read_only': 0,
            'super_read_only': 'OFF',
            'event_scheduler': 'OFF',
            'binlog_format': 'ROW',
            'binlog_row_image': 'FULL',
            'version': '8.0.36',
        }
        self.session_vars = {'autocommit': 1, 'sql_mode': 'STRICT_TRANS_TABLES'}
        self.status_rows = [
            ('Uptime', '86400'),
            ('Threads_connected', '5'),
            ('Ssl_cipher', ''),
            ('Rsa_public_key', '-----BEGIN PUBLIC KEY-----'),
        ]
        self.slave_columns = ('Slave_IO_Running', 'Slave_SQL_Running', 'Seconds_Behind_Master')
        self.slave_rows = []
        self.master_row = None
        self.innodb_text = "=====================================\nINNODB MONITOR OUTPUT\n"
        self.connection_id = 42
        # Exact statement -> exception to raise
        self.errors = {}
        # Variables whose SET is accepted but silently not applied
        self.ignored_writes = set()
        # Statements returning no rows regardless of state
        self.empty_results = set()
        self.executed = []
        self.cursors_opened = 0
        self.cursors_closed = 0

    def run(self, sql):
        """Return (description, rows) for a statement"""
        self.executed.append(sql)
        if sql in self.errors:
            raise self.errors[sql]
        if sql in self.empty_results:
            return (('val',),), []

        upper = sql.upper()
        if upper == 'SELECT 1':
            return (('1',),), [(1,)]

        match = SET_GLOBAL_RE.match(sql)
        if match:
            name, value = match.group(1).lower(), match.group(2)
            if name not in self.global_vars:
                raise unknown_variable(name)
            if name not in self.ignored_writes:
                self.global_vars[name] = self._coerce(name, value)
            return None, []

        match = SELECT_VAR_RE.match(sql)
        if match:
            scope, name = match.group(1).lower(), match.group(2).lower()
            values = self.global_vars if scope == 'global' else self.session_vars
            if name not in values:
                raise unknown_variable(name)
            return (('val',),), [(values[name],)]

        if upper == 'SHOW GLOBAL STATUS':
            return (('Variable_name',), ('Value',)), list(self.status_rows)
        if upper == 'SHOW GLOBAL VARIABLES':
            return (('Variable_name',), ('Value',)), [(k, str(v)) for k, v in self.global_vars.items()]
        if upper in ('SHOW SLAVE STATUS', 'SHOW ALL SLAVES STATUS'):
            return tuple((c,) for c in self.slave_columns), list(self.slave_rows)
        if upper == 'SHOW MASTER STATUS':
            rows = [self.master_row] if self.master_row else []
            return (('File',), ('Position',), ('Binlog_Do_DB',), ('Binlog_Ignore_DB',)), rows
        if upper == 'SHOW ENGINE INNODB STATUS':
            return (('Type',), ('Name',), ('Status',)), [('InnoDB', '', self.innodb_text)]
        if upper == 'SELECT CONNECTION_ID() AS ID':
            return (('id',),), [(self.connection_id,)]
        if upper == 'UNLOCK TABLES':
            return None, []

        raise ProgrammingError(1064, f"You have an error in your SQL syntax near '{sql}'")

    def _coerce(self, name, value):
        value = value.strip("'")
        if name in DISPLAY_ON_OFF:
            return 'ON' if value.upper() in ('1', 'ON') else 'OFF'
        if value.isdigit():
            return int(value)
        return value.upper()


class FakeCursor:
    def __init__(self, server, dict_rows=False):
        self.server = server
        self.dict_rows = dict_rows
        self.description = None
        self._rows = []
        self.closed = False
        server.cursors_opened += 1

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        if not self.closed:
            self.closed = True
            self.server.cursors_closed += 1

    def execute(self, sql, params=None):
        description, rows = self.server.run(sql)
        self.description = tuple(col + (None,) * 6 for col in description) if description else None
        if self.dict_rows and description:
            names = [col[0] for col in description]
            rows = [dict(zip(names, row)) for row in rows]
        self._rows = list(rows)
        return len(self._rows)

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None

    def fetchall(self):
        rows, self._rows = self._rows, []
        return rows


class FakeConnection:
    def __init__(self, server, dict_rows=False):
        self.server = server
        self.dict_rows = dict_rows
        self.open = True

    def cursor(self, cursor=None):
        return FakeCursor(self.server, dict_rows=self.dict_rows)

    def close(self):
        self.open = False


@pytest.fixture
def server():
    return FakeMySQLServer()


@pytest.fixture
def conn(server):
    return FakeConnection(server)


@pytest.fixture
def dict_conn(server):
    """Connection whose rows come back as dicts (pymysql DictCursor)"""
    return FakeConnection(server, dict_rows=True)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep MYADMIN_* settings from the developer's shell out of the tests"""
    for key in list(os.environ):
        if key.startswith('MYADMIN_'):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv('MYADMIN_HOME', str(tmp_path))
    ConfigManager.reset()
    yield
    ConfigManager.reset()
