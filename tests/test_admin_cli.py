import pytest
from pymysql.err import OperationalError

from extensions.plugins.mysql_adapter import MySQLAdminAdapter
from tools import admin_cli


@pytest.fixture
def cli(monkeypatch, conn):
    """Run main() against the fake server instead of a real connection"""
    created = []

    def factory(config=None, **kwargs):
        created.append(config)
        return MySQLAdminAdapter(config, connection=conn)

    monkeypatch.setattr(admin_cli, 'MySQLAdminAdapter', factory)
    monkeypatch.setattr(admin_cli, 'setup_logging', lambda level: None)

    def run(*argv):
        return admin_cli.main(list(argv))

    run.created = created
    return run


def test_alive(cli, capsys):
    assert cli('alive') == 0
    assert capsys.readouterr().out.strip() == 'alive'


def test_not_alive_exit_code(cli, server, capsys):
    server.errors['SELECT 1'] = OperationalError(2013, "Lost connection")
    assert cli('alive') == 1
    assert 'not alive' in capsys.readouterr().out


def test_read_only_on(cli, server, capsys):
    assert cli('read-only', 'on') == 0
    assert capsys.readouterr().out.strip() == 'read_only=1'
    assert server.global_vars['read_only'] == 1


def test_event_scheduler_off(cli, server, capsys):
    server.global_vars['event_scheduler'] = 'ON'
    assert cli('event-scheduler', 'off') == 0
    assert capsys.readouterr().out.strip() == 'event_scheduler=OFF'


def test_confirmation_failure_exit_code(cli, server, capsys):
    server.ignored_writes.add('super_read_only')
    assert cli('super-read-only', 'on') == 1
    assert 'not expected ON' in capsys.readouterr().err


def test_get_variable(cli, capsys):
    assert cli('get', 'binlog_format') == 0
    assert capsys.readouterr().out.strip() == 'ROW'


def test_get_unknown_variable(cli, capsys):
    assert cli('get', 'no_such_var') == 1
    assert 'no such variable no_such_var' in capsys.readouterr().err


def test_status_grep(cli, capsys):
    assert cli('status', '--grep', 'threads') == 0
    out = capsys.readouterr().out
    assert 'Threads_connected' in out
    assert 'Uptime' not in out


def test_check_binlog_failure(cli, server, capsys):
    server.global_vars['binlog_row_image'] = 'MINIMAL'
    assert cli('check-binlog') == 1
    assert 'binlog_row_image=MINIMAL' in capsys.readouterr().err


def test_binlog_format(cli, server, capsys):
    assert cli('binlog-format', 'mixed') == 0
    assert server.global_vars['binlog_format'] == 'MIXED'


def test_connection_id(cli, capsys):
    assert cli('connection-id') == 0
    assert capsys.readouterr().out.strip() == '42'


def test_connection_overrides(cli, monkeypatch):
    monkeypatch.setenv('MYADMIN_DB_HOST', 'from-env')
    cli('--host', 'db9', '--port', '3399', 'unlock-tables')
    config = cli.created[0]
    assert (config.host, config.port) == ('db9', 3399)


def test_send_mail_via_url_requires_gateway(cli, capsys):
    assert cli('send-mail', '--subject', 's', '--body', 'b', '--via-url') == 1
    assert 'MYADMIN_MAIL_GATEWAY_URL' in capsys.readouterr().err


def test_send_mail_smtp(cli, monkeypatch):
    sent = []
    monkeypatch.setenv('MYADMIN_MAIL_TO', 'dba@example.com')
    monkeypatch.setattr('extensions.plugins.email_adapter.EmailInfo.send_email',
                        lambda self, content: sent.append((self.to, content.subject)))
    assert cli('send-mail', '--subject', 'failover', '--body', 'db1 read-only') == 0
    assert sent == [(['dba@example.com'], 'failover')]
