#!/usr/bin/env python3
"""
MyAdmin Command-Line Tool
=========================

Toggle and inspect server-wide MySQL/MariaDB settings.

Usage:
    myadmin alive
    myadmin read-only on
    myadmin super-read-only off
    myadmin get binlog_row_image
    myadmin status --grep Threads_
    myadmin check-binlog
    myadmin send-mail --subject "db1 failover" --body "db1 is read-only now"

Connection settings come from MYADMIN_* environment variables (or a .env
file in MYADMIN_HOME) and can be overridden with --host/--port/--user/
--password/--socket.
"""

import argparse
import logging
import re
import sys
from typing import List, Optional

from config.secure_config import get_config
from core.admin_sql import Scope
from core.errors import MyAdminError
from extensions.plugins.email_adapter import EmailBody, EmailContent
from extensions.plugins.mysql_adapter import MySQLAdminAdapter
from utils.helpers import format_mapping, setup_logging

logger = logging.getLogger(__name__)

SWITCH_COMMANDS = {
    'read-only': ('enable_read_only', 'disable_read_only'),
    'super-read-only': ('enable_super_read_only', 'disable_super_read_only'),
    'event-scheduler': ('enable_event_scheduler', 'disable_event_scheduler'),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="myadmin", description="MySQL administrative flag helper")
    parser.add_argument("--host", help="MySQL host (default: MYADMIN_DB_HOST)")
    parser.add_argument("--port", type=int, help="MySQL port (default: MYADMIN_DB_PORT)")
    parser.add_argument("--user", help="MySQL user (default: MYADMIN_DB_USER)")
    parser.add_argument("--password", help="MySQL password (default: MYADMIN_DB_PASSWORD)")
    parser.add_argument("--socket", dest="unix_socket", help="Unix socket path")
    parser.add_argument("--log-level", help="Logging level (default: MYADMIN_LOG_LEVEL)")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("alive", help="Exit 0 if the server answers a probe query")

    status_p = sub.add_parser("status", help="Print numeric SHOW GLOBAL STATUS counters")
    status_p.add_argument("--grep", help="Only show counters matching this regex")

    get_p = sub.add_parser("get", help="Print one system variable")
    get_p.add_argument("variable")
    get_p.add_argument("--session", action="store_true", help="Read the session value")

    for name in SWITCH_COMMANDS:
        switch_p = sub.add_parser(name, help=f"Turn {name.replace('-', '_')} on or off")
        switch_p.add_argument("state", choices=["on", "off"])

    fmt_p = sub.add_parser("binlog-format", help="Set binlog_format")
    fmt_p.add_argument("format", choices=["ROW", "STATEMENT", "MIXED"], type=str.upper)

    sub.add_parser("check-binlog", help="Require binlog_format=ROW and binlog_row_image=FULL")
    sub.add_parser("unlock-tables", help="Run UNLOCK TABLES")
    sub.add_parser("connection-id", help="Print CONNECTION_ID()")

    mail_p = sub.add_parser("send-mail", help="Send a notification mail")
    mail_p.add_argument("--subject", required=True)
    mail_p.add_argument("--body", required=True)
    mail_p.add_argument("--content-type", default="text/plain")
    mail_p.add_argument("--attach", action="append", default=[], help="File to attach (repeatable)")
    mail_p.add_argument("--via-url", action="store_true",
                        help="Send through MYADMIN_MAIL_GATEWAY_URL instead of SMTP")

    return parser


def _send_mail(args, config) -> int:
    info = config.to_email_info()
    content = EmailContent(args.subject, EmailBody(args.body, args.content_type), list(args.attach))
    if args.via_url:
        if not config.mail_gateway_url:
            raise MyAdminError("MYADMIN_MAIL_GATEWAY_URL is not set")
        response = info.send_email_url_get(config.mail_gateway_url, content)
        print(response.decode('utf-8', errors='replace'))
    else:
        info.send_email(content)
    return 0


def run(args, adapter: MySQLAdminAdapter) -> int:
    """Execute a database subcommand against ``adapter``"""
    command = args.command

    if command == "alive":
        alive = adapter.is_alive()
        print("alive" if alive else "not alive")
        return 0 if alive else 1

    if command == "status":
        counters = adapter.global_status()
        if args.grep:
            pattern = re.compile(args.grep, re.IGNORECASE)
            counters = {k: v for k, v in counters.items() if pattern.search(k)}
        print(format_mapping(counters))
        return 0

    if command == "get":
        scope = Scope.SESSION if args.session else Scope.GLOBAL
        print(adapter.get_variable(args.variable, scope))
        return 0

    if command in SWITCH_COMMANDS:
        enable, disable = SWITCH_COMMANDS[command]
        result = getattr(adapter, enable if args.state == "on" else disable)()
        print(f"{result.variable}={result.observed}")
        return 0

    if command == "binlog-format":
        result = adapter.set_binlog_format(args.format)
        print(f"{result.variable}={result.observed}")
        return 0

    if command == "check-binlog":
        adapter.check_binlog_format_row_full()
        print("binlog format OK")
        return 0

    if command == "unlock-tables":
        adapter.unlock_all_tables()
        return 0

    if command == "connection-id":
        print(adapter.connection_id())
        return 0

    raise ValueError(f"Unknown command: {command}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = get_config()
    setup_logging(args.log_level or config.log_level)

    try:
        if args.command == "send-mail":
            return _send_mail(args, config)

        conn_config = config.to_connection_config(
            host=args.host, port=args.port, user=args.user,
            password=args.password, unix_socket=args.unix_socket,
        )
        with MySQLAdminAdapter(conn_config) as adapter:
            return run(args, adapter)
    except (MyAdminError, ValueError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
