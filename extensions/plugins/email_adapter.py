#!/usr/bin/env python3
"""
MyAdmin Email Adapter

Sends notification mail over SMTP, or through an HTTP GET mail gateway when
SMTP is not reachable from the host.

SMTP sessions negotiate TLS (implicit TLS on port 465, STARTTLS otherwise)
without certificate validation, since alerting relays commonly use
self-signed certificates.

Usage:
    info = EmailInfo(host='smtp.example.com', port=587, username='alerts',
                     password='...', sender='alerts@example.com',
                     to=['dba@example.com'])
    info.send_email(EmailContent('db1 is read-only', EmailBody('...')))
"""

import logging
import mimetypes
import smtplib
import ssl
from dataclasses import dataclass, field
from email.message import EmailMessage
from pathlib import Path
from typing import List

import requests

from core.errors import MailError
from utils.helpers import build_url, request_get

logger = logging.getLogger(__name__)

SMTP_SSL_PORT = 465
DEFAULT_SMTP_TIMEOUT = 30
LOCAL_HOSTS = ("localhost", "127.0.0.1", "::1")


@dataclass
class EmailBody:
    body: str
    content_type: str = "text/plain"


@dataclass
class EmailContent:
    subject: str
    body: EmailBody
    attachments: List[str] = field(default_factory=list)


def _insecure_tls_context() -> ssl.SSLContext:
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


@dataclass
class EmailInfo:
    """SMTP account and recipients"""
    host: str
    port: int
    username: str
    password: str
    sender: str
    to: List[str] = field(default_factory=list)
    timeout: float = DEFAULT_SMTP_TIMEOUT

    def build_message(self, content: EmailContent) -> EmailMessage:
        """Build the MIME message, reading attachments from disk"""
        message = EmailMessage()
        message['From'] = self.sender
        message['To'] = ', '.join(self.to)
        message['Subject'] = content.subject

        maintype, _, subtype = content.body.content_type.partition('/')
        if maintype != 'text' or not subtype:
            raise MailError(f"Unsupported body content type: {content.body.content_type}")
        message.set_content(content.body.body, subtype=subtype)

        for attachment in content.attachments:
            path = Path(attachment)
            try:
                data = path.read_bytes()
            except OSError as e:
                raise MailError(f"error to read attachment {attachment}: {e}",
                                {'attachment': attachment}) from e
            ctype, encoding = mimetypes.guess_type(path.name)
            if ctype is None or encoding is not None:
                ctype = 'application/octet-stream'
            att_main, att_sub = ctype.split('/', 1)
            message.add_attachment(data, maintype=att_main, subtype=att_sub, filename=path.name)

        return message

    def send_email(self, content: EmailContent) -> None:
        """Send ``content`` to all recipients over SMTP"""
        if not self.to:
            raise MailError("no recipients configured")

        message = self.build_message(content)
        context = _insecure_tls_context()
        try:
            if self.port == SMTP_SSL_PORT:
                server = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout, context=context)
            else:
                server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
            with server:
                if self.port != SMTP_SSL_PORT:
                    server.ehlo()
                    if server.has_extn('starttls'):
                        server.starttls(context=context)
                        server.ehlo()
                    elif self.username and self.host not in LOCAL_HOSTS:
                        raise MailError("server does not support STARTTLS; refusing to send credentials in clear",
                                        {'host': self.host, 'port': self.port})
                if self.username:
                    server.login(self.username, self.password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send mail via {self.host}:{self.port}: {e}")
            raise MailError(f"error to send mail via {self.host}:{self.port}: {e}",
                            {'host': self.host, 'port': self.port}) from e

        logger.info(f"Sent mail '{content.subject}' to {len(self.to)} recipient(s)")

    def send_email_url_get(self, url: str, content: EmailContent, timeout: float = 10) -> bytes:
        """
        Deliver ``content`` through an HTTP mail gateway

        The gateway receives ``emails`` (comma-separated recipients),
        ``subject`` and ``message`` as query parameters. Attachments are not
        sent.

        Returns:
            Raw response body
        """
        params = {
            'emails': ','.join(self.to),
            'subject': content.subject,
            'message': content.body.body,
        }
        try:
            return request_get(build_url(url, params), timeout)
        except requests.RequestException as e:
            logger.error(f"Mail gateway request failed: {e}")
            raise MailError(f"error to send mail via gateway: {e}") from e
