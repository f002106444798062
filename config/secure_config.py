#!/usr/bin/env python3
"""
Secure Configuration Manager for MyAdmin
Handles environment variables, secrets, and connection/mail settings centrally
"""

import os
from pathlib import Path
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field

@dataclass
class MyAdminConfig:
    """MyAdmin configuration settings"""

    base_dir: Path = None

    # Database settings
    db_host: str = "localhost"
    db_port: int = 3306
    db_user: str = "root"
    db_socket: Optional[str] = None
    connect_timeout: int = 10

    # Mail settings
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_user: str = ""
    mail_from: str = ""
    mail_to: List[str] = field(default_factory=list)
    mail_gateway_url: Optional[str] = None

    # Secrets (loaded from environment)
    db_password: str = None
    smtp_password: str = None

    # Runtime settings
    debug_mode: bool = False
    log_level: str = "INFO"

    profile: str = "dev"  # dev, prod

    def __post_init__(self):
        """Load values from MYADMIN_* environment variables"""
        self.profile = os.environ.get('MYADMIN_PROFILE', 'dev')

        if self.base_dir is None:
            default_root = Path(__file__).parent.parent
            self.base_dir = Path(os.environ.get('MYADMIN_HOME', default_root))
        else:
            self.base_dir = Path(self.base_dir)

        # Secrets
        self.db_password = os.environ.get('MYADMIN_DB_PASSWORD', '')
        self.smtp_password = os.environ.get('MYADMIN_SMTP_PASSWORD', '')

        self.debug_mode = os.environ.get('MYADMIN_DEBUG', '').lower() == 'true'
        self.log_level = os.environ.get('MYADMIN_LOG_LEVEL', 'DEBUG' if self.debug_mode else 'INFO')

        # Database settings from environment
        self.db_host = os.environ.get('MYADMIN_DB_HOST', self.db_host)
        self.db_port = int(os.environ.get('MYADMIN_DB_PORT', str(self.db_port)))
        self.db_user = os.environ.get('MYADMIN_DB_USER', self.db_user)
        self.db_socket = os.environ.get('MYADMIN_DB_SOCKET', self.db_socket) or None
        self.connect_timeout = int(os.environ.get('MYADMIN_CONNECT_TIMEOUT', str(self.connect_timeout)))

        # Mail settings from environment
        self.smtp_host = os.environ.get('MYADMIN_SMTP_HOST', self.smtp_host)
        self.smtp_port = int(os.environ.get('MYADMIN_SMTP_PORT', str(self.smtp_port)))
        self.smtp_user = os.environ.get('MYADMIN_SMTP_USER', self.smtp_user)
        self.mail_from = os.environ.get('MYADMIN_MAIL_FROM', self.mail_from)
        mail_to = os.environ.get('MYADMIN_MAIL_TO')
        if mail_to is not None:
            self.mail_to = [addr.strip() for addr in mail_to.split(',') if addr.strip()]
        self.mail_gateway_url = os.environ.get('MYADMIN_MAIL_GATEWAY_URL', self.mail_gateway_url) or None

        if self.profile == 'prod':
            self.debug_mode = False
            self.log_level = 'WARNING'

    def to_connection_config(self, **overrides):
        """Build a ConnectionConfig for the MySQL adapter"""
        from extensions.plugins.mysql_adapter import ConnectionConfig

        params = {
            'host': self.db_host,
            'port': self.db_port,
            'user': self.db_user,
            'password': self.db_password or '',
            'unix_socket': self.db_socket,
            'connect_timeout': self.connect_timeout,
        }
        params.update({k: v for k, v in overrides.items() if v is not None})
        return ConnectionConfig(**params)

    def to_email_info(self):
        """Build EmailInfo from the mail settings"""
        from extensions.plugins.email_adapter import EmailInfo

        return EmailInfo(
            host=self.smtp_host,
            port=self.smtp_port,
            username=self.smtp_user,
            password=self.smtp_password or '',
            sender=self.mail_from,
            to=list(self.mail_to),
        )

    def get_safe_dict(self) -> Dict[str, Any]:
        """Get configuration as dict without sensitive values"""
        return {
            'base_dir': str(self.base_dir),
            'db_host': self.db_host,
            'db_port': self.db_port,
            'db_user': self.db_user,
            'db_socket': self.db_socket,
            'connect_timeout': self.connect_timeout,
            'smtp_host': self.smtp_host,
            'smtp_port': self.smtp_port,
            'smtp_user': self.smtp_user,
            'mail_from': self.mail_from,
            'mail_to': list(self.mail_to),
            'mail_gateway_url': self.mail_gateway_url,
            'debug_mode': self.debug_mode,
            'log_level': self.log_level,
            'profile': self.profile,
            'db_password_configured': bool(self.db_password),
            'smtp_password_configured': bool(self.smtp_password),
        }

class ConfigManager:
    """Singleton configuration manager"""

    _instance: Optional['ConfigManager'] = None
    _config: Optional[MyAdminConfig] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if self._config is None:
            self.load_config()

    def load_config(self):
        """Load configuration from .env file and environment.

        Priority (highest to lowest):
        1. Environment variables (MYADMIN_*)
        2. .env file (loaded into os.environ before config creation)
        3. MyAdminConfig dataclass defaults
        """
        default_base = Path(__file__).parent.parent
        base_dir = Path(os.environ.get('MYADMIN_HOME', default_base))
        env_file = base_dir / '.env'
        if env_file.exists():
            self._load_env_file(env_file)

        self._config = MyAdminConfig()

    def _load_env_file(self, env_file: Path):
        """Load environment variables from .env file.

        Only sets values for keys not already in os.environ.
        """
        with open(env_file, 'r') as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith('#') and '=' in line:
                    key, value = line.split('=', 1)
                    key = key.strip()
                    if key not in os.environ:
                        os.environ[key] = value.strip()

    @property
    def config(self) -> MyAdminConfig:
        """Get the current configuration"""
        if self._config is None:
            self.load_config()
        return self._config

    @classmethod
    def reset(cls):
        """Drop the cached configuration so the next access reloads it"""
        if cls._instance is not None:
            cls._instance._config = None


def get_config() -> MyAdminConfig:
    """Get the global configuration instance"""
    return ConfigManager().config


if __name__ == "__main__":
    config = get_config()
    print("MyAdmin Configuration Status:")
    print("-" * 40)
    for key, value in config.get_safe_dict().items():
        print(f"{key:25} : {value}")
