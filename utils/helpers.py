#!/usr/bin/env python3
"""
MyAdmin Utilities and Helper Functions

Small helpers shared by the adapters and the command-line tool: HTTP GET
with query parameters, logging setup, and result formatting.
"""

import logging
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode, urlsplit, urlunsplit

import requests

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

# ============================================================================
# HTTP UTILITIES
# ============================================================================

def build_url(base_url: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """
    Append URL-encoded query parameters to a base URL

    Existing query parameters on ``base_url`` are kept.

    Args:
        base_url: URL without (or with) a query string
        params: Parameters to append

    Returns:
        Full URL
    """
    if not params:
        return base_url

    scheme, netloc, path, query, fragment = urlsplit(base_url)
    encoded = urlencode(params)
    query = f"{query}&{encoded}" if query else encoded
    return urlunsplit((scheme, netloc, path, query, fragment))


def request_get(url: str, timeout: float) -> bytes:
    """
    Issue a GET and return the raw response body

    Raises:
        requests.RequestException: on connection errors, timeouts or non-2xx status
    """
    logger.debug(f"GET {urlsplit(url).netloc}{urlsplit(url).path} (timeout={timeout}s)")
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.content

# ============================================================================
# LOGGING / OUTPUT UTILITIES
# ============================================================================

def setup_logging(level: str = "INFO") -> None:
    """Configure root logging for command-line use"""
    numeric = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric, int):
        numeric = logging.INFO
    logging.basicConfig(level=numeric, format=LOG_FORMAT)


def format_mapping(data: Dict[str, Any]) -> str:
    """Format a name -> value mapping as aligned ``name  value`` lines"""
    if not data:
        return ""
    width = max(len(str(key)) for key in data)
    return "\n".join(f"{str(key):{width}}  {value}" for key, value in sorted(data.items()))
