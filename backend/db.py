"""
Database connection helper.

This module centralizes how connections to the contacts store are created.
Every call opens a fresh `psycopg` connection; repository code never calls
`psycopg.connect` itself.

Usage:
    from db import get_conn
    with get_conn() as conn:
        with conn.cursor() as cur:
            cur.execute("SELECT 1;")

Connecting follows a bounded retry policy: `settings.db_retries` attempts,
each limited by `settings.connect_timeout`, with `settings.db_retry_delay`
seconds between them. The last `OperationalError` is re-raised.
"""

import logging
import time

import psycopg
from settings import settings

logger = logging.getLogger(__name__)


def get_conn():
    """Return a new psycopg connection using `settings.db_url`."""

    attempts = max(1, settings.db_retries)
    for attempt in range(1, attempts + 1):
        try:
            return psycopg.connect(settings.db_url, connect_timeout=settings.connect_timeout)
        except psycopg.OperationalError as e:
            if attempt == attempts:
                raise
            logger.warning(
                "Store connection failed (attempt %d/%d): %s", attempt, attempts, e
            )
            time.sleep(settings.db_retry_delay)
