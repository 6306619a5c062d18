"""Contacts per user. Run after `pip install -e .` so `settings` imports."""

from settings import settings
import psycopg

with psycopg.connect(settings.db_url, connect_timeout=settings.connect_timeout) as conn:
    with conn.cursor() as cur:
        cur.execute("SELECT user_id, COUNT(*) FROM contacts GROUP BY user_id ORDER BY user_id")
        for user_id, n in cur.fetchall():
            print(f'{user_id}: {n} contacts')
