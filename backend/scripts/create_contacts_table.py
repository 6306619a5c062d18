"""Create the reminder tables. Run after `pip install -e .` so `settings` imports."""

from settings import settings
import psycopg

# `date` stays TEXT: rows imported from the spreadsheet keep whatever format
# they had, and the date normalizer reads them at list time.
DDL = '''
CREATE TABLE IF NOT EXISTS contacts (
    id BIGSERIAL PRIMARY KEY,
    user_id TEXT NOT NULL,
    name TEXT NOT NULL,
    reference TEXT NOT NULL DEFAULT '',
    phone TEXT NOT NULL DEFAULT '',
    date TEXT NOT NULL,
    type TEXT NOT NULL,
    created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT now()
);

CREATE INDEX IF NOT EXISTS idx_contacts_user ON contacts (user_id, id);

CREATE TABLE IF NOT EXISTS notification_marks (
    user_id TEXT NOT NULL,
    contact_id TEXT NOT NULL,
    days_remaining SMALLINT NOT NULL,
    shown_on DATE NOT NULL,
    PRIMARY KEY (user_id, contact_id, days_remaining, shown_on)
);

CREATE INDEX IF NOT EXISTS idx_notification_marks_shown ON notification_marks (shown_on);

CREATE TABLE IF NOT EXISTS notification_prefs (
    user_id TEXT PRIMARY KEY,
    enabled BOOLEAN NOT NULL DEFAULT TRUE
);
'''

print('Connecting to', settings.db_url)
with psycopg.connect(settings.db_url, connect_timeout=settings.connect_timeout) as conn:
    with conn.cursor() as cur:
        cur.execute(DDL)
    conn.commit()
print('DDL applied')
