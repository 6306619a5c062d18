from pathlib import Path

import pytest

SCRIPTS = Path(__file__).resolve().parent.parent / "backend" / "scripts"


@pytest.mark.parametrize("name", ["create_contacts_table.py", "count_contacts.py"])
def test_scripts_import_installed_modules(name):
    source = (SCRIPTS / name).read_text(encoding="utf-8")
    assert "sys.path" not in source
    assert "from settings import settings" in source


def test_ddl_creates_notification_tables():
    source = (SCRIPTS / "create_contacts_table.py").read_text(encoding="utf-8")
    assert "CREATE TABLE IF NOT EXISTS notification_marks" in source
    assert "PRIMARY KEY (user_id, contact_id, days_remaining, shown_on)" in source
    assert "CREATE TABLE IF NOT EXISTS notification_prefs" in source
