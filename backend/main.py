from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse
from typing import List
from datetime import datetime
from html import escape
import logging

from auth import get_caller_user
from display import greeting_for_hour, summary_text
from errors import ContactNotFoundError
from models import ContactIn, ContactOut, NotificationOut, NotificationPreference
from repo_contacts import ContactRepo
from service_contacts import ContactService
from settings import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Day Reminders Backend")

# Routes stay thin: everything goes through the service, which tests can
# swap for one backed by an in-memory repository.
repo = ContactRepo()
svc = ContactService(repo)


@app.get("/health")
def health():
    try:
        svc.health_check()
        return {"ok": True}
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Store health check failed: {e}")


@app.get("/contacts", response_model=List[ContactOut])
def list_contacts(
    kind: str = Query("all"),
    q: str = Query(""),
    refresh: bool = False,
    user_id: str = Depends(get_caller_user),
):
    try:
        return svc.list_upcoming(user_id, kind=kind, query=q, refresh=refresh)
    except Exception as e:
        logger.exception("Listing contacts failed for %s", user_id)
        raise HTTPException(status_code=500, detail=f"Failed to load contacts: {e}")


@app.post("/contacts", response_model=ContactOut, status_code=201)
def create_contact(contact: ContactIn, user_id: str = Depends(get_caller_user)):
    try:
        return svc.create_contact(user_id, contact)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Creating contact failed for %s", user_id)
        raise HTTPException(status_code=500, detail=f"Failed to add contact: {e}")


@app.put("/contacts/{contact_id}", response_model=ContactOut)
def update_contact(contact_id: str, contact: ContactIn, user_id: str = Depends(get_caller_user)):
    try:
        return svc.update_contact(user_id, contact_id, contact)
    except ContactNotFoundError:
        raise HTTPException(status_code=404, detail=f"Contact {contact_id} not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Updating contact %s failed for %s", contact_id, user_id)
        raise HTTPException(status_code=500, detail=f"Failed to update contact: {e}")


@app.delete("/contacts/{contact_id}")
def delete_contact(contact_id: str, user_id: str = Depends(get_caller_user)):
    try:
        svc.delete_contact(user_id, contact_id)
        return {"deleted": contact_id}
    except ContactNotFoundError:
        raise HTTPException(status_code=404, detail=f"Contact {contact_id} not found")
    except Exception as e:
        logger.exception("Deleting contact %s failed for %s", contact_id, user_id)
        raise HTTPException(status_code=500, detail=f"Failed to delete contact: {e}")


@app.get("/notifications", response_model=List[NotificationOut])
def notifications(user_id: str = Depends(get_caller_user)):
    try:
        return svc.due_notifications(user_id)
    except Exception as e:
        logger.exception("Notification check failed for %s", user_id)
        raise HTTPException(status_code=500, detail=f"Notification check failed: {e}")


@app.put("/notifications/preference", response_model=NotificationPreference)
def notification_preference(pref: NotificationPreference, user_id: str = Depends(get_caller_user)):
    try:
        return NotificationPreference(enabled=svc.set_notification_preference(user_id, pref.enabled))
    except Exception as e:
        logger.exception("Saving notification preference failed for %s", user_id)
        raise HTTPException(status_code=500, detail=f"Failed to save preference: {e}")


@app.get("/ui", response_class=HTMLResponse)
def ui(kind: str = "all", q: str = "", user_id: str = Depends(get_caller_user)):
    try:
        contacts = svc.list_upcoming(user_id, kind=kind, query=q)
    except Exception as e:
        logger.exception("Rendering list failed for %s", user_id)
        raise HTTPException(status_code=500, detail=f"Failed to render list: {e}")
    rows = []
    for c in contacts:
        link = (
            f' <a href="{escape(c.message_link)}" target="_blank">Send wishes</a>'
            if c.message_link else ""
        )
        note = f'<div class="note">{escape(c.reference)}</div>' if c.reference else ""
        rows.append(f"""
  <div class="row">
    <div><b>{escape(c.name)}</b> <span class="kind">({escape(c.type)})</span></div>
    <div class="when">{c.next_occurrence.strftime("%d %b").upper()} · {escape(c.days_label)}{link}</div>
    {note}
  </div>""")

    options = "".join(
        f'<option value="{v}"{" selected" if kind.lower() == v else ""}>{label}</option>'
        for v, label in (("all", "All"), ("birthday", "Birthdays"), ("anniversary", "Anniversaries"))
    )
    return f"""
<!doctype html>
<html>
<head>
  <meta charset="utf-8"/>
  <title>Day Reminders</title>
  <style>
    body {{ font-family: Arial, sans-serif; margin: 20px; }}
    input, select, button {{ padding: 8px; }}
    .row {{ padding: 10px; border: 1px solid #ddd; margin: 8px 0; border-radius: 8px; }}
    .kind {{ color: #999; }}
    .when {{ color: #666; font-size: 13px; }}
    .note {{ color: #888; font-size: 12px; }}
  </style>
</head>
<body>
  <h2>{greeting_for_hour(datetime.now().hour)}!</h2>
  <p>{escape(summary_text(len(contacts), q))}</p>
  <form method="get" action="/ui">
    <select name="kind">{options}</select>
    <input name="q" value="{escape(q)}" placeholder="Search name or note"/>
    <button type="submit">Filter</button>
  </form>
  <div id="out">{"".join(rows)}</div>
</body>
</html>
"""
