"""
Caller identity for request handlers.

Sign-in happens with an external identity provider; whatever sits in
front of this backend forwards the signed-in user's id in the
`X-User-Id` header. Requests without it act as `settings.default_user`,
which keeps local development and the demo UI working.
"""

from fastapi import Header, HTTPException

from settings import settings


def get_caller_user(x_user_id: str | None = Header(default=None)) -> str:
    if x_user_id is None:
        return settings.default_user
    user_id = x_user_id.strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Empty X-User-Id header")
    return user_id
