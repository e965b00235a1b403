"""Session key resolution for agent requests.

The dashboard sends an explicit ``X-Session-ID``; older clients and direct API
callers don't, so the caller's network identity stands in for it.
"""

DEFAULT_SESSION_ID = "default-session"

SESSION_HEADER = "X-Session-ID"
FALLBACK_HEADERS = ("X-Real-IP", "X-Forwarded-For", "User-Agent")


def resolve_session_id(headers):
    """Derive a stable session key from request headers.

    Preference: explicit session header, then real IP, then the first hop of
    X-Forwarded-For, then the user agent, then a fixed default.
    """
    for header in (SESSION_HEADER,) + FALLBACK_HEADERS:
        value = (headers.get(header) or "").strip()
        if not value:
            continue
        if header == "X-Forwarded-For":
            value = value.split(",")[0].strip()
            if not value:
                continue
        return value
    return DEFAULT_SESSION_ID
