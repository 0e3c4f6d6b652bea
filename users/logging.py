import logging

logger = logging.getLogger("storefront.auth")


def log_auth_event(action: str, request, user=None, status: str = "success", extra: dict | None = None):
    """Emit a structured auth event with action, user, ip, and status."""
    event = f"auth.{action}"
    payload = {
        "event": event,
        "action": action,
        "ip": request.META.get("REMOTE_ADDR"),
        "status": status,
    }
    if user is not None:
        payload["user_id"] = getattr(user, "id", None)
        payload["username"] = getattr(user, "username", None)
    if extra:
        payload.update(extra)
    logger.info(event, extra=payload)
