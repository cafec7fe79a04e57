"""
Security audit logging helpers.

Everything here goes to the ``security`` logger, which settings route to a
dedicated security log file. Secrets are never passed in; signatures are
masked by the callers.
"""
import logging
from typing import Optional

logger = logging.getLogger("subscriptions.audit")
security_logger = logging.getLogger("security")


def client_ip(request) -> str:
    """Best-effort client address (first X-Forwarded-For hop, else REMOTE_ADDR)."""
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR", "unknown")


def log_auth_attempt(subject: str, ip: str, success: bool) -> None:
    """Log an authentication attempt; failures are security events."""
    outcome = "SUCCESS" if success else "FAILED"
    message = "Authentication attempt for %s from %s: %s"
    if success:
        logger.info(message, subject, ip, outcome)
    else:
        security_logger.warning(
            message, subject, ip, outcome, extra={"subject": subject, "client_ip": ip}
        )


def log_admin_action(action: str, subject: str, ip: str) -> None:
    """Log an admin operation to both the audit and security logs."""
    message = "Admin action: %s for user %s from %s"
    logger.info(message, action, subject, ip)
    security_logger.info(
        message, action, subject, ip, extra={"action": action, "subject": subject, "client_ip": ip}
    )


def log_security_event(
    event: str, details: str, ip: str, subject: Optional[str] = None
) -> None:
    """Log a security event (rejected envelope, rate limit, bad admin secret)."""
    extra = {"event": event, "client_ip": ip}
    if subject:
        extra["subject"] = subject
        details = f"{details} user={subject}"
    security_logger.warning("Security event: %s - %s from %s", event, details, ip, extra=extra)
