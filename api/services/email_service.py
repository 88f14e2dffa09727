from __future__ import annotations

import logging

import requests

from api import config

log = logging.getLogger(__name__)


def _is_configured() -> bool:
    return bool(
        config.EMAILJS_SERVICE_ID
        and config.EMAILJS_TEMPLATE_ID
        and config.EMAILJS_PUBLIC_KEY
    )


def send_verification_email(email: str, name: str, code: str) -> bool:
    """
    Send a templated verification email through the EmailJS REST API.
    Without EmailJS credentials the code is logged instead, for local use.
    Returns False when delivery failed.
    """
    if not _is_configured():
        log.info("EmailJS is not configured; verification code for %s is %s", email, code)
        return True

    payload = {
        "service_id": config.EMAILJS_SERVICE_ID,
        "template_id": config.EMAILJS_TEMPLATE_ID,
        "user_id": config.EMAILJS_PUBLIC_KEY,
        "template_params": {
            "to_email": email,
            "to_name": name,
            "verification_code": code,
            "from_name": config.EMAIL_FROM_NAME,
        },
    }
    if config.EMAILJS_PRIVATE_KEY:
        payload["accessToken"] = config.EMAILJS_PRIVATE_KEY

    try:
        response = requests.post(config.EMAILJS_API_URL, json=payload, timeout=15)
        response.raise_for_status()
    except requests.RequestException as exc:
        log.warning("Failed to send verification email to %s: %s", email, exc)
        return False
    log.info("Sent verification email to %s", email)
    return True
