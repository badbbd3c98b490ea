"""
Credential check for the admin dashboard.

The dashboard only sees the ``CredentialVerifier`` interface, so the static
demo PIN can later be replaced by a real scheme without touching it.
"""

import hmac
import logging
from typing import Optional

from bikewerkstatt.config import settings

logger = logging.getLogger(__name__)


class CredentialVerifier:
    """Decides whether a candidate credential grants admin access."""

    def verify(self, candidate: str) -> bool:
        raise NotImplementedError


class StaticPinVerifier(CredentialVerifier):
    """Compares input against one shared PIN. No lockout, no rate limiting."""

    def __init__(self, pin: Optional[str] = None) -> None:
        self._pin = settings.admin.pin if pin is None else pin

    def verify(self, candidate: str) -> bool:
        ok = hmac.compare_digest(candidate.encode("utf-8"), self._pin.encode("utf-8"))
        if not ok:
            logger.warning("Admin PIN rejected")
        return ok
