"""Shared-passphrase check for write requests.

This is not user authentication: it only keeps random clients from writing
to a publicly reachable API. Clients send the passphrase in X-Passphrase.
"""

import hmac
import logging
from typing import Optional
from fastapi import Header, HTTPException, status

from utils.config import api_passphrase

logger = logging.getLogger(__name__)

PASSPHRASE_HEADER = "X-Passphrase"


def require_passphrase(
    x_passphrase: Optional[str] = Header(None, alias=PASSPHRASE_HEADER),
) -> None:
    """Reject the request with 401 unless the passphrase matches.

    When API_PASSPHRASE is not configured every request is allowed.
    """
    expected = api_passphrase()
    if not expected:
        return

    provided = (x_passphrase or "").strip()
    if provided and hmac.compare_digest(provided.encode(), expected.encode()):
        return

    logger.warning("Rejected write with missing or wrong passphrase")
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
