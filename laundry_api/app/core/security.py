"""
Caller identity resolution.

Every customer-scoped route needs the id of the calling customer.  The
id arrives in a single request header (``settings.customer_id_header``,
``CustomerId`` by default) as a canonical UUID string.  The header is
trusted as-is unless ``settings.identity_secret`` is configured; then
the value must be ``<uuid>.<signature>``, where the signature is the
base64url HMAC-SHA256 of the UUID text under the secret.  Signed values
are produced by ``create_identity_token`` (see ``manage.py
issue-token``).

An unsigned header is a placeholder for a real authentication layer and
must not be relied on when the API is reachable by untrusted clients.
"""

import base64
import hashlib
import hmac
import logging
import uuid
from typing import Optional

from fastapi import HTTPException, Request, status

from .config import settings
from .exceptions import UnauthenticatedError

logger = logging.getLogger(__name__)


def _b64_url_encode(data: bytes) -> str:
    """Base64-url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _sign(message: str, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).digest()
    return _b64_url_encode(digest)


def create_identity_token(customer_id: uuid.UUID, secret: Optional[str] = None) -> str:
    """Return a signed header value for ``customer_id``.

    Parameters
    ----------
    customer_id : uuid.UUID
        Customer the token identifies.
    secret : Optional[str]
        Signing key.  Defaults to ``settings.identity_secret``.

    Returns
    -------
    str
        ``<uuid>.<signature>``
    """
    key = secret if secret is not None else settings.identity_secret
    if not key:
        raise ValueError("An identity secret is required to sign tokens")
    subject = str(customer_id)
    return f"{subject}.{_sign(subject, key)}"


def _parse_uuid(value: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except ValueError as e:
        raise UnauthenticatedError("Customer ID in the request header is not valid.") from e


def resolve_customer_id(raw_value: Optional[str]) -> uuid.UUID:
    """Turn a raw header value into a customer id.

    Raises ``UnauthenticatedError`` if the value is missing, empty, not a
    UUID or, in signed mode, carries a bad signature.
    """
    if raw_value is None or not raw_value.strip():
        raise UnauthenticatedError("Customer ID not found in the request header.")
    value = raw_value.strip()

    if not settings.identity_secret:
        return _parse_uuid(value)

    subject, sep, signature = value.rpartition(".")
    if not sep or not subject or not signature:
        raise UnauthenticatedError("Customer ID in the request header is not signed.")
    expected = _sign(subject, settings.identity_secret)
    if not hmac.compare_digest(expected, signature):
        raise UnauthenticatedError("Customer ID signature is invalid.")
    return _parse_uuid(subject)


def get_current_customer_id(request: Request) -> uuid.UUID:
    """Dependency that resolves the calling customer's id.

    Raises HTTP 401 before the route handler runs if the header is
    absent or invalid, so no store access happens for such requests.
    """
    try:
        return resolve_customer_id(request.headers.get(settings.customer_id_header))
    except UnauthenticatedError as e:
        logger.warning("Rejected request to %s: %s", request.url.path, e.message)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
        ) from e
