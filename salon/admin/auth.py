"""HTTP Basic Auth for the dashboard API.

The username is the salon owner's login e-mail and the password is that
owner's own secret, checked against the hash on their account row. The
authenticated account is the only tenant the request can reach.
"""

from __future__ import annotations

import logging
import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from salon.errors import AuthenticationError
from salon.store.datastore import DataStore, authenticate_owner

logger = logging.getLogger(__name__)

security = HTTPBasic()


async def authenticated_owner_id(
    credentials: HTTPBasicCredentials = Depends(security),  # noqa: B008
) -> uuid.UUID:
    """FastAPI dependency: verify HTTP Basic credentials against the owner row.

    Returns the owner id on success, raises 401 on failure.
    """
    try:
        return await authenticate_owner(credentials.username, credentials.password)
    except AuthenticationError as exc:
        logger.warning("Rejected login for %s", credentials.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        ) from exc


async def verify_owner(
    credentials: HTTPBasicCredentials = Depends(security),  # noqa: B008
    _owner_id: uuid.UUID = Depends(authenticated_owner_id),  # noqa: B008
) -> str:
    """Authenticated owner e-mail, used as the actor of audited writes."""
    return credentials.username


async def get_store(owner_id: uuid.UUID = Depends(authenticated_owner_id)) -> DataStore:  # noqa: B008
    """Data store bound to the authenticated owner."""
    return DataStore(owner_id)
