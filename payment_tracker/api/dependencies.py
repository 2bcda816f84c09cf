"""Dependency injection for FastAPI endpoints"""

import logging
import secrets

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from payment_tracker.config import settings
from payment_tracker.infrastructure.database.repositories import PaymentRepository
from payment_tracker.infrastructure.database.session import get_db

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_payment_repository(db: Session = Depends(get_db)) -> PaymentRepository:
    """Provide payment repository bound to the request's session"""
    return PaymentRepository(db)


def require_session(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """
    Reject requests without a valid bearer token.

    Every record store and report endpoint depends on this; there is no
    anonymous access.
    """
    if credentials is None or not credentials.credentials:
        logger.warning("Auth failed: no token provided for %s", request.url.path)
        raise HTTPException(
            status_code=401,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = credentials.credentials
    if not any(secrets.compare_digest(token, accepted) for accepted in settings.accepted_tokens):
        logger.warning("Auth failed: invalid token for %s", request.url.path)
        raise HTTPException(
            status_code=401,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return token
