"""
Shared route dependencies: the authenticated owner and the trip store.
"""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.identifiers import TripIdPolicy
from app.core.security import decode_access_token
from app.db.repositories import TripStore
from app.db.session import get_db
from app.models.user import User

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the bearer token to an active user."""
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise unauthorized

    payload = decode_access_token(credentials.credentials)
    if not payload or payload.get("user_id") is None:
        raise unauthorized

    user = db.query(User).filter(User.id == payload["user_id"]).first()
    if not user:
        raise unauthorized
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )
    return user


def get_trip_id_policy() -> TripIdPolicy:
    """Trip id policy for this deployment."""
    return TripIdPolicy.from_settings(settings)


def get_trip_store(
    db: Session = Depends(get_db),
    id_policy: TripIdPolicy = Depends(get_trip_id_policy)
) -> TripStore:
    return TripStore(db, id_policy)
