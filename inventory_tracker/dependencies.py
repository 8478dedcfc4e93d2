from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from inventory_tracker.config import get_settings
from inventory_tracker.core.dashboard_auth import dashboard_auth_enabled, session_user
from inventory_tracker.core.security import authenticate_request, resolve_user_id
from inventory_tracker.database.session import get_db
from inventory_tracker.services.persistence_gateway import PersistenceGateway


def current_user_id(request: Request) -> str:
    """Session user, then API key or JWT, then the default user.

    The API key header name comes from ``API_KEY_HEADER``. Anonymous access
    is refused once any kind of login is configured.
    """
    user = session_user(request)
    if user:
        return user
    settings = get_settings()
    auth = authenticate_request(
        api_key=request.headers.get(settings.API_KEY_HEADER),
        authorization=request.headers.get("Authorization"),
    )
    if auth is None and dashboard_auth_enabled():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return resolve_user_id(auth)


def get_gateway(
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
) -> PersistenceGateway:
    return PersistenceGateway(db, user_id)


__all__ = ["current_user_id", "get_db", "get_gateway"]
