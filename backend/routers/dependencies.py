# backend/routers/dependencies.py
from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from database.session import get_db
from models.user_model import User
from services.auth_service import authenticate_admin, AuthError, PermissionDenied
from services.broadcaster import Broadcaster

_bearer = HTTPBearer(auto_error=False)


def get_broadcaster(request: Request) -> Broadcaster:
    return request.app.state.broadcaster


def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    db: Session = Depends(get_db),
) -> User:
    token = credentials.credentials if credentials else None
    try:
        return authenticate_admin(db, token)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e), headers={"WWW-Authenticate": "Bearer"})
    except PermissionDenied as e:
        raise HTTPException(status_code=403, detail=str(e))
