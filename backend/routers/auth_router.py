# backend/routers/auth_router.py
import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database.session import get_db
from schemas.users import LoginPayload, LoginResponse, UserOut
from services.auth_service import authenticate_user, create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/login", response_model=LoginResponse)
def login(body: LoginPayload, db: Session = Depends(get_db)):
    u = authenticate_user(db, body.email, body.password)
    if not u:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    u.last_login = datetime.utcnow()
    db.commit()
    db.refresh(u)

    logger.info(f"User {u.id} logged in ({u.role})")
    return LoginResponse(
        token=create_access_token(u),
        user=UserOut(
            id=u.id,
            first_name=u.first_name,
            last_name=u.last_name,
            email=u.email,
            phone=u.phone,
            role=u.role,
            is_verified=u.is_verified,
        ),
    )
