from typing import Optional
from pydantic import BaseModel, EmailStr, constr

Password = constr(min_length=1, max_length=128)

class LoginPayload(BaseModel):
    email: EmailStr
    password: Password

class UserOut(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    role: str
    is_verified: bool

class LoginResponse(BaseModel):
    ok: bool = True
    token: str
    user: UserOut
