# civic/api/v1/auth.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from civic.db.session import get_db
from civic.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserOut
from civic.services.users import authenticate_user, register_user
from civic.core.tokens import issue_tokens

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    user = register_user(db, payload)
    return AuthResponse(user=UserOut.model_validate(user), tokens=issue_tokens(user))

@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate_user(db, payload.email, payload.password)
    return AuthResponse(user=UserOut.model_validate(user), tokens=issue_tokens(user))
