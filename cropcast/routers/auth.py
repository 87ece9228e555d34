"""Authentication API endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from cropcast.auth import create_access_token, get_current_user, get_password_hash, verify_password
from cropcast.config import get_settings
from cropcast.database import get_db
from cropcast.models import Profile, User
from cropcast.rate_limit import limiter
from cropcast.schemas import LoginRequest, SignupRequest, TokenResponse, UserResponse

router = APIRouter(prefix="/auth", tags=["auth"])
settings = get_settings()


@router.post("/signup", response_model=UserResponse, status_code=201)
@limiter.limit(settings.auth_rate_limit)
async def signup(request: Request, data: SignupRequest, db: Session = Depends(get_db)):
    """Create a new user account and its profile."""
    email = data.email.lower()
    existing = db.query(User).filter(User.email == email).first()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Could not create account")

    full_name = (data.full_name or "").strip() or None
    user = User(email=email, password_hash=get_password_hash(data.password))
    user.profile = Profile(full_name=full_name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@router.post("/login", response_model=TokenResponse)
@limiter.limit(settings.auth_rate_limit)
async def login(request: Request, data: LoginRequest, db: Session = Depends(get_db)):
    """Login and get access token."""
    user = db.query(User).filter(User.email == data.email.lower()).first()

    if not user or not verify_password(data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account disabled"
        )

    return {"access_token": create_access_token(user), "token_type": "bearer"}


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user."""
    return current_user
