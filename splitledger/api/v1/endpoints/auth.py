from fastapi import APIRouter, Depends, status

from splitledger.api.deps import get_auth_service
from splitledger.models.user import User
from splitledger.schemas.auth import AuthResponse, LoginRequest, SignupRequest
from splitledger.services.auth_service import AuthService

router = APIRouter()


def _auth_response(user: User, token: str) -> AuthResponse:
    return AuthResponse(
        access_token=token,
        token_type="bearer",
        user_id=user.id,
        username=user.username,
        email=user.email,
        full_name=user.full_name,
    )


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(payload: SignupRequest, service: AuthService = Depends(get_auth_service)):
    """Register a new user"""
    user, token = await service.signup(
        payload.username,
        payload.email,
        payload.password,
        payload.full_name,
        payload.phone_number,
    )
    return _auth_response(user, token)


@router.post("/login", response_model=AuthResponse)
async def login(payload: LoginRequest, service: AuthService = Depends(get_auth_service)):
    """Login with username or email and password"""
    user, token = await service.login(payload.username_or_email, payload.password)
    return _auth_response(user, token)
