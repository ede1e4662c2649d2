"""
Login endpoint.

Exchanges user name and password for a bearer token used by the write
endpoints.
"""

from fastapi import APIRouter, HTTPException, Request, status

from ....core.security import authenticate, create_access_token
from ....schemas.auth import LoginRequest, Token

router = APIRouter()


@router.post("/login", response_model=Token)
async def login(credentials: LoginRequest, request: Request) -> Token:
    """Authenticate a user and return an access token with the user's roles."""
    user = authenticate(request.app.state.users, credentials.username, credentials.password)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    settings = request.app.state.settings
    token = create_access_token(
        {"sub": user.username},
        settings.secret_key,
        settings.access_token_expire_minutes * 60,
    )
    return Token(access_token=token, roles=list(user.roles))
