"""Login, sign-up and logout endpoints."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response

from storefront.auth.dependencies import ACCESS_TOKEN_COOKIE, get_access_token, get_current_session, get_identity_provider
from storefront.auth.session import AuthSession, AuthenticationError, IdentityProvider
from storefront.errors import MESSAGE_SIGNUP_SUCCESS
from .models import LoginRequest, SignupRequest

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
def login(request: LoginRequest, response: Response, identity: IdentityProvider = Depends(get_identity_provider)):
    """Sign in; the access token is returned and also set as a cookie."""
    try:
        session = identity.sign_in(request.email, request.password)
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=str(e))

    response.set_cookie(ACCESS_TOKEN_COOKIE, session.access_token, httponly=True, samesite="lax")
    return {
        "email": session.email,
        "access_token": session.access_token,
        "redirect_to": "/",
    }


@router.post("/signup")
def signup(request: SignupRequest, identity: IdentityProvider = Depends(get_identity_provider)):
    """Create an account; the user logs in afterwards."""
    try:
        identity.sign_up(request.email, request.password, request.confirm_password)
    except AuthenticationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"message": MESSAGE_SIGNUP_SUCCESS}


@router.post("/logout")
def logout(
    response: Response,
    access_token: Optional[str] = Depends(get_access_token),
    identity: IdentityProvider = Depends(get_identity_provider),
):
    """Revoke the session and drop the cookie."""
    if access_token:
        identity.sign_out(access_token)
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    return {"redirect_to": "/login"}


@router.get("/session")
def current_session(session: Optional[AuthSession] = Depends(get_current_session)):
    """Who is logged in, if anyone."""
    if session is None:
        return {"authenticated": False, "email": None}
    return {"authenticated": True, "email": session.email}
