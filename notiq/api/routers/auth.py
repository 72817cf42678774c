"""Authentication routes: signup, login, Google/GitHub OAuth and profile."""
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import RedirectResponse

from notiq.api.deps import get_current_user
from notiq.api.schemas.auth import LoginOut, LoginPayload, ProfileOut, SignupOut, SignupPayload
from notiq.api.schemas.user import UserPublic
from notiq.services import auth_service as service
from notiq.services import oauth_service

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/signup",
    response_model=SignupOut,
    status_code=status.HTTP_201_CREATED,
    summary="Register user",
    description="Creates a password account. 409 when the email is already registered.",
)
def signup(payload: SignupPayload) -> SignupOut:
    return SignupOut(**service.signup(payload))


@router.post(
    "/login",
    response_model=LoginOut,
    summary="Password login",
    description="Checks email/password and issues a bearer token.",
)
def login(payload: LoginPayload) -> LoginOut:
    return LoginOut(**service.login(payload))


@router.get("/google", summary="Start Google login")
def google_login() -> RedirectResponse:
    return RedirectResponse(oauth_service.login_redirect_url("google"))


@router.get("/google/callback", summary="Google login callback")
def google_callback(code: str | None = Query(default=None), state: str | None = Query(default=None)) -> RedirectResponse:
    return RedirectResponse(oauth_service.complete_login("google", code=code, state=state))


@router.get("/github", summary="Start GitHub login")
def github_login() -> RedirectResponse:
    return RedirectResponse(oauth_service.login_redirect_url("github"))


@router.get("/github/callback", summary="GitHub login callback")
def github_callback(code: str | None = Query(default=None), state: str | None = Query(default=None)) -> RedirectResponse:
    return RedirectResponse(oauth_service.complete_login("github", code=code, state=state))


@router.get(
    "/profile",
    response_model=ProfileOut,
    summary="Authenticated user",
    description="Returns the caller's account without secrets.",
)
def profile(user=Depends(get_current_user)) -> ProfileOut:
    return ProfileOut(message="Access Granted", user=UserPublic.from_doc(user))
