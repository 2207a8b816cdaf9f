"""Auth endpoints: register, login, logout and the current account."""

from fastapi import APIRouter, Depends, Response, status

from messhub.adapters.rest.dependencies import get_factory, get_identity
from messhub.adapters.rest.schemas import AccountOut, LoginBody, RegisterBody, envelope
from messhub.application.context import Identity
from messhub.application.dto import AuthResult, LoginRequest
from messhub.factory import ServiceFactory

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_token_cookie(response: Response, token: str, factory: ServiceFactory) -> None:
    config = factory.config
    response.set_cookie(
        key=config.cookie_name,
        value=token,
        max_age=config.jwt_expiry_seconds,
        httponly=True,
        secure=config.is_production,
        samesite="lax",
    )


def _auth_payload(result: AuthResult) -> dict:
    return envelope(user=AccountOut.model_validate(result.account), token=result.token)


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterBody,
    response: Response,
    factory: ServiceFactory = Depends(get_factory),
):
    result = await factory.create_authentication_service().register(body)
    _set_token_cookie(response, result.token, factory)
    return _auth_payload(result)


@router.post("/login")
async def login(
    body: LoginBody,
    response: Response,
    factory: ServiceFactory = Depends(get_factory),
):
    result = await factory.create_authentication_service().login(LoginRequest(
        email=str(body.email),
        password=body.password,
        role=body.role.value if body.role else None,
    ))
    _set_token_cookie(response, result.token, factory)
    return _auth_payload(result)


@router.post("/logout")
async def logout(response: Response, factory: ServiceFactory = Depends(get_factory)):
    """Drop the cookie. The token itself stays valid until it expires."""
    response.delete_cookie(factory.config.cookie_name)
    return envelope(message="Logged out successfully")


@router.get("/me")
async def me(
    identity: Identity = Depends(get_identity),
    factory: ServiceFactory = Depends(get_factory),
):
    account = await factory.create_authentication_service().get_account(identity.account_id)
    return envelope(user=AccountOut.model_validate(account))
