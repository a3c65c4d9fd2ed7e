"""Wallet sign-in routes."""
from fastapi import APIRouter, HTTPException, Query

from fatefi.core import AuthError, ErrorMapper
from fatefi.deps import Auth, CurrentUser
from fatefi.schemas import NonceOut, TokenOut, UserOut, VerifyIn

router = APIRouter(prefix="/api/auth", tags=["auth"])

_errors = ErrorMapper(api_name="Auth")


@router.get("/nonce", response_model=NonceOut)
async def get_nonce(
    auth: Auth,
    address: str = Query(default="", description="Wallet address (0x...)"),
) -> NonceOut:
    """Issue a nonce for the wallet to sign."""
    if not address.strip():
        raise HTTPException(status_code=400, detail="address query param required")
    nonce, message = auth.issue_nonce(address)
    return NonceOut(nonce=nonce, message=message)


@router.post("/verify", response_model=TokenOut)
async def verify_signature(body: VerifyIn, auth: Auth) -> TokenOut:
    """Verify the signed nonce; returns a JWT and the (possibly new) user."""
    try:
        token, user = auth.verify(body.address, body.signature)
    except AuthError as exc:
        _errors.raise_http(exc)
    return TokenOut(token=token, user=UserOut.model_validate(user))


@router.get("/me", response_model=UserOut)
async def get_me(user: CurrentUser) -> UserOut:
    """Get the signed-in user."""
    return UserOut.model_validate(user)
