"""Wallet sign-in: nonce issue, signature verification, and JWT sessions."""
import logging
import uuid
from datetime import timedelta

from eth_account import Account
from eth_account.messages import encode_defunct
from jose import JWTError, jwt
from sqlalchemy.engine import Engine
from sqlmodel import select

from fatefi.core.exceptions import AuthError
from fatefi.db import Nonce, User
from fatefi.db.sessions import get_session
from fatefi.utils import utc_now

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def sign_in_message(nonce: str) -> str:
    return f"Sign this message to authenticate with FateFi:\n\nNonce: {nonce}"


def normalize_address(address: str) -> str:
    return address.strip().lower()


class AuthService:
    def __init__(
        self,
        secret: str,
        *,
        engine: Engine | None = None,
        expire_days: int = 7,
    ) -> None:
        self._secret = secret
        self._engine = engine
        self._expire = timedelta(days=expire_days)

    def issue_nonce(self, address: str) -> tuple[str, str]:
        """Create (or replace) the wallet's nonce; returns (nonce, message to sign)."""
        wallet = normalize_address(address)
        if not wallet:
            raise AuthError("address query param required")
        nonce = str(uuid.uuid4())
        with get_session(self._engine) as session:
            row = session.get(Nonce, wallet)
            if row is None:
                row = Nonce(wallet_address=wallet, nonce=nonce)
            else:
                row.nonce = nonce
                row.created_at = utc_now()
            session.add(row)
        return nonce, sign_in_message(nonce)

    def verify(self, address: str, signature: str) -> tuple[str, User]:
        """Check the signature over the wallet's nonce; returns (jwt, user).

        The nonce is consumed on success. The user row is created on first sign-in.
        """
        wallet = normalize_address(address)
        with get_session(self._engine) as session:
            row = session.get(Nonce, wallet)
            if row is None:
                raise AuthError("No nonce found. Request /nonce first.")
            message = encode_defunct(text=sign_in_message(row.nonce))
            try:
                recovered = Account.recover_message(message, signature=signature)
            except Exception as exc:  # pylint: disable=broad-except
                raise AuthError("Signature verification failed") from exc
            if recovered.lower() != wallet:
                raise AuthError("Signature verification failed")

            session.delete(row)
            user = session.exec(select(User).where(User.wallet_address == wallet)).first()
            if user is None:
                user = User(wallet_address=wallet)
                session.add(user)
                session.flush()
                session.refresh(user)
                logger.info("New user %s for wallet %s", user.id, wallet)
        return self.create_token(user), user

    def create_token(self, user: User) -> str:
        payload = {
            "sub": str(user.id),
            "wallet": user.wallet_address,
            "exp": utc_now() + self._expire,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def decode_token(self, token: str) -> int:
        """Return the user id carried by token. Raises AuthError if invalid/expired."""
        try:
            payload = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
            return int(payload["sub"])
        except (JWTError, KeyError, ValueError) as exc:
            raise AuthError("Invalid token") from exc

    def get_user(self, user_id: int) -> User | None:
        with get_session(self._engine) as session:
            return session.get(User, user_id)
