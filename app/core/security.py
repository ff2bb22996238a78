"""
Bearer token handling.

Tokens are issued by the external identity provider; this service only
verifies them. `create_access_token` mirrors the provider's format and is used
by operational tooling and tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Literal

import jwt
from jwt.exceptions import ExpiredSignatureError, PyJWTError

from app.core.config import get_settings
from app.exceptions import InvalidTokenError, TokenExpiredError
from app.models.token import TokenData

TokenMode = Literal["admin", "partner", "volunteer"]


def create_access_token(
    subject: str, mode: TokenMode, expires_delta: timedelta | None = None
) -> str:
    """
    Encode an access token for `subject` acting in `mode`.

    Parameters:
        subject (str): Admin username, or partner / volunteer email.
        mode (TokenMode): Which kind of account the subject is.
        expires_delta (timedelta | None): Lifetime; defaults to ACCESS_TOKEN_EXPIRE_MINUTES.

    Returns:
        str: Encoded JWT.
    """
    settings = get_settings()
    expires_delta = expires_delta or timedelta(
        minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    payload = {
        "sub": subject,
        "mode": mode,
        "type": "access",
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(
        payload, settings.SECRET_KEY.get_secret_value(), algorithm=settings.ALGORITHM
    )


def decode_access_token(token: str) -> TokenData:
    """
    Verify an access token and extract its subject and mode.

    Raises:
        TokenExpiredError: If the token is past its expiry.
        InvalidTokenError: If the signature is bad, the token is not an access
            token, or `sub` / `mode` are missing.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY.get_secret_value(),
            algorithms=[settings.ALGORITHM],
        )
    except ExpiredSignatureError:
        raise TokenExpiredError("access")
    except PyJWTError:
        raise InvalidTokenError()

    username: str | None = payload.get("sub")
    mode: str | None = payload.get("mode")
    # Refresh tokens from the provider must not reach the API
    if not username or not mode or payload.get("type") != "access":
        raise InvalidTokenError()
    return TokenData(username=username, mode=mode)
