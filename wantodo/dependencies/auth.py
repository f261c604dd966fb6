from fastapi import HTTPException, status
from jose import ExpiredSignatureError, JWTError, jwt

from .. import config
from ..validation import strip_bearer


def authenticate(authorization: str) -> str:
    """Resolve the owner id from a bearer token.

    The token's shape has already been checked by request validation;
    this verifies the signature and reads the ``sub`` claim.
    """
    token = strip_bearer(authorization.strip())
    try:
        payload = jwt.decode(token, config.AUTH_SECRET, algorithms=[config.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    owner = payload.get("sub")
    if not owner:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has no subject",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return str(owner)
