from typing import Optional, Union

from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from map_proxy.config import ALGORITHM, SECRET_KEY
from map_proxy.exceptions import SecurityError
from map_proxy.logging_config import log_structured


class TokenData(BaseModel):
    username: Optional[str] = None
    user_id: Optional[Union[int, str]] = None


def get_claims(token: str) -> TokenData:
    """Validate a caller token and return its claims."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        log_structured("JWT validation error", level="warning", error=str(e))
        raise SecurityError("Could not validate credentials") from e

    username = payload.get("sub")
    if username is None:
        raise SecurityError("Token has no subject")
    try:
        return TokenData(username=username, user_id=payload.get("user_id"))
    except ValidationError as e:
        log_structured("Unexpected token claims", level="warning", error=str(e))
        raise SecurityError("Token claims are not valid") from e
