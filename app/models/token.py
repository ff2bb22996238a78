from pydantic import BaseModel


class TokenData(BaseModel):
    """Claims this service reads from a bearer token issued by the identity provider."""

    username: str
    mode: str
