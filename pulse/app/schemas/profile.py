from pydantic import BaseModel


class ProfileSnapshot(BaseModel):
    """Author profile as currently known to the identity provider."""

    sub: str
    email: str | None = None
    name: str | None = None
    picture: str | None = None
