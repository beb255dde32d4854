"""Identity of the caller, as handed over by the auth provider."""
from pydantic import BaseModel, Field


class Actor(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    avatar_url: str | None = None
    role: str = "user"  # user | editor | admin

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
