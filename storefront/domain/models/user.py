from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

Role = Literal["guest", "user", "customer", "admin"]


class PublicUser(BaseModel):
    """What the auth endpoints return: never the stored secret."""
    id: str
    name: str
    email: str
    role: Role = "user"


class User(PublicUser):
    token: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_guest(self) -> bool:
        return self.role == "guest"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
