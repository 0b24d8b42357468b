from datetime import datetime
from pydantic import BaseModel
from memories.schemas.user import UserOut

class TokenData(BaseModel):
    """Identity decoded from a verified bearer token."""
    id: int
    name: str
    role: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class AuthResponse(BaseModel):
    token: str
    user: UserOut
