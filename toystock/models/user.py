"""
The authenticated user as seen by the stock engine.

Accounts are owned by the external identity provider; the engine only needs
the opaque subject id (to stamp record ownership) and, for display, the email.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class UserContext:
    id: str
    email: Optional[str] = None

    @classmethod
    def from_claims(cls, claims: dict) -> "UserContext":
        """Build a UserContext from decoded token claims."""
        return cls(id=str(claims["sub"]), email=claims.get("email"))
