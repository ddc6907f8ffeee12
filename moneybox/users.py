"""
User Module

Account owners. A user is an immutable identity value; the email address is
the recipient key for account notifications.
"""

from dataclasses import dataclass
from typing import Any, Dict
import uuid


@dataclass(frozen=True)
class User:
    """Account owner identity"""
    id: str
    name: str
    email: str

    @classmethod
    def create(cls, name: str, email: str) -> 'User':
        """Create a user with a freshly generated id"""
        return cls(id=str(uuid.uuid4()), name=name, email=email)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'User':
        return cls(id=data['id'], name=data['name'], email=data['email'])
