from datetime import datetime
from typing import Optional


class User:
    """Сущность пользователя домена Identity"""

    def __init__(
        self,
        id: int,
        email: str,
        username: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.id = id
        self.email = email
        self.username = username
        self.created_at = created_at
        self.updated_at = updated_at

    def __eq__(self, other) -> bool:
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, username={self.username})"


def display_name(username: Optional[str], email: str) -> str:
    return username or email
