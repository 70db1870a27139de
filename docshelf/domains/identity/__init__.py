from docshelf.domains.identity.entities import User

__all__ = [
    "User"
]
