from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from docshelf.core.db import get_db
from docshelf.core.security import user_id_from_token
from docshelf.db.repositories.user_repository import UserRepository
from docshelf.domains.identity.entities import User

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Зависимость для получения текущего пользователя"""
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise unauthorized

    user_id = user_id_from_token(credentials.credentials)
    if user_id is None:
        raise unauthorized

    user = await UserRepository(db).get_by_id(user_id)
    if not user:
        raise unauthorized

    return user
