import uuid

from fastapi import Header, HTTPException, status


async def get_current_author_id(x_author_id: str = Header(..., alias="X-Author-Id")) -> uuid.UUID:
    """
    Автор, от имени которого выполняется запись.

    Разрешение сессии находится вне этого сервиса: шлюз аутентификации
    проставляет заголовок X-Author-Id после проверки сессии.
    """
    try:
        return uuid.UUID(x_author_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not resolve author"
        )
