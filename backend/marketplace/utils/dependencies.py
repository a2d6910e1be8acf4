import logging

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from marketplace.database.connection import mongo_db_dependency
from marketplace.repositories.user_repository import UserRepository
from marketplace.utils.security import decode_access_token, user_id_from_payload


logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_user_repository(db = Depends(mongo_db_dependency)) -> UserRepository:
    return UserRepository(db)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    user_repo: UserRepository = Depends(get_user_repository),
) -> dict:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No token, authorization denied")
    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.PyJWTError as exc:
        logger.warning("Rejected bearer token: %s", exc)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token is not valid")
    user_id = user_id_from_payload(payload)
    user = await user_repo.get_user_by_id(user_id) if user_id else None
    if not user:
        logger.warning("Token subject %s does not match a user", user_id)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token is not valid")
    return user


async def require_admin(current_user: dict = Depends(get_current_user)) -> dict:
    if not current_user.get("is_admin"):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied. Admin only.")
    return current_user
