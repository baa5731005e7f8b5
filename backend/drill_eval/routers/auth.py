from typing import List

from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from ..settings import settings

# Tokens are issued by the external auth service
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")

EVALUATE_DRILL = "EVALUATE_DRILL"


class User(BaseModel):
	username: str
	permissions: List[str] = []


def get_current_user(token: str = Depends(oauth2_scheme)) -> User:
	credentials_exception = HTTPException(
		status_code=401,
		detail="Could not validate credentials",
		headers={"WWW-Authenticate": "Bearer"},
	)
	try:
		payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
		username: str | None = payload.get("sub")
		if username is None:
			raise credentials_exception
	except JWTError:
		raise credentials_exception
	permissions = payload.get("permissions") or []
	if not isinstance(permissions, list):
		permissions = [permissions]
	return User(username=username, permissions=[str(p) for p in permissions])


def require_permission(permission: str):
	def _check(user: User = Depends(get_current_user)) -> User:
		if permission not in user.permissions:
			raise HTTPException(status_code=403, detail=f"missing permission {permission}")
		return user
	return _check
