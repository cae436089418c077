from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from pydantic import ValidationError

from .schemas import CurrentUser
from .settings import settings

# Tokens are issued by the platform's auth provider; this service only verifies them.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")


def _resolve_expiry(expires_delta: Optional[timedelta]) -> datetime:
	delta = expires_delta
	if delta is None:
		minutes = getattr(settings, "access_token_expire_minutes", None)
		if isinstance(minutes, int) and minutes > 0:
			delta = timedelta(minutes=minutes)
		else:
			delta = timedelta(days=30)
	now = datetime.now(timezone.utc)
	try:
		return now + delta
	except OverflowError:
		# Cap at far future but within datetime bounds
		return datetime.max.replace(tzinfo=timezone.utc)


def create_access_token(user: CurrentUser, expires_delta: Optional[timedelta] = None) -> str:
	to_encode: Dict[str, Any] = {
		"sub": user.id,
		"role": user.role,
		"prefs": user.preferences.model_dump(),
		"exp": _resolve_expiry(expires_delta),
	}
	return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> CurrentUser:
	"""Return the user a token was issued for. Raises ValueError when it cannot be trusted."""
	try:
		payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
	except JWTError as err:
		raise ValueError("invalid token") from err
	user_id: str | None = payload.get("sub")
	if not user_id:
		raise ValueError("token has no subject")
	try:
		return CurrentUser(id=user_id, role=payload.get("role") or "student", preferences=payload.get("prefs") or {})
	except ValidationError as err:
		raise ValueError("token claims are malformed") from err


def get_current_user(token: str = Depends(oauth2_scheme)) -> CurrentUser:
	try:
		return decode_access_token(token)
	except ValueError:
		raise HTTPException(status_code=401, detail="Could not validate credentials")


def require_teacher(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
	if user.role != "teacher":
		raise HTTPException(status_code=403, detail="teacher role required")
	return user
