from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from .config import BCRYPT_ROUNDS, JWT_ALGORITHM, JWT_EXPIRE_HOURS, JWT_SECRET
from .errors import InvalidToken, Unauthenticated

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)

bearer_scheme = HTTPBearer(auto_error=False)

TOKEN_TTL = timedelta(hours=JWT_EXPIRE_HOURS)

# Compared against when the email is unknown so both login failures cost one bcrypt verify.
_DUMMY_HASH = pwd_context.hash("not-a-real-password")


@dataclass(frozen=True)
class Claims:
    id: int
    name: str
    email: str
    role: str

    def as_user(self) -> dict:
        return {"id": self.id, "name": self.name, "email": self.email, "role": self.role}


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str | None) -> bool:
    if not hashed:
        pwd_context.verify(password, _DUMMY_HASH)
        return False
    try:
        return pwd_context.verify(password, hashed)
    except ValueError:
        # stored value is not a recognised hash
        return False


def create_access_token(claims: Claims, issued_at: datetime | None = None) -> str:
    iat = issued_at or datetime.now(timezone.utc)
    payload = {
        "sub": str(claims.id),
        "id": claims.id,
        "name": claims.name,
        "email": claims.email,
        "role": claims.role,
        "iat": int(iat.timestamp()),
        "exp": int((iat + TOKEN_TTL).timestamp()),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Claims:
    """Verify signature and expiry; raise InvalidToken on any failure."""
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise InvalidToken()

    try:
        return Claims(
            id=int(payload["id"]),
            name=str(payload["name"]),
            email=str(payload["email"]),
            role=str(payload["role"]),
        )
    except (KeyError, TypeError, ValueError):
        raise InvalidToken()


def get_current_user(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Claims:
    token = None
    if creds and creds.scheme.lower() == "bearer":
        token = creds.credentials

    if not token:
        raise Unauthenticated()

    claims = decode_access_token(token)

    request.state.user_id = claims.id
    request.state.user_role = claims.role

    return claims
