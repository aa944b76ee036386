import logging

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from .errors import InvalidCredentials
from .schemas import Login, Register
from .security import Claims, create_access_token, hash_password, verify_password
from .users import create_user, find_by_email

logger = logging.getLogger(__name__)


async def register(db: AsyncSession, data: Register) -> int:
    hashed = await run_in_threadpool(hash_password, data.password)

    user_id = await create_user(
        db,
        name=data.name,
        email=data.email,
        password_hash=hashed,
        phone=data.phone,
        role=data.role,
    )

    logger.info("registered user id=%s role=%s", user_id, data.role)
    return user_id


async def login(db: AsyncSession, data: Login) -> tuple[str, Claims]:
    """
    Check credentials and issue a token.

    Unknown email and wrong password raise the same InvalidCredentials,
    and both run one bcrypt verify.
    """
    user = await find_by_email(db, data.email)

    ok = await run_in_threadpool(verify_password, data.password, user.password if user else None)
    if not user or not ok:
        logger.info("login failed")
        raise InvalidCredentials()

    claims = Claims(id=user.id, name=user.name, email=user.email, role=user.role)
    token = create_access_token(claims)

    logger.info("login ok user id=%s role=%s", user.id, user.role)
    return token, claims
