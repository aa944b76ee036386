from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .errors import DuplicateEmail
from .models import Role, User


async def find_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user(db: AsyncSession, user_id: int) -> User | None:
    return await db.get(User, user_id)


async def find_provider(db: AsyncSession, name: str) -> User | None:
    """Return the provider with exactly this name, or None if there are zero or several."""
    result = await db.execute(
        select(User).where(User.role == Role.PROVIDER.value, User.name == name).limit(2)
    )
    rows = result.scalars().all()
    if len(rows) != 1:
        return None
    return rows[0]


async def create_user(
    db: AsyncSession,
    name: str,
    email: str,
    password_hash: str,
    phone: str,
    role: str,
) -> int:
    if await find_by_email(db, email):
        raise DuplicateEmail()

    user = User(name=name, email=email, password=password_hash, phone=phone, role=role)
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # unique constraint on email lost a race with a concurrent registration
        await db.rollback()
        raise DuplicateEmail()

    return user.id
