import logging

from sqlalchemy import and_, false, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .errors import Forbidden, InvalidToken, NotFound, ValidationError
from .models import MAX_ID, Booking, BookingStatus, Role
from .schemas import CreateBooking
from .security import Claims
from .users import find_provider, get_user

logger = logging.getLogger(__name__)

_ORDER = (Booking.booking_date.desc(), Booking.booking_time.desc(), Booking.id.desc())


def _assigned_to(actor: Claims):
    """Rows assigned to a provider: linked by id, or unlinked rows carrying their name."""
    if actor.role != Role.PROVIDER.value:
        return false()
    return or_(
        Booking.provider_id == actor.id,
        and_(Booking.provider_id.is_(None), Booking.provider == actor.name),
    )


def _owned_by(actor: Claims):
    return Booking.customer_id == actor.id


def _is_assigned(booking: Booking, actor: Claims) -> bool:
    if actor.role != Role.PROVIDER.value:
        return False
    if booking.provider_id is not None:
        return booking.provider_id == actor.id
    return booking.provider == actor.name


def _check_id(booking_id: int):
    # ids outside the key range cannot exist; never send them to the driver
    if not 1 <= booking_id <= MAX_ID:
        raise NotFound()


async def _missing_or_forbidden(db: AsyncSession, booking_id: int):
    # existence is checked before ownership: unknown ids are 404 for everyone
    res = await db.execute(select(Booking.id).where(Booking.id == booking_id))
    if res.scalar_one_or_none() is None:
        raise NotFound()
    raise Forbidden()


async def create_booking(db: AsyncSession, actor: Claims, data: CreateBooking) -> Booking:
    if actor.role != Role.CUSTOMER.value:
        raise Forbidden("Only customers can create bookings")

    if await get_user(db, actor.id) is None:
        raise InvalidToken()

    provider_name = data.provider
    provider_id = None

    if data.provider_id is not None:
        linked = await get_user(db, data.provider_id)
        if linked is None or linked.role != Role.PROVIDER.value:
            raise ValidationError([{"field": "provider_id", "msg": "Unknown provider"}])
        provider_id = linked.id
        provider_name = provider_name or linked.name
    else:
        linked = await find_provider(db, provider_name)
        if linked is not None:
            provider_id = linked.id

    booking = Booking(
        customer_id=actor.id,
        customer_name=data.customer_name,
        service=data.service,
        provider=provider_name,
        provider_id=provider_id,
        booking_date=data.booking_date,
        booking_time=data.booking_time,
        address=data.address,
        notes=data.notes,
        status=BookingStatus.PENDING.value,
    )
    db.add(booking)
    await db.commit()
    await db.refresh(booking)

    logger.info(
        "booking created id=%s customer_id=%s provider_id=%s",
        booking.id,
        booking.customer_id,
        booking.provider_id,
    )
    return booking


async def list_by_customer(db: AsyncSession, customer_id: int) -> list[Booking]:
    res = await db.execute(select(Booking).where(Booking.customer_id == customer_id).order_by(*_ORDER))
    return list(res.scalars().all())


async def list_by_provider(db: AsyncSession, actor: Claims) -> list[Booking]:
    if actor.role != Role.PROVIDER.value:
        raise Forbidden("Only providers can view provider bookings")

    res = await db.execute(select(Booking).where(_assigned_to(actor)).order_by(*_ORDER))
    return list(res.scalars().all())


async def get_booking(db: AsyncSession, booking_id: int, actor: Claims) -> Booking:
    _check_id(booking_id)
    booking = await db.get(Booking, booking_id)
    if booking is None:
        raise NotFound()

    if booking.customer_id != actor.id and not _is_assigned(booking, actor):
        raise Forbidden()

    return booking


async def update_status(db: AsyncSession, booking_id: int, status: str, actor: Claims):
    """
    Set a booking's status. Any status may follow any other.

    Allowed for the owning customer and for the assigned provider; the
    ownership predicate is part of the UPDATE so check and write are one statement.
    """
    if status not in {s.value for s in BookingStatus}:
        raise ValidationError([{"field": "status", "msg": "Invalid status"}])
    _check_id(booking_id)

    stmt = (
        update(Booking)
        .where(Booking.id == booking_id, or_(_owned_by(actor), _assigned_to(actor)))
        .values(status=status)
        .execution_options(synchronize_session=False)
    )
    res = await db.execute(stmt)
    await db.commit()

    if res.rowcount == 0:
        await _missing_or_forbidden(db, booking_id)

    logger.info("booking id=%s status=%s by user id=%s", booking_id, status, actor.id)


async def cancel_booking(db: AsyncSession, booking_id: int, actor: Claims):
    """Soft cancel: the owner's booking moves to Cancelled, the row is kept."""
    _check_id(booking_id)
    stmt = (
        update(Booking)
        .where(Booking.id == booking_id, _owned_by(actor))
        .values(status=BookingStatus.CANCELLED.value)
        .execution_options(synchronize_session=False)
    )
    res = await db.execute(stmt)
    await db.commit()

    if res.rowcount == 0:
        await _missing_or_forbidden(db, booking_id)

    logger.info("booking id=%s cancelled by user id=%s", booking_id, actor.id)
