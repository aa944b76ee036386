from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from . import auth, bookings
from .config import SERVICE_NAME
from .db import get_db
from .models import Booking
from .schemas import BookingOut, CreateBooking, Login, Register, UpdateStatus
from .security import Claims, get_current_user

router = APIRouter()


def _booking_json(booking: Booking) -> dict:
    return BookingOut.model_validate(booking).model_dump(mode="json")


# ================= SYSTEM =================

@router.get("/health", tags=["System"])
async def health(request: Request):
    db_up = await request.app.state.db.ping()
    body = {
        "status": "ok" if db_up else "degraded",
        "service": SERVICE_NAME,
        "database": "up" if db_up else "down",
    }
    if not db_up:
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body)
    return body


# ================= AUTH =================

@router.post("/register", status_code=status.HTTP_201_CREATED, tags=["Auth"])
async def register(data: Register, db: AsyncSession = Depends(get_db)):
    await auth.register(db, data)
    return {"success": True, "message": "Registered Successfully"}


@router.post("/login", tags=["Auth"])
async def login(data: Login, db: AsyncSession = Depends(get_db)):
    token, claims = await auth.login(db, data)
    return {"success": True, "token": token, "user": claims.as_user()}


@router.get("/me", tags=["Auth"])
async def me(user: Claims = Depends(get_current_user)):
    return {"success": True, "user": user.as_user()}


@router.post("/logout", tags=["Auth"])
async def logout(user: Claims = Depends(get_current_user)):
    # tokens are stateless; the client discards its copy
    return {"success": True, "message": "Logged out successfully"}


# ================= BOOKINGS =================

@router.get("/bookings", tags=["Bookings"])
async def my_bookings(user: Claims = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    rows = await bookings.list_by_customer(db, user.id)
    return {"success": True, "bookings": [_booking_json(b) for b in rows]}


@router.get("/provider-bookings", tags=["Bookings"])
async def provider_bookings(user: Claims = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    rows = await bookings.list_by_provider(db, user)
    return {"success": True, "bookings": [_booking_json(b) for b in rows]}


@router.post("/booking", status_code=status.HTTP_201_CREATED, tags=["Bookings"])
async def create_booking(
    data: CreateBooking,
    user: Claims = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    booking = await bookings.create_booking(db, user, data)
    return {"success": True, "booking": _booking_json(booking)}


@router.get("/booking/{booking_id}", tags=["Bookings"])
async def get_booking(
    booking_id: int,
    user: Claims = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    booking = await bookings.get_booking(db, booking_id, user)
    return {"success": True, "booking": _booking_json(booking)}


@router.put("/booking/{booking_id}", tags=["Bookings"])
async def update_booking(
    booking_id: int,
    data: UpdateStatus,
    user: Claims = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await bookings.update_status(db, booking_id, data.status, user)
    return {"success": True, "message": "Booking updated successfully"}


@router.delete("/booking/{booking_id}", tags=["Bookings"])
async def cancel_booking(
    booking_id: int,
    user: Claims = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await bookings.cancel_booking(db, booking_id, user)
    return {"success": True, "message": "Booking cancelled successfully"}
