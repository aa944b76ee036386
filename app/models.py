import enum

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text, Time, func

from .db import Base


class Role(str, enum.Enum):
    CUSTOMER = "customer"
    PROVIDER = "provider"


class BookingStatus(str, enum.Enum):
    PENDING = "Pending"
    ACCEPTED = "Accepted"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (BookingStatus.COMPLETED, BookingStatus.CANCELLED)


ROLES = [r.value for r in Role]
STATUSES = [s.value for s in BookingStatus]

# upper bound of the INTEGER primary keys
MAX_ID = 2**31 - 1


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    role = Column(String(20), nullable=False, index=True)  # customer/provider
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)

    customer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    customer_name = Column(String(255), nullable=False)

    service = Column(String(100), nullable=False)
    provider = Column(String(255), nullable=False, index=True)
    provider_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    booking_date = Column(Date, nullable=False)
    booking_time = Column(Time, nullable=False)
    address = Column(String(500), nullable=False)
    notes = Column(Text, nullable=True)

    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
