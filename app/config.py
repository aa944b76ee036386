import os

SERVICE_NAME = os.getenv("SERVICE_NAME") or "booking-service"

DATABASE_URL = os.getenv("BOOKING_DB") or "sqlite+aiosqlite:///./service_sphere.db"
DB_ECHO = (os.getenv("DB_ECHO") or "false").lower() == "true"

JWT_SECRET = os.getenv("JWT_SECRET")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM") or "HS256"
JWT_EXPIRE_HOURS = int(os.getenv("JWT_EXPIRE_HOURS") or "24")

if not JWT_SECRET:
    raise RuntimeError("JWT_SECRET environment variable is not set")

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS") or "10")

CORS_ORIGINS = [
    o.strip() for o in (os.getenv("CORS_ORIGINS") or "*").split(",") if o.strip()
]

LOG_LEVEL = (os.getenv("LOG_LEVEL") or "INFO").upper()
