from fastapi import APIRouter

# Public - seat layout, reserved seats
from app.api.v1.public.sessions import router as public_sessions_router

# Public - reservations (auth required)
from app.api.v1.public.reservations import router as reservations_router

# Public - movies
from app.api.v1.public.movies import router as movies_router

# Admin
from app.api.v1.admin.sessions import router as admin_sessions_router
from app.api.v1.admin.reservations import router as admin_reservations_router

api_router = APIRouter()

# --- Public ---
api_router.include_router(public_sessions_router)
api_router.include_router(reservations_router)
api_router.include_router(movies_router)

# --- Admin ---
api_router.include_router(admin_sessions_router)
api_router.include_router(admin_reservations_router)
