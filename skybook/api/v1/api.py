from fastapi import APIRouter
from skybook.api.v1.routes.auth import router as auth_router
from skybook.api.v1.routes.flights import router as flights_router
from skybook.api.v1.routes.bookings import router as bookings_router
from skybook.api.v1.routes.payments import router as payments_router
from skybook.api.v1.routes.check_in import router as check_in_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth_router)
api_router.include_router(flights_router)
api_router.include_router(bookings_router)
api_router.include_router(payments_router)
api_router.include_router(check_in_router)
