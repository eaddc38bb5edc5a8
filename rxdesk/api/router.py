# rxdesk/api/router.py
from fastapi import APIRouter
from rxdesk.api import (
    routes_auth,
    routes_doctors,
    routes_patients,
    routes_prescriptions,
    routes_misc,
)

api_router = APIRouter()
api_router.include_router(routes_auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(routes_doctors.router,
                          prefix="/doctors",
                          tags=["doctors"])
api_router.include_router(routes_patients.router,
                          prefix="/patients",
                          tags=["patients"])
api_router.include_router(routes_prescriptions.router,
                          prefix="/prescriptions",
                          tags=["prescriptions"])
api_router.include_router(routes_misc.router, prefix="/misc", tags=["misc"])
