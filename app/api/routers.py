# app/api/routers.py

from fastapi import APIRouter

from app.api.v1.routes import auth, moderation, reports

main_router = APIRouter()

main_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
main_router.include_router(reports.router, prefix="/reports", tags=["Reports"])
main_router.include_router(moderation.router, prefix="/moderation", tags=["Moderation"])
