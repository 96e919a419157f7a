"""API router composition."""

from fastapi import APIRouter, Depends

from app.api.v1.endpoints import auth, menu_images, orders, payments, policy, reports, sms, students
from app.auth import require_admin

admin_router: APIRouter = APIRouter(dependencies=[Depends(require_admin)])
admin_router.include_router(students.router, tags=["students"])
admin_router.include_router(policy.admin_router, tags=["policy"])
admin_router.include_router(orders.admin_router, tags=["orders"])
admin_router.include_router(payments.admin_router, tags=["payments"])
admin_router.include_router(reports.admin_router, tags=["reports"])
admin_router.include_router(menu_images.admin_router, tags=["menu-images"])

api_router: APIRouter = APIRouter()
api_router.include_router(auth.router, prefix="/admin", tags=["auth"])
api_router.include_router(policy.router, tags=["policy"])
api_router.include_router(orders.router, tags=["orders"])
api_router.include_router(payments.router, tags=["payments"])
api_router.include_router(menu_images.router, tags=["menu-images"])
api_router.include_router(sms.router, tags=["sms"])
api_router.include_router(admin_router, prefix="/admin")
