"""V1 API router aggregation."""

from fastapi import APIRouter

from losttofound.api.v1.auth import router as auth_router
from losttofound.api.v1.billing import router as billing_router
from losttofound.api.v1.finder_messages import router as finder_messages_router
from losttofound.api.v1.pets import router as pets_router
from losttofound.api.v1.profile import router as profile_router
from losttofound.api.v1.public import router as public_router

v1_router = APIRouter(prefix="/v1")
v1_router.include_router(auth_router)
v1_router.include_router(profile_router)
v1_router.include_router(pets_router)
v1_router.include_router(public_router)
v1_router.include_router(finder_messages_router)
v1_router.include_router(billing_router)
