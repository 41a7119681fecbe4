from fastapi import APIRouter

from gallery_api.features.images.endpoint import router as images_router
from gallery_api.features.users.endpoint import router as users_router

from .health import router as health_router
from .index import router as index_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(users_router)
api_router.include_router(images_router)

# mounted straight onto the app: its path is empty until the /api prefix is applied
root_router = index_router
