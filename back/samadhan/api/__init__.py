# Third-party imports
from fastapi import APIRouter

# Local application imports
from samadhan.api.internal.main import router as internal_router
from samadhan.settings import settings

router = APIRouter(prefix=settings.API_V1_STR)

router.include_router(internal_router)
