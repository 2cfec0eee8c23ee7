# Third-party imports
from fastapi import APIRouter

# Local application imports
from samadhan.api.internal.routes.v1.analytics import analytics_router
from samadhan.api.internal.routes.v1.complaints import comment_router, complaint_router
from samadhan.api.internal.routes.v1.config import config_router
from samadhan.api.internal.routes.v1.users import user_router

router = APIRouter()

# Include all internal v1 routers
router.include_router(complaint_router)
router.include_router(comment_router)
router.include_router(analytics_router)
router.include_router(config_router)
router.include_router(user_router)
