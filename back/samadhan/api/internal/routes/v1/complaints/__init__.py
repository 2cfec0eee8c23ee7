from .comment_routes import router as comment_router
from .complaint_routes import router as complaint_router

__all__ = ["comment_router", "complaint_router"]
