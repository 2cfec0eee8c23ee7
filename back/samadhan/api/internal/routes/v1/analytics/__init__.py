from .analytics_routes import router as analytics_router

__all__ = ["analytics_router"]
