from .config_routes import router as config_router

__all__ = ["config_router"]
