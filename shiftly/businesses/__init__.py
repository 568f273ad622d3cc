from .routes import businesses_router

__all__ = ["businesses_router"]
