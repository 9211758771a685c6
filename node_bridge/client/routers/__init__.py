from .bridge import router as bridge_router

__all__ = ["bridge_router"]
