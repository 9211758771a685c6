from .processing import router as processing_router
from .webhooks import router as webhook_router
from .wordpress import router as wordpress_router

__all__ = ["processing_router", "webhook_router", "wordpress_router"]
