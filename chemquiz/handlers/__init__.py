from aiogram import Router

from chemquiz.handlers.start import router as start_router
from chemquiz.handlers.stats import router as stats_router
from chemquiz.handlers.quiz import router as quiz_router


def setup_routers() -> Router:
    """Setup and return the main router with all sub-routers."""
    router = Router()
    router.include_router(start_router)
    router.include_router(stats_router)
    # Last: during practice it claims every text message
    router.include_router(quiz_router)
    return router


__all__ = ["setup_routers"]
