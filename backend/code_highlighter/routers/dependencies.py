import logging

from fastapi import HTTPException, Request

from ..services.highlight_manager import HighlightManager

logger = logging.getLogger(__name__)


def get_highlight_manager(request: Request) -> HighlightManager:
    """Return the manager created by the application lifespan."""
    manager = getattr(request.app.state, "highlight_manager", None)
    if manager is None:
        raise HTTPException(status_code=503, detail="Highlight manager not initialized")
    return manager


def command_failed(action: str, error: Exception) -> HTTPException:
    """
    Log an unexpected command failure with its traceback and build the generic
    error returned to the editor.
    """
    logger.error(f"Failed to {action}: {error}", exc_info=error)
    return HTTPException(
        status_code=500, detail=f"Failed to {action}. Check logs for details."
    )


def require_trusted_origin(request: Request) -> None:
    """
    Reject browser requests from origins outside ``settings.cors_origins``.

    Editor clients send no Origin header. CORS only hides the response from
    the page; the request itself would still run.
    """
    origin = request.headers.get("origin")
    if origin is None:
        return
    settings = getattr(request.app.state, "settings", None)
    allowed = settings.cors_origins if settings is not None else []
    if origin not in allowed:
        logger.warning(f"Rejected request from untrusted origin {origin}")
        raise HTTPException(status_code=403, detail="Origin not allowed")
