from __future__ import annotations

from fastapi import HTTPException, Request

from .controller.controller import TrackerController


def get_controller(request: Request) -> TrackerController:
    """Return the app's controller, or raise 503 before startup finished."""
    controller = getattr(request.app.state, "controller", None)
    if controller is None:
        raise HTTPException(status_code=503, detail="Tracker not ready")
    return controller
