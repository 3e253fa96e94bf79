from fastapi import APIRouter, Request

from ... import __version__

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(request: Request) -> dict:
    settings = request.app.state.settings
    return {"status": "ok", "service": settings.APP_NAME, "env": settings.ENV, "version": __version__}
