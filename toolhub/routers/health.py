from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health", summary="Liveness plus rate cache status")
async def health(request: Request):
    store = request.app.state.rate_store
    scheduler = request.app.state.rate_scheduler
    return {
        "status": "ok",
        "rates": len(store),
        "refreshState": scheduler.state.value,
        "source": scheduler.source,
        "lastSuccessAt": (
            scheduler.last_success_at.isoformat() if scheduler.last_success_at else None
        ),
    }
