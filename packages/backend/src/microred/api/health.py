"""Health check endpoint.

Learn: Simple GET endpoint that verifies the server is running and the
document store is reachable. Also reports how many live subscriptions
the registry is holding, which is the first thing to look at when
listeners seem to leak.
"""

from fastapi import APIRouter, Depends, Request

from microred import __version__
from microred.store import DocumentStore, get_store

router = APIRouter()


@router.get("/health")
async def health_check(request: Request, store: DocumentStore = Depends(get_store)):
    """Check server health and store connectivity."""
    checks = {"server": "ok", "version": __version__}

    try:
        await store.ping()
        checks["store"] = "ok"
    except Exception as e:
        checks["store"] = f"error: {e}"

    status = "healthy" if all(
        v == "ok" for k, v in checks.items() if k != "version"
    ) else "degraded"

    registry = getattr(request.app.state, "registry", None)
    subscriptions = len(registry) if registry is not None else 0

    return {"status": status, **checks, "subscriptions": subscriptions}
