import logging

from fastapi import FastAPI

from msgbundle.api.packages import router as packages_router
from msgbundle.core.dependencies import get_registry

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Message package bundler",
    version="0.1.0",
    description="Inspect generated message packages, resolve types and build bundles.",
)


@app.on_event("startup")
async def startup_event() -> None:
    """
    Scan the workspace search path so package listings are ready immediately.
    """
    registry = get_registry()
    registry.find_message_files()
    logger.info(f"Search path: {', '.join(str(p) for p in registry.search_path) or '(empty)'}")


@app.get("/health")
async def health() -> dict:
    """
    Lightweight health check endpoint.
    """
    return {"status": "ok"}


app.include_router(packages_router, tags=["packages"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "msgbundle.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
