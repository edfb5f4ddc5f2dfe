from pathlib import Path
from fastapi import APIRouter
from fastapi.responses import FileResponse
from app.api.v1 import balance, deployments

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"

router = APIRouter()

router.include_router(balance.router, prefix="/api")
router.include_router(deployments.router, prefix="/api")

@router.get("/", include_in_schema=False)
async def root():
    return FileResponse(STATIC_DIR / "index.html")

@router.get("/health")
async def health():
    return {"status": "healthy"}
