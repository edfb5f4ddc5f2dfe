from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
import uvicorn
from contextlib import asynccontextmanager

from app.api.middleware import setup_middlewares
from app.api.router import router, STATIC_DIR
from app.config import settings
from app.core.database import db_manager
from app.core.logging import setup_logging
from app.dependencies import get_spheron_client


setup_logging(settings.LOG_LEVEL)

@asynccontextmanager
async def lifespan(app: FastAPI):
    print("🚀 Démarrage de l'application...")

    db_manager.create_tables()
    print("✅ Tables de la base de données prêtes")

    yield

    print("🔄 Arrêt de l'application...")
    if get_spheron_client.cache_info().currsize:
        get_spheron_client().close()
        get_spheron_client.cache_clear()
    print("✅ Application arrêtée proprement")

app = FastAPI(
    title=settings.APP_NAME,
    description="Déploiement de charges GPU sur la marketplace Spheron",
    version="1.0.0",
    debug=settings.DEBUG,
    lifespan=lifespan
)

setup_middlewares(app)
app.include_router(router)
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


if __name__ == "__main__":
    url = "http://localhost:8000/docs"
    print(f"🚀 {settings.APP_NAME} démarrée !")
    print(f"📚 Documentation : {url}")
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
