from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fantaf1.core.config import settings
from fantaf1.core.logging_config import setup_logging

# IMPORTANTE: Base y engine para crear las tablas
from fantaf1.db.session import engine, Base

# Importar modelos para que SQLAlchemy los "vea" antes de crear las tablas
from fantaf1.db.models import _all

# Importar las rutas (los routers)
from fantaf1.api.seasons import router as seasons_router
from fantaf1.api.events import router as events_router
from fantaf1.api.predictions import router as predictions_router
from fantaf1.api.race_results import router as race_results_router
from fantaf1.api.scoring import router as scoring_router
from fantaf1.api.standings import router as standings_router
from fantaf1.api.admin import router as admin_router

setup_logging(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Creamos las tablas en la base de datos
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(
    title="FantaF1",
    version="1.0.0",
    lifespan=lifespan,
)

# Conectamos las piezas (routers)
app.include_router(seasons_router)
app.include_router(events_router)
app.include_router(predictions_router)
app.include_router(race_results_router)
app.include_router(scoring_router)
app.include_router(standings_router)
app.include_router(admin_router)

# Permiso para que el frontend hable con la API
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
def read_root():
    return {"message": "API FantaF1 funcionando 🏎️"}
