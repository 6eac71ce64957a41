# clinic_backend/main.py
import os
import logging

from fastapi import FastAPI

from .config import settings
from .database import init_db

# Routers
from .routers.appointments import router as appointments_router
from .routers.doctors import router as doctors_router
from .routers.patients import router as patients_router
from .routers.prescriptions import router as prescriptions_router

# ──────────────────────────────────────────────────────────────────────────────
# LOGGING
# Controla niveles con variables de entorno:
#   LOG_LEVEL, SCHEDULING_LOG_LEVEL, SQLA_LOG_LEVEL, UVICORN_LOG_LEVEL
# ──────────────────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

# Verbosidad del motor de agenda (disponibilidad/conflictos)
logging.getLogger("clinic_backend.services").setLevel(
    getattr(logging, os.getenv("SCHEDULING_LOG_LEVEL", "INFO"), logging.INFO)
)
logging.getLogger("sqlalchemy.engine").setLevel(
    getattr(logging, os.getenv("SQLA_LOG_LEVEL", "WARNING"), logging.WARNING)
)
logging.getLogger("uvicorn.error").setLevel(
    getattr(logging, os.getenv("UVICORN_LOG_LEVEL", "INFO"), logging.INFO)
)

logger = logging.getLogger(__name__)

# ──────────────────────────────────────────────────────────────────────────────
# FastAPI App
# ──────────────────────────────────────────────────────────────────────────────
app = FastAPI(title=settings.APP_NAME)

app.include_router(appointments_router)
app.include_router(doctors_router)
app.include_router(patients_router)
app.include_router(prescriptions_router)


# ──────────────────────────────────────────────────────────────────────────────
# Ciclo de vida
# ──────────────────────────────────────────────────────────────────────────────
@app.on_event("startup")
def on_startup():
    init_db()
    logger.info("Startup completo: %s (%s)", settings.APP_NAME, settings.ENV)


@app.get("/")
def root():
    return {"ok": True, "app": settings.APP_NAME, "env": settings.ENV}
