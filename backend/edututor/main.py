import logging

from fastapi import FastAPI

from .db import SessionLocal, init_db
from .orchestrator import build_orchestrator
from .routers import tutor
from .settings import settings
from .store import SqlAlchemyRecordStore

logging.basicConfig(
	level=getattr(logging, settings.log_level.upper(), logging.INFO),
	format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="EduTutor AI API")
app.include_router(tutor.router)

# One orchestrator per process: a single cache and a single rate budget
app.state.orchestrator = build_orchestrator(settings, store=SqlAlchemyRecordStore(SessionLocal))


@app.get("/info")
def root():
	model = app.state.orchestrator.model
	return {"status": "ok", "model_configured": bool(getattr(model, "configured", False))}


@app.on_event("startup")
async def startup_event():
	init_db()
	logger.info("EduTutor started (model=%s, rate=%d/%ss)", settings.gemini_model, settings.rate_limit_max_requests, settings.rate_limit_window_seconds)


@app.on_event("shutdown")
async def shutdown_event():
	model = app.state.orchestrator.model
	aclose = getattr(model, "aclose", None)
	if aclose is not None:
		await aclose()
