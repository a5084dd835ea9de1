import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from harness.core.config import settings
from harness.db.session import engine
from harness.db.base import Base
from harness import models  # noqa: F401  (registers tables on Base)
from harness.api.v1.api import router as api_v1_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(title="Payment Gateway Test Harness", version="0.1.0")

# set up CORS so the demo pages can talk to us
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# mount our API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.on_event("startup")
def on_startup():
    # the events table is the only schema we own
    if settings.EVENT_STORE == "database":
        Base.metadata.create_all(bind=engine)


@app.get("/health")
def health():
    return {"status": "ok", "env": settings.APP_ENV, "event_store": settings.EVENT_STORE}
