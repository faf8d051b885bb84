import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from config import DEBUG, APP_HOST, APP_PORT, LOG_LEVEL, SCHEDULER_ENABLED
from database.init import Base, engine
from database import models  # noqa: F401  registers the tables on Base.metadata
from routes import (
    room_routes,
    tenant_routes,
    payment_routes,
)
from services.background_tasks import BackgroundTasks

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)

    background_tasks = None
    if SCHEDULER_ENABLED:
        background_tasks = BackgroundTasks()
        background_tasks.start()

    yield

    if background_tasks is not None:
        background_tasks.shutdown()


app = FastAPI(title="Boarding House API", lifespan=lifespan, debug=DEBUG)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(room_routes.router)
app.include_router(tenant_routes.router)
app.include_router(payment_routes.router)

@app.get("/")
def read_root():
    return {"name": "Boarding House API", "version": "1.0.0"}


if __name__ == "__main__":
    uvicorn.run("main:app", host=APP_HOST, port=APP_PORT, reload=DEBUG)
