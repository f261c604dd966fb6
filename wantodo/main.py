import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .api import health, tasks
from .api.error_handlers import register_error_handlers

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Wantodo")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Mount routers
app.include_router(tasks.router, prefix="/api/v1/tasks", tags=["tasks"])

# Health check endpoints for Kubernetes probes
app.include_router(health.router, tags=["health"])


@app.get("/")
async def read_root():
    return {"message": "Welcome to the Wantodo backend!"}
