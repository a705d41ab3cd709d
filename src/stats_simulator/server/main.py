import os
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

from stats_simulator.logs import configure_logging_once
from stats_simulator.server.routers import simulator
from stats_simulator.server.state import get_simulator, init_simulator

configure_logging_once()
log = structlog.get_logger()


# -------------------------
# App & instrumentation
# -------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("service.startup")
    init_simulator()
    try:
        yield
    finally:
        # Cancel cooperatively so no run outlives the event loop
        await get_simulator().shutdown()
        log.info("service.shutdown")


app = FastAPI(title=os.getenv("SERVICE_NAME", "stats-simulator"), lifespan=lifespan)

# API Routers
app.include_router(simulator.router)

# Prometheus: exposes /metrics by default
Instrumentator().instrument(app).expose(app)


@app.get("/healthz", tags=["health"])
def healthz():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    uvicorn.run("stats_simulator.server.main:app", host=host, port=port, reload=False)
