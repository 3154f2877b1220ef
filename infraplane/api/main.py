from __future__ import annotations

from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncIterator

from fastapi import Depends, FastAPI, HTTPException

from infraplane.orchestrator.discovery import DiscoveryService
from infraplane.orchestrator.runner_factory import build_discovery_service
from shared.models.discovery import LiveResourceResult
from shared.models.errors import ApplicationNotFoundError, MissingSourcePathError
from shared.utils.logging import setup_logging


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    setup_logging()
    yield


app = FastAPI(title="Infraplane Live Discovery", lifespan=lifespan)


@lru_cache(maxsize=1)
def get_discovery_service() -> DiscoveryService:
    return build_discovery_service()


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@app.post("/api/applications/{name}/live-resources", response_model=LiveResourceResult)
async def discover_live_resources(
    name: str,
    service: DiscoveryService = Depends(get_discovery_service),
) -> LiveResourceResult:
    try:
        return await service.discover_live_resources(name)
    except ApplicationNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except MissingSourcePathError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
