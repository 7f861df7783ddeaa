from __future__ import annotations

from typing import Any, Dict, Optional
import asyncio
import logging

try:
    from fastapi import FastAPI, HTTPException
    from pydantic import BaseModel
except Exception as exc:  # pragma: no cover - optional dependency
    raise RuntimeError(
        "FastAPI not installed. Install with `pip install fastapi pydantic uvicorn` "
        "or avoid using the API server."
    ) from exc

from ..config import HarvestConfig
from ..errors import StoreUnavailable
from ..pipeline import HarvestSummary, open_store, run_harvest
from ..version import __version__

logger = logging.getLogger(__name__)

app = FastAPI(title="catalog_harvester API", version=__version__)

# One harvest at a time: the limiter and cursor are not meant to be shared.
_harvest_lock = asyncio.Lock()


class HarvestRequest(BaseModel):
    start_page: Optional[int] = None
    end_page: Optional[int] = None


@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/harvest")
async def harvest(req: HarvestRequest) -> Dict[str, Any]:
    cfg = HarvestConfig.from_env()
    if req.start_page is not None:
        cfg.start_page = req.start_page
    if req.end_page is not None:
        cfg.end_page = req.end_page
    try:
        cfg.validate()
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    if _harvest_lock.locked():
        raise HTTPException(status_code=409, detail="a harvest is already running")

    async with _harvest_lock:
        try:
            store = await asyncio.to_thread(open_store, cfg)
        except StoreUnavailable as exc:
            logger.error("Store unavailable: %s", exc)
            raise HTTPException(status_code=503, detail=str(exc)) from exc
        try:
            report, result = await run_harvest(cfg, store)
        finally:
            store.close()

    return HarvestSummary.from_results(report, result).to_dict()
