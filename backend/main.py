from __future__ import annotations

import asyncio
import logging
from typing import Any, Literal

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import Base64Bytes, BaseModel, Field

from query.config import configure_logging
from query.errors import QueryValidationError, TilequeryError
from query.harness import submit_query

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="tilequery")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ApiTile(BaseModel):
    # Tile payload (raw or gzipped MVT), base64 encoded.
    buffer: Base64Bytes
    z: int
    x: int
    y: int


class ApiOptions(BaseModel):
    dedupe: bool | None = None
    radius: float | None = None
    limit: int | None = None
    layers: list[str] | None = None
    geometry: Literal["point", "linestring", "polygon"] | None = None


class ApiTilequery(BaseModel):
    tiles: list[ApiTile]
    lnglat: list[float] = Field(min_length=2, max_length=2)
    options: ApiOptions | None = None


@app.get("/health")
def health():
    return {"ok": True}


@app.post("/tilequery")
async def tilequery(body: ApiTilequery) -> dict[str, Any]:
    tiles = [{"buffer": t.buffer, "z": t.z, "x": t.x, "y": t.y} for t in body.tiles]
    options = body.options.model_dump(exclude_none=True) if body.options else None

    try:
        fut = submit_query(tiles, list(body.lnglat), options)
    except QueryValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    try:
        return await asyncio.wrap_future(fut)
    except TilequeryError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        raise HTTPException(status_code=400, detail=f"tilequery failed: {exc}") from exc
