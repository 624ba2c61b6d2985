from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from .routes import demo, people, trees


def configure_logging() -> None:
    logging.basicConfig(
        level=os.environ.get("CRVS_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging()
    yield


app = FastAPI(title="Civil Registry Ancestry API", version="0.1.0", lifespan=_lifespan)
app.include_router(people.router)
app.include_router(trees.router)
app.include_router(demo.router)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
