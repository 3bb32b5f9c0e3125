"""
Data server HTTP API.
Routing and (de)serialization only; all decisions live in the core services.
"""

from contextlib import asynccontextmanager
from functools import lru_cache
from typing import List

from fastapi import Depends, FastAPI, HTTPException

from util.logging import logger

from .schemas import DataEnvelopeModel, HealthResponse
from ..core import config
from ..core.dao import EnvelopeStore
from ..core.db import health_check
from ..core.errors import DuplicateBlockName, InvalidBlockType, PersistenceFailure
from ..core.forwarder import ArchivalForwarder
from ..core.ingestion import IngestionService
from ..core.query import QueryService
from ..core.reclassify import ReclassificationService
from ..core.schema import IngestionStatus


@lru_cache(maxsize=None)
def get_store() -> EnvelopeStore:
    return EnvelopeStore(config.DB_PATH)


@lru_cache(maxsize=None)
def get_forwarder() -> ArchivalForwarder:
    return ArchivalForwarder()


def get_ingestion_service(store: EnvelopeStore = Depends(get_store),
                          forwarder: ArchivalForwarder = Depends(get_forwarder)) -> IngestionService:
    return IngestionService(store, forwarder)


def get_query_service(store: EnvelopeStore = Depends(get_store)) -> QueryService:
    return QueryService(store)


def get_reclassification_service(store: EnvelopeStore = Depends(get_store)) -> ReclassificationService:
    return ReclassificationService(store)


@asynccontextmanager
async def lifespan(app: FastAPI):
    for issue in config.validate_archive_config():
        logger.warning(f"Archive configuration issue: {issue}")
    yield
    if get_forwarder.cache_info().currsize:
        get_forwarder().shutdown(wait=True)


app = FastAPI(
    title="Data Server API",
    version=config.VERSION,
    description="Checksum-verified data block ingestion with archival forwarding",
    docs_url="/docs" if config.debug_enabled() else None,
    redoc_url="/redoc" if config.debug_enabled() else None,
    lifespan=lifespan,
)


@app.get("/health", response_model=HealthResponse)
def health_check_endpoint(store: EnvelopeStore = Depends(get_store),
                          forwarder: ArchivalForwarder = Depends(get_forwarder)):
    """Check system health."""
    db_health = health_check(store.db_path)

    return HealthResponse(
        status="healthy" if db_health else "unhealthy",
        version=config.VERSION,
        db_health=db_health,
        block_count=store.count(),
        forwarder=forwarder.stats(),
    )


@app.post("/dataserver/pushdata", response_model=bool)
def push_data(envelope: DataEnvelopeModel,
              service: IngestionService = Depends(get_ingestion_service)):
    """Ingest an envelope. True when accepted, false on checksum mismatch."""
    result = service.ingest(envelope.to_domain())

    if result.status == IngestionStatus.PERSISTENCE_FAILURE:
        if isinstance(result.error, DuplicateBlockName):
            raise HTTPException(status_code=409, detail=str(result.error))
        raise HTTPException(status_code=500, detail=f"Failed to persist block '{result.name}'")

    return result.accepted


@app.get("/dataserver/data/{block_type}", response_model=List[DataEnvelopeModel])
def get_data_by_block_type(block_type: str, service: QueryService = Depends(get_query_service)):
    """List every stored envelope with the given block type."""
    try:
        envelopes = service.get_by_block_type(block_type)
    except InvalidBlockType as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceFailure as e:
        logger.error(f"Query failed for block type {block_type}: {e}")
        raise HTTPException(status_code=500, detail="Failed to query blocks")

    return [DataEnvelopeModel.from_domain(envelope) for envelope in envelopes]


@app.patch("/dataserver/update/{name}/{new_block_type}", response_model=bool)
def update_block_type(name: str, new_block_type: str,
                      service: ReclassificationService = Depends(get_reclassification_service)):
    """Reclassify a stored block. False when no block has that name."""
    try:
        return service.reclassify(name, new_block_type)
    except InvalidBlockType as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceFailure as e:
        logger.error(f"Reclassification failed for block {name}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update block type")
