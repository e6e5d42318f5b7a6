import logging
from contextlib import asynccontextmanager
from typing import List, Optional, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .. import __version__
from ..indexer.scheduler import IndexingScheduler
from ..models import ProposedTransaction
from ..risk import RiskEngine

logger = logging.getLogger(__name__)


class SimulationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_address: str = Field("", alias="from")
    to_address: str = Field("", alias="to")
    data: str = "0x"
    value: str = "0"

    @field_validator("from_address", "to_address", "data", "value", mode="before")
    @classmethod
    def null_as_default(cls, v, info):
        # JSON null decodes to the field default
        if v is None:
            return cls.model_fields[info.field_name].default
        return v

    def to_proposed(self) -> ProposedTransaction:
        return ProposedTransaction(
            from_address=self.from_address,
            to_address=self.to_address,
            call_data=self.data,
            value=self.value,
        )


class SimulationResponse(BaseModel):
    risk_level: str
    analysis: str
    warnings: List[str]


def create_app(
    engine: RiskEngine,
    scheduler: Optional[IndexingScheduler] = None,
    cors_origins: Sequence[str] = (),
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if scheduler is not None:
            scheduler.start()
        try:
            yield
        finally:
            if scheduler is not None:
                await scheduler.stop()

    app = FastAPI(title="WalletGuard", version=__version__, lifespan=lifespan)

    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(cors_origins),
            allow_methods=["POST", "GET"],
            allow_headers=["*"],
        )

    @app.exception_handler(RequestValidationError)
    async def bad_request(request: Request, exc: RequestValidationError):
        logger.info("rejected request to %s: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"detail": "invalid request body"})

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    @app.post("/api/v1/simulate_tx", response_model=SimulationResponse)
    def simulate_tx(body: SimulationRequest):
        logger.info("analysing transaction to %s", body.to_address)
        verdict = engine.evaluate(body.to_proposed())
        return verdict.to_dict()

    return app
