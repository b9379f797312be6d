import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from sapience_claims.config import settings
from sapience_claims.markets.settlement import settlement_reader
from sapience_claims.markets.submitter import web3_submitter

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await settlement_reader.initialize()
    logger.info(f"Settlement index: {settings.graphql_url}")
    yield
    await settlement_reader.close()
    await web3_submitter.close()


app = FastAPI(
    title="Sapience Claims",
    description="Reconcile parlay positions against settlement data and claim winnings on-chain.",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


from sapience_claims.routes import claims  # noqa: E402

app.include_router(claims.router, prefix="/v1/claims", tags=["Claims"])


@app.get("/health")
async def health():
    return {"status": "ok"}
