"""
FastAPI entry point.

This module is the Composition Root for the HTTP service: it wires the store,
the CSV reader, the scanner and the statistics use cases, and translates
domain errors into HTTP responses. Startup runs one synchronous scan (a failure
aborts startup) and then hands the directory over to the periodic runner.

Run locally:
    uvicorn crypto_recommender.infrastructure.entrypoints.fastapi_app:app --reload --port 8000
"""

from contextlib import asynccontextmanager

import structlog
from dotenv import load_dotenv
from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse

load_dotenv()

from crypto_recommender.application.services.directory_scanner import DirectoryScanService
from crypto_recommender.application.services.statistics_engine import StatisticsEngine
from crypto_recommender.application.use_cases.get_all_crypto_statistics import GetAllCryptoStatisticsUseCase
from crypto_recommender.application.use_cases.get_crypto_statistics import GetCryptoStatisticsUseCase
from crypto_recommender.application.use_cases.get_highest_normalized_crypto import GetHighestNormalizedCryptoUseCase
from crypto_recommender.domain.exceptions import (
    DataProcessingError,
    DirectoryScanError,
    InvalidArgumentError,
    NoDataForDateError,
    SymbolNotFoundError,
)
from crypto_recommender.domain.ports.price_file_reader_port import IPriceFileReader
from crypto_recommender.domain.ports.price_series_store_port import IPriceSeriesStore
from crypto_recommender.infrastructure.config.settings import Settings, get_settings
from crypto_recommender.infrastructure.csv_files.csv_price_reader import CsvPriceFileReader
from crypto_recommender.infrastructure.entrypoints.rate_limit import RateLimitMiddleware
from crypto_recommender.infrastructure.entrypoints.schemas import CryptoStatisticsResponse
from crypto_recommender.infrastructure.observability.logging import configure_logging
from crypto_recommender.infrastructure.scheduling.periodic_scanner import PeriodicScanRunner
from crypto_recommender.infrastructure.store.in_memory_series_store import InMemoryPriceSeriesStore

logger = structlog.get_logger(__name__)

ERROR_STATUS: dict[type[Exception], int] = {
    SymbolNotFoundError: 404,
    NoDataForDateError: 404,
    InvalidArgumentError: 400,
    DataProcessingError: 500,
    DirectoryScanError: 500,
}


async def domain_error_handler(request: Request, exc: Exception) -> JSONResponse:
    status = ERROR_STATUS.get(type(exc), 500)
    detail = str(exc)
    if isinstance(exc, (DataProcessingError, DirectoryScanError)):
        detail = f"Error processing crypto data: {exc}"
    return JSONResponse(status_code=status, content={"detail": detail})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", path=request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": f"An unexpected error occurred: {exc}"},
    )


def create_app(
    settings: Settings | None = None,
    store: IPriceSeriesStore | None = None,
    reader: IPriceFileReader | None = None,
) -> FastAPI:
    """Build the application. *store* and *reader* default to the in-memory/CSV adapters."""
    settings = settings or get_settings()
    if store is None:
        store = InMemoryPriceSeriesStore()
    if reader is None:
        reader = CsvPriceFileReader(tz=settings.ingestion_tz())

    scanner = DirectoryScanService(settings.crypto_directory_path, reader, store)
    runner = PeriodicScanRunner(scanner, settings.crypto_scan_interval_seconds)
    engine = StatisticsEngine(store)
    statistics_uc = GetCryptoStatisticsUseCase(engine)
    all_statistics_uc = GetAllCryptoStatisticsUseCase(engine)
    highest_uc = GetHighestNormalizedCryptoUseCase(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings)
        logger.info("api_starting", directory=settings.crypto_directory_path)
        runner.run_once()
        runner.start()
        yield
        runner.stop()
        logger.info("api_stopping")

    app = FastAPI(
        title="Crypto Recommendation Service",
        description="Price statistics and normalized-range rankings for crypto assets",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.scan_runner = runner

    app.add_middleware(
        RateLimitMiddleware,
        enabled=settings.rate_limit_enabled,
        capacity=settings.rate_limit_requests,
        refill_seconds=settings.rate_limit_duration_minutes * 60.0,
        trust_forwarded_for=settings.rate_limit_trust_forwarded_for,
    )
    for exc_class in ERROR_STATUS:
        app.add_exception_handler(exc_class, domain_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get("/api/crypto/normalized", response_model=list[CryptoStatisticsResponse])
    def get_all_crypto_statistics():
        """Cryptos sorted descending by normalized range, i.e. (max-min)/min."""
        return [CryptoStatisticsResponse.from_entity(s) for s in all_statistics_uc.execute()]

    @app.get("/api/crypto/highest-normalized", response_class=PlainTextResponse)
    def get_highest_normalized_crypto(
        date: str = Query(..., description="Day to rank, YYYY-MM-DD", examples=["2022-01-01"]),
    ):
        """The crypto with the highest normalized range on the given day."""
        return highest_uc.execute(date)

    @app.get("/api/crypto/{symbol}/statistics", response_model=CryptoStatisticsResponse)
    def get_crypto_statistics(symbol: str):
        """Oldest, newest, minimum and maximum price of one crypto."""
        return CryptoStatisticsResponse.from_entity(statistics_uc.execute(symbol))

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()


def serve() -> None:
    """Console entry point: run the service with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    serve()
