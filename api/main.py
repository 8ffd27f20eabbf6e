from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from auth import router as auth_router
from comparison import router as comparison_router
from core import config, db, log
from countries import router as countries_router
from delivery import router as delivery_router
from retailers import router as retailers_router

log.configure_logging()


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(title="Retailer Delivery Comparison API", lifespan=lifespan)

origins = config.cors_origins()
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    # Browsers refuse credentialed requests against a wildcard origin.
    allow_credentials="*" not in origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router.router, prefix="/api/auth", tags=["auth"])
app.include_router(retailers_router.router, prefix="/api/retailers", tags=["retailers"])
app.include_router(countries_router.router, prefix="/api/countries", tags=["countries"])
app.include_router(delivery_router.router, prefix="/api/delivery-data", tags=["delivery-data"])
app.include_router(delivery_router.upload_router, prefix="/api/upload", tags=["delivery-data"])
app.include_router(comparison_router.router, prefix="/api/compare", tags=["comparison"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.get("/")
def root() -> dict:
    return {"message": "retailer delivery comparison api", "docs": "/docs"}
