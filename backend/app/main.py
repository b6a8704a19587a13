import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .routers import products, scrape

settings = get_settings()
logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

app = FastAPI(title="LinkCart Backend", version="0.1.0")

# Allow local dev + tunnelled frontends
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger.info("Database Caching is: %s", "ENABLED" if settings.use_database else "DISABLED")


@app.get("/health")
def healthcheck():
    return {
        "status": "ok",
        "env": settings.env,
        "cache": "enabled" if settings.use_database else "disabled",
    }


app.include_router(scrape.router, prefix="/api", tags=["scrape"])
app.include_router(products.router, prefix="/api/products", tags=["products"])
