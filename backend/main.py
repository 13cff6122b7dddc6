from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables before the config module reads them
load_dotenv()

from dominantcolor.api.v1 import router  # noqa: E402
from dominantcolor.config import config  # noqa: E402
from dominantcolor.utils.logging import get_logger  # noqa: E402

logger = get_logger()

app = FastAPI(
    title="Dominant Color Service",
    description="Finds the dominant color of an image with K-means clustering in RGB space",
    version=config.VERSION
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "Dominant Color Service",
        "version": config.VERSION,
        "docs": "/docs"
    }


logger.info("Dominant color service ready", extra={"version": config.VERSION})

