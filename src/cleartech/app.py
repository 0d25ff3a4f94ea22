"""
ClearTech case backend API server
Core functionality: background check case records keyed by client
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cleartech.config.settings import ALLOWED_ORIGINS
from cleartech.api.routes import form_data, health
from cleartech.storage.factory import get_case_repository
from cleartech.utils.error_handling import setup_error_handling

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    repository = get_case_repository()
    await repository.connect()
    yield
    await repository.close()

# FastAPI app initialization
app = FastAPI(
    title="ClearTech Case Backend",
    description="Backend API for background check case records",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Setup centralized error handling
setup_error_handling(app)

# Include API routes
app.include_router(health.router, tags=["Health"])
app.include_router(form_data.router, prefix="/api/form-data", tags=["Form Data"])
