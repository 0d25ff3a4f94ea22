"""
Configuration settings for the ClearTech case backend
"""

import os
import logging

logger = logging.getLogger(__name__)

# Environment configuration
ENV = os.getenv("ENV", "PROD")  # PROD or QA
PORT = int(os.getenv("PORT", 8080))

# Case record storage: postgres, upstash or memory
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory").lower()
DATABASE_URL = os.getenv("DATABASE_URL")
UPSTASH_REDIS_REST_URL = os.getenv("UPSTASH_REDIS_REST_URL")
UPSTASH_REDIS_REST_TOKEN = os.getenv("UPSTASH_REDIS_REST_TOKEN")
CASE_KEY_PREFIX = os.getenv("CASE_KEY_PREFIX", "form:")

# Client management platform (clients, file channels, folders)
ASSEMBLY_API_KEY = os.getenv("ASSEMBLY_API_KEY")
ASSEMBLY_BASE_URI = os.getenv("ASSEMBLY_BASE_URI", "https://api.assembly.com/v1")
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", 30))

# Folder created in the client's file channel for generated reports
REPORT_FOLDER_PREFIX = os.getenv("REPORT_FOLDER_PREFIX", "ClearTech Reports")

# CORS settings
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

logger.info(f"Environment: {ENV}, storage backend: {STORAGE_BACKEND}")

if not ASSEMBLY_API_KEY:
    logger.warning("ASSEMBLY_API_KEY not set - directory lookups will not be available")
