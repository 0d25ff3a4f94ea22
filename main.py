"""
Entry point for the ClearTech case backend
"""

import logging
from dotenv import load_dotenv

# Load environment variables from .env file before settings are read
load_dotenv()

from cleartech.app import app
from cleartech.config.settings import PORT

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting ClearTech case backend on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
