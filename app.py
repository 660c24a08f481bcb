import os

import uvicorn
from fastapi import FastAPI

# Import the conversion router
from quickconvert import __version__
from quickconvert.router import router as convert_router

# Import centralized logging configuration
from quickconvert.utils.logging_config import get_logger, setup_logging


# Set up logging
setup_logging()
logger = get_logger("quickconvert.app")

app = FastAPI(title="quickconvert", version=__version__)

# Include the conversion router
app.include_router(convert_router)


@app.get("/ping")
async def general_ping():
    return {"success": True, "data": "PONG!"}


if __name__ == "__main__":
    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Starting quickconvert on port {port}")
    uvicorn.run(app, host=os.getenv("HOST", "0.0.0.0"), port=port)
