"""
ShopAssist - Backend API
Storefront assistant: catalog, cart, orders and admin tools for Claude
"""
import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Load environment variables
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from shopassist.api import chat
from shopassist.core.config import settings

logging.basicConfig(
    level=logging.DEBUG if settings.API_DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

# Create FastAPI app
app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["*"],
)

# Claude chat and direct tool calls
app.include_router(chat.router)


@app.get("/")
async def root():
    """Root endpoint - API status"""
    return {
        "message": "ShopAssist API - Storefront assistant",
        "status": "online",
        "version": settings.API_VERSION,
        "description": settings.API_DESCRIPTION
    }


@app.get("/health")
async def health():
    """Health check endpoint for monitoring"""
    return {
        "status": "healthy",
        "service": "shopassist-api",
        "version": settings.API_VERSION,
        "store_api_url": settings.STORE_API_URL,
        "chat_configured": bool(settings.ANTHROPIC_API_KEY)
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("shopassist.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=settings.API_DEBUG)
