"""
Configuración centralizada de la aplicación
"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Configuración de la aplicación"""

    # API Settings
    API_TITLE: str = "ShopAssist API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Storefront assistant: catalog, cart, orders and admin tools for Claude"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_DEBUG: bool = True

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:3000,https://yourdomain.com" or '["http://localhost:3000"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:3000,http://localhost:3001"

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:3000"]

        # Try JSON parse first (for array format)
        import json
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    # Storefront REST API
    STORE_API_URL: str = "http://localhost:5000"
    STORE_API_TOKEN: str = ""
    STORE_API_TIMEOUT: float = 30.0
    PRODUCT_CACHE_TTL: int = 60  # seconds, 0 disables the product query cache

    # Persisted client state (cart, userInfo)
    CLIENT_STATE_DIR: str = ".client_state"

    # Claude
    ANTHROPIC_API_KEY: str = ""
    CLAUDE_MODEL: str = "claude-haiku-4-5-20251001"
    MAX_TOKENS: int = 4096
    MAX_HISTORY_MESSAGES: int = 10  # Last N messages
    MAX_HISTORY_TOKENS: int = 8000  # Approximate token limit

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
