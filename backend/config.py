import os
from pydantic_settings import BaseSettings


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseSettings):
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    model_temperature: float = 0.2
    max_output_tokens: int = 2500

    github_token: str = ""
    github_api_url: str = "https://api.github.com"

    # Devfolio project search
    search_api_url: str = "https://api.devfolio.co/api/search/projects"
    hackathon_slug: str = "onchain-summer-awards"
    devfolio_cookie: str = ""
    page_size: int = 100
    max_projects: int = 500  # safety cap for paginated fetches

    http_timeout_seconds: float = 30.0

    # Batch judging
    batch_size: int = 3
    batch_delay_seconds: float = 2.0

    # Anti-clustering jitter on final scores (disable for reproducible runs)
    jitter_enabled: bool = True
    jitter_magnitude: float = 0.4

    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    debug: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "protected_namespaces": ("settings_",)}


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
