from pydantic import BaseModel
import os
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Load .env file if it exists (before reading os.getenv)
_env_path = Path(__file__).resolve().parent.parent / ".env"
if _env_path.exists():
    with open(_env_path) as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip()
                # Only set if not already in environment (env vars take precedence)
                if key not in os.environ:
                    os.environ[key] = value


def _sanitize_ascii(val: str) -> str:
    """Strip non-ASCII characters from config values (prevents encoding errors)"""
    return val.encode('ascii', errors='ignore').decode('ascii').strip()


def _optional_float(val: str) -> Optional[float]:
    val = val.strip()
    return float(val) if val else None


class Settings(BaseModel):
    # Server identity (reported by the server-info resource)
    server_name: str = os.getenv("TOOLSERVER_NAME", "toolserver")
    server_version: str = os.getenv("TOOLSERVER_VERSION", "1.0.0")

    # Transport: "stdio" (MCP) or "http" (admin API)
    transport: str = os.getenv("TOOLSERVER_TRANSPORT", "stdio")
    http_host: str = os.getenv("TOOLSERVER_HTTP_HOST", "127.0.0.1")
    http_port: int = int(os.getenv("TOOLSERVER_HTTP_PORT", "8000"))
    log_level: str = os.getenv("TOOLSERVER_LOG_LEVEL", "INFO")

    # Per-invocation handler budget in seconds; None = unbounded
    tool_timeout: Optional[float] = _optional_float(os.getenv("TOOLSERVER_TOOL_TIMEOUT", ""))

    # Outbound HTTP
    http_timeout: float = float(os.getenv("HTTP_TIMEOUT", "10"))
    nominatim_url: str = os.getenv("NOMINATIM_URL", "https://nominatim.openstreetmap.org/search")
    nominatim_user_agent: str = os.getenv("NOMINATIM_USER_AGENT", "MCP-Server/1.0 (mcp-server@example.com)")
    open_meteo_url: str = os.getenv("OPEN_METEO_URL", "https://api.open-meteo.com/v1/forecast")

    # Hugging Face image generation (sanitized to prevent 'ascii' codec errors in headers)
    hf_token: str = _sanitize_ascii(os.getenv("HF_TOKEN", ""))
    hf_inference_url: str = _sanitize_ascii(os.getenv("HF_INFERENCE_URL", "https://router.huggingface.co/hf-inference/models"))
    hf_image_model: str = _sanitize_ascii(os.getenv("HF_IMAGE_MODEL", "black-forest-labs/FLUX.1-schnell"))


settings = Settings()


def log_settings(cfg: Settings) -> None:
    """Log effective config for debugging (secrets masked)."""
    _hf_key = '***' + cfg.hf_token[-4:] if len(cfg.hf_token) > 4 else 'EMPTY'
    logger.info(f"Config: {cfg.server_name} v{cfg.server_version}, transport={cfg.transport}")
    logger.info(f"Config: image model={cfg.hf_image_model} (token={_hf_key})")
    if cfg.tool_timeout is not None:
        logger.info(f"Config: tool timeout={cfg.tool_timeout}s")
