import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent

load_dotenv(BASE_DIR / ".env")


def _require_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


def _get_list(name: str, fallback: str = "") -> List[str]:
    raw_value = os.getenv(name, fallback)
    if not raw_value:
        return []
    return [item.strip() for item in raw_value.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    data_dir: Path = Path(os.getenv("DATA_DIR") or BASE_DIR / "data")
    order_repository: str = (os.getenv("ORDER_REPOSITORY") or "memory").lower()
    supabase_url: str | None = os.getenv("SUPABASE_URL")
    supabase_service_role_key: str | None = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    cashfree_base_url: str = os.getenv(
        "CASHFREE_BASE_URL", "https://sandbox.cashfree.com"
    )
    cashfree_client_id: str | None = os.getenv("CASHFREE_CLIENT_ID")
    cashfree_client_secret: str | None = os.getenv("CASHFREE_CLIENT_SECRET")
    cashfree_api_version: str = os.getenv("CASHFREE_API_VERSION", "2023-08-01")
    cashfree_return_url: str = os.getenv(
        "CASHFREE_RETURN_URL",
        "http://localhost:5173/payment-result?order_id={order_id}",
    )
    port: int = int(os.getenv("PORT", "5000"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    allowed_origins: List[str] = field(
        default_factory=lambda: _get_list("ALLOWED_ORIGINS", "*")
    )


settings = Settings()
