from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class ClientConfig:
    base_url: str = os.getenv("STOREHUB_API_URL", "http://localhost:8000")
    timeout: float = float(os.getenv("STOREHUB_TIMEOUT", "10"))
    search_debounce_ms: int = int(os.getenv("STOREHUB_SEARCH_DEBOUNCE_MS", "300"))

    @property
    def search_debounce_seconds(self) -> float:
        return self.search_debounce_ms / 1000


DEFAULT_CLIENT_CONFIG = ClientConfig()
