"""
Runtime configuration, read from the environment once at startup.
"""

import os
from dataclasses import dataclass
from typing import Optional


DEFAULT_TOTAL_ROUNDS = 5


@dataclass(frozen=True)
class Settings:
    service_url: str = "http://localhost:8001"
    service_name: str = "elgamal_service"
    service_timeout: float = 1.0
    request_timeout: float = 10.0
    total_rounds: int = DEFAULT_TOTAL_ROUNDS
    result_url: Optional[str] = None


def get_settings() -> Settings:
    total_rounds = int(os.getenv("ELGAMAL_TOTAL_ROUNDS", str(DEFAULT_TOTAL_ROUNDS)))
    if total_rounds < 1:
        raise ValueError("ELGAMAL_TOTAL_ROUNDS must be at least 1")
    return Settings(
        service_url=os.getenv("ELGAMAL_SERVICE_URL", "http://localhost:8001").rstrip("/"),
        service_name=os.getenv("ELGAMAL_SERVICE_NAME", "elgamal_service"),
        service_timeout=float(os.getenv("ELGAMAL_SERVICE_TIMEOUT", "1.0")),
        request_timeout=float(os.getenv("ELGAMAL_REQUEST_TIMEOUT", "10.0")),
        total_rounds=total_rounds,
        result_url=os.getenv("ELGAMAL_RESULT_URL") or None,
    )
