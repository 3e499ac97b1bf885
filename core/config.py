"""Runtime settings read from the environment."""
from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class Settings(BaseModel):
    api_url: Optional[str] = Field(None, description="Portal backend base URL; unset means offline mode")
    api_token: Optional[str] = Field(None, description="Bearer token for backend calls")
    timeout_seconds: float = Field(5.0, gt=0, description="Per-request timeout")
    log_level: str = Field("INFO", description="Root log level")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        values = {
            "api_url": env.get("LENDWISE_API_URL") or None,
            "api_token": env.get("LENDWISE_API_TOKEN") or None,
            "log_level": (env.get("LENDWISE_LOG_LEVEL") or "INFO").upper(),
        }
        if env.get("LENDWISE_TIMEOUT_SECONDS"):
            values["timeout_seconds"] = env["LENDWISE_TIMEOUT_SECONDS"]
        return cls(**values)

    @property
    def offline(self) -> bool:
        return not self.api_url


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
