"""Runtime settings, read from ``STOREFRONT_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


@dataclass(frozen=True)
class Settings:
    data_dir: Path = _DEFAULT_DATA_DIR
    delivery_fee: Money = Money.of("50.00")
    animation_duration_ms: int = 8000
    animation_step_ms: int = 50
    log_level: str = "INFO"
    log_json: bool = False

    @staticmethod
    def from_env(environ: dict[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        return Settings(
            data_dir=Path(env.get("STOREFRONT_DATA_DIR", str(_DEFAULT_DATA_DIR))),
            delivery_fee=Money.of(env.get("STOREFRONT_DELIVERY_FEE", "50.00")),
            animation_duration_ms=_positive_int(env, "STOREFRONT_ANIMATION_DURATION_MS", 8000),
            animation_step_ms=_positive_int(env, "STOREFRONT_ANIMATION_STEP_MS", 50),
            log_level=env.get("STOREFRONT_LOG_LEVEL", "INFO").upper(),
            log_json=env.get("STOREFRONT_LOG_JSON", "").lower() in ("1", "true", "yes"),
        )


def _positive_int(env, key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValidationError(f"{key} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ValidationError(f"{key} must be positive, got {value}")
    return value
