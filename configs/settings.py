from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv


load_dotenv()


_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in _TRUE_VALUES


def _env_probability(name: str, default: float) -> float:
    raw = os.getenv(name)
    value = float(raw) if raw else default
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be between 0 and 1, got {value}")
    return value


class Settings:
    """
    Central configuration for ParkGuard.

    Values are loaded once from environment variables (with sensible defaults)
    and then exposed via typed properties.
    """

    def __init__(self) -> None:
        # Alert generator tuning
        self._tick_interval_ms = int(os.getenv("PARKGUARD_TICK_INTERVAL_MS", "3000"))
        if self._tick_interval_ms <= 0:
            raise ValueError(
                f"PARKGUARD_TICK_INTERVAL_MS must be positive, got {self._tick_interval_ms}"
            )
        self._movement_probability = _env_probability(
            "PARKGUARD_MOVEMENT_PROBABILITY", 0.02
        )
        self._tamper_probability = _env_probability(
            "PARKGUARD_TAMPER_PROBABILITY", 0.01
        )
        self._emergency_probability = _env_probability(
            "PARKGUARD_EMERGENCY_PROBABILITY", 0.005
        )
        seed = os.getenv("PARKGUARD_RANDOM_SEED")
        self._random_seed: Optional[int] = int(seed) if seed else None

        # Bounded histories
        self._alert_capacity = int(os.getenv("PARKGUARD_ALERT_CAPACITY", "5"))
        self._conversation_capacity = int(
            os.getenv("PARKGUARD_CONVERSATION_CAPACITY", "5")
        )

        # Slot catalog and runtime data paths
        catalog = os.getenv("PARKGUARD_SLOT_CATALOG")
        self._slot_catalog_path: Optional[Path] = Path(catalog) if catalog else None
        self._runtime_data_dir = Path(
            os.getenv("PARKGUARD_RUNTIME_DATA_DIR", "runtime/data")
        )
        self._event_log_enabled = _env_bool("PARKGUARD_EVENT_LOG", False)
        self._log_level = os.getenv("PARKGUARD_LOG_LEVEL", "INFO").upper()

        # Speech boundary capabilities
        self._speech_recognition = _env_bool("PARKGUARD_SPEECH_RECOGNITION", True)
        self._speech_synthesis = _env_bool("PARKGUARD_SPEECH_SYNTHESIS", True)

    # ------------------------------------------------------------------
    # Alert generator
    # ------------------------------------------------------------------

    @property
    def tick_interval_ms(self) -> int:
        return self._tick_interval_ms

    @property
    def alert_probabilities(self) -> Dict[str, float]:
        return {
            "movement": self._movement_probability,
            "tamper": self._tamper_probability,
            "emergency": self._emergency_probability,
        }

    @property
    def random_seed(self) -> Optional[int]:
        return self._random_seed

    # ------------------------------------------------------------------
    # Capacities
    # ------------------------------------------------------------------

    @property
    def alert_capacity(self) -> int:
        return self._alert_capacity

    @property
    def conversation_capacity(self) -> int:
        return self._conversation_capacity

    # ------------------------------------------------------------------
    # Paths + logging
    # ------------------------------------------------------------------

    @property
    def slot_catalog_path(self) -> Optional[Path]:
        return self._slot_catalog_path

    @property
    def runtime_data_dir(self) -> Path:
        return self._runtime_data_dir

    @property
    def event_log_enabled(self) -> bool:
        return self._event_log_enabled

    @property
    def log_level(self) -> str:
        return self._log_level

    # ------------------------------------------------------------------
    # Speech boundary
    # ------------------------------------------------------------------

    @property
    def speech_recognition(self) -> bool:
        return self._speech_recognition

    @property
    def speech_synthesis(self) -> bool:
        return self._speech_synthesis


settings = Settings()
