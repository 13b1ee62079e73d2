from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class AnnotationConfig:
    storage_key: str = field(
        default_factory=lambda: os.getenv("TRACKER_STORAGE_KEY", "restaurantTrackerData")
    )
    storage_path: Path = field(
        default_factory=lambda: Path(
            os.getenv("TRACKER_DATA_PATH", str(Path.home() / ".restaurant_tracker.json"))
        )
    )


DEFAULT_ANNOTATION_CONFIG = AnnotationConfig()
