from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "restaurants.json"


@dataclass(frozen=True)
class CatalogConfig:
    """
    Configuration for loading the static restaurant catalog.
    """

    catalog_path: Path = field(
        default_factory=lambda: Path(os.getenv("TRACKER_CATALOG_PATH", str(_DEFAULT_CATALOG_PATH)))
    )
    load_error_message: str = "Failed to load restaurants. Please refresh the page."


DEFAULT_CATALOG_CONFIG = CatalogConfig()
