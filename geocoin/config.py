"""
Geocoin Configuration

Loads configuration from environment variables with sensible defaults.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""

    # Grid Configuration
    # Tile width in degrees; 1e-4 is roughly the size of a house.
    TILE_DEGREES: float = float(os.getenv("GEOCOIN_TILE_DEGREES", "1e-4"))
    # Visibility radius in cells around the player (8 → 17x17 neighbourhood)
    NEIGHBORHOOD_SIZE: int = int(os.getenv("GEOCOIN_NEIGHBORHOOD_SIZE", "8"))

    # World Generation
    CACHE_SPAWN_PROBABILITY: float = float(os.getenv("GEOCOIN_SPAWN_PROBABILITY", "0.1"))
    MAX_COINS_PER_CACHE: int = int(os.getenv("GEOCOIN_MAX_COINS", "10"))

    # Starting position (Oakes College classroom, UC Santa Cruz)
    START_LAT: float = float(os.getenv("GEOCOIN_START_LAT", "36.98949379578401"))
    START_LNG: float = float(os.getenv("GEOCOIN_START_LNG", "-122.06277128548504"))

    # Persistence
    STORAGE_PATH: Path = Path(os.getenv("GEOCOIN_STORAGE_PATH", "geocoin_state.json"))

    # Logging
    VERBOSE: bool = os.getenv("GEOCOIN_VERBOSE", "false").lower() == "true"

    # Project Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and raise errors if values are out of range."""
        if cls.TILE_DEGREES <= 0:
            raise ValueError("GEOCOIN_TILE_DEGREES must be positive")

        if cls.NEIGHBORHOOD_SIZE < 0:
            raise ValueError("GEOCOIN_NEIGHBORHOOD_SIZE must be zero or positive")

        if not 0.0 <= cls.CACHE_SPAWN_PROBABILITY <= 1.0:
            raise ValueError(
                "GEOCOIN_SPAWN_PROBABILITY must be between 0 and 1 "
                f"(got {cls.CACHE_SPAWN_PROBABILITY})"
            )

        if cls.MAX_COINS_PER_CACHE < 1:
            raise ValueError("GEOCOIN_MAX_COINS must be at least 1")

        if not (-90.0 <= cls.START_LAT <= 90.0 and -180.0 <= cls.START_LNG <= 180.0):
            raise ValueError(
                "GEOCOIN_START_LAT/GEOCOIN_START_LNG must be a valid latitude/longitude"
            )

    @classmethod
    def display(cls) -> str:
        """Return a formatted string showing current configuration."""
        lines = [
            "Geocoin Configuration:",
            f"  Tile Width: {cls.TILE_DEGREES}°",
            f"  Neighborhood: {cls.NEIGHBORHOOD_SIZE} cells",
            f"  Spawn Probability: {cls.CACHE_SPAWN_PROBABILITY}",
            f"  Max Coins: {cls.MAX_COINS_PER_CACHE}",
            f"  Start: ({cls.START_LAT}, {cls.START_LNG})",
            f"  Storage: {cls.STORAGE_PATH}",
        ]
        return "\n".join(lines)
