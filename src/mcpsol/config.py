"""Centralized configuration for mcpsol."""

import os


class Config:
    """
    mcpsol configuration with environment variable overrides.

    All configuration values are centralized here with sensible defaults.
    Values can be overridden via environment variables.
    """

    @staticmethod
    def _parse_positive_int(name: str, default: str) -> int:
        """Parse a positive integer from an environment variable."""
        raw = os.getenv(name, default)
        try:
            value = int(raw)
        except ValueError as e:
            raise ValueError(f"Invalid {name} environment variable: {e}")
        if value <= 0:
            raise ValueError(f"Invalid {name} environment variable: must be > 0, got {value}")
        return value

    # ========================================================================
    # Wire Protocol
    # ========================================================================
    PROTOCOL_VERSION: str = "2024-11-05"
    MAX_RETURN_DATA_SIZE: int = 1024  # program return_data ceiling, in bytes
    DISCRIMINATOR_SIZE: int = 8
    PUBKEY_SIZE: int = 32

    # ========================================================================
    # Discovery
    # ========================================================================
    MAX_DISCOVERY_PAGES: int = _parse_positive_int.__func__("MCPSOL_MAX_PAGES", "100")
    MAX_CURSOR: int = 255  # list_tools carries the cursor in a single byte

    # ========================================================================
    # Agent Bridge
    # ========================================================================
    SERVER_NAME: str = os.getenv("MCPSOL_SERVER_NAME", "ProgramTools")
    SCHEMA_PATH: str = os.getenv("MCPSOL_SCHEMA_PATH", "./config/program.yaml")
    TARGET_ID: str = os.getenv(
        "MCPSOL_TARGET_ID", "7QniyJzHpS7uFdYogBE5oUPxj6TXyNKFgkR4Dztbnbct"
    )
    # One tool per list_tools call; false serves the whole compact catalog
    PAGINATED: bool = os.getenv("MCPSOL_PAGINATED", "true").lower() == "true"

    @classmethod
    def validate(cls) -> bool:
        """
        Validate configuration consistency.

        Checks:
        - Size limits are positive
        - Discovery page cap is positive and reachable with a one-byte cursor

        Returns:
            True if validation passes

        Raises:
            ValueError: If validation fails
        """
        errors = []

        if cls.MAX_RETURN_DATA_SIZE <= 0:
            errors.append(f"MAX_RETURN_DATA_SIZE must be > 0, got {cls.MAX_RETURN_DATA_SIZE}")

        if cls.MAX_DISCOVERY_PAGES <= 0:
            errors.append(f"MAX_DISCOVERY_PAGES must be > 0, got {cls.MAX_DISCOVERY_PAGES}")
        elif cls.MAX_DISCOVERY_PAGES > cls.MAX_CURSOR + 1:
            errors.append(
                f"MAX_DISCOVERY_PAGES must be <= {cls.MAX_CURSOR + 1}, "
                f"got {cls.MAX_DISCOVERY_PAGES}"
            )

        if not cls.SCHEMA_PATH:
            errors.append("SCHEMA_PATH must not be empty")

        if not cls.PROTOCOL_VERSION:
            errors.append("PROTOCOL_VERSION must not be empty")

        if errors:
            raise ValueError(f"Config validation failed: {'; '.join(errors)}")

        return True
