import os


class Settings:
    # Logging Settings
    LOG_LEVEL: str = os.getenv("METRICS_LOG_LEVEL", "INFO").upper()
    LOG_FILE: str = os.getenv("METRICS_LOG_FILE", "")

    # Instrument Defaults
    RESERVOIR_SIZE: int = int(os.getenv("METRICS_RESERVOIR_SIZE", 1028))
    METER_WINDOW_S: float = float(os.getenv("METRICS_METER_WINDOW_S", 60.0))


settings = Settings()
