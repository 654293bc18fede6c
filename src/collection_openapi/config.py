import logging

from pydantic_settings import BaseSettings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


class Settings(BaseSettings):
    OUTPUT_FORMAT: str = "json"  # json / yaml
    LOG_LEVEL: str = "WARNING"
    JSON_INDENT: int = 2

    model_config = {"env_prefix": "COLLECTION_OPENAPI_", "env_file": ".env", "extra": "ignore"}


settings = Settings()


def configure_logging(verbose: bool = False) -> None:
    """Set up root logging once for command-line use."""
    level = logging.DEBUG if verbose else getattr(logging, settings.LOG_LEVEL.upper(), logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT)
