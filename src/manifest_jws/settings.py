from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Up-front input limits; oversized inputs fail before any decoding
    mjws_max_manifest_bytes: int = 64 * 1024
    mjws_max_jws_bytes: int = 4096
    mjws_log_level: str = "INFO"

settings = Settings()
