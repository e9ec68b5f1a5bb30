from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "registry-server"
    log_level: str = "INFO"

    registry_host: str = "localhost"
    registry_port: int = 5758
    public_url: str = ""  # e.g. "https://registry.internal:5758"; empty means https://{host}:{port}

    namespace: str = "makinzm"
    provider_name: str = "mylocal"
    provider_version: str = "1.0.0"
    protocols: list[str] = ["5.0"]

    registry_token: str = "local-registry-token"
    require_auth: bool = True

    providers_dir: str = "providers"
    gpg_keys_dir: str = "gpg-keys"

    # Answer requests that omit os/arch with the serving host's own platform.
    default_to_host_platform: bool = True

    tls_cert_file: str = "localhost+2.pem"
    tls_key_file: str = "localhost+2-key.pem"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore", frozen=True)

    @property
    def base_url(self) -> str:
        if self.public_url:
            return self.public_url.rstrip("/")
        return f"https://{self.registry_host}:{self.registry_port}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
