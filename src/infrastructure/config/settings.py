"""Pydantic settings for flicksync.toml configuration."""

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from ...domain.errors import ConfigurationError
from .environment import get_env, load_environment_variables, read_token_file

DEFAULT_CONFIG_PATH = "flicksync.toml"
DEFAULT_HOME = Path("~/.flicksync")


class FlickrSettings(BaseModel):
    """Flickr API settings."""

    api_key: str = ""
    api_secret: str = ""
    auth_token: str = ""
    token_file: str = str(DEFAULT_HOME / "token")
    base_url: str = "https://api.flickr.com/services/rest/"
    per_page: int = 500
    timeout_seconds: float = 30.0

    def __init__(self, **data: Any) -> None:
        """Initialize with environment variable precedence (system env > .env > TOML)."""
        load_environment_variables()

        for field_name, env_key in (
            ("api_key", "FLICKR_API_KEY"),
            ("api_secret", "FLICKR_API_SECRET"),
            ("auth_token", "FLICKR_AUTH_TOKEN"),
        ):
            env_value = get_env(env_key)
            if env_value is not None:
                data[field_name] = env_value

        super().__init__(**data)

    @field_validator("per_page")
    @classmethod
    def validate_per_page(cls, v: int) -> int:
        # Flickr caps pages at 500 entries
        if not 1 <= v <= 500:
            raise ValueError("per_page must be between 1 and 500")
        return v

    def resolve_auth_token(self) -> str:
        """
        Return the auth token from settings/environment, falling back to the token file.

        Raises:
            ConfigurationError: If no token is available
        """
        if self.auth_token:
            return self.auth_token
        token = read_token_file(self.token_file)
        if token:
            return token
        raise ConfigurationError(
            "FLICKR_AUTH_TOKEN",
            f"Set FLICKR_AUTH_TOKEN or store a token in {self.token_file}",
        )


class PathsSettings(BaseModel):
    """Path configuration settings."""

    output_dir: str = "output"
    ledger_dir: str = str(DEFAULT_HOME / "ledgers")

    def output_path(self) -> Path:
        return Path(self.output_dir).expanduser().resolve()

    def ledger_path(self) -> Path:
        return Path(self.ledger_dir).expanduser()


class DownloadSettings(BaseModel):
    """Payload download settings."""

    timeout_seconds: float = 60.0
    chunk_size: int = 64 * 1024

    @field_validator("timeout_seconds", "chunk_size")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be positive")
        return v


class SyncSettings(BaseModel):
    """Synchronization policy settings."""

    public_only: bool = True
    skip_existing_files: bool = True
    notify: bool = True


class TaggingSettings(BaseModel):
    """Tag writer settings."""

    exiftool_path: str = "exiftool"


class Settings(BaseModel):
    """Main settings loaded from flicksync.toml."""

    flickr: FlickrSettings = Field(default_factory=FlickrSettings)
    paths: PathsSettings = Field(default_factory=PathsSettings)
    download: DownloadSettings = Field(default_factory=DownloadSettings)
    sync: SyncSettings = Field(default_factory=SyncSettings)
    tagging: TaggingSettings = Field(default_factory=TaggingSettings)

    @classmethod
    def from_toml(cls, toml_path: Path | str = DEFAULT_CONFIG_PATH) -> "Settings":
        """
        Load settings from a TOML file with environment variable precedence.

        Environment variables (system env > .env file) override TOML values.
        A missing file yields the defaults.

        Args:
            toml_path: Path to flicksync.toml

        Returns:
            Settings instance with loaded configuration
        """
        load_environment_variables()

        toml_path = Path(toml_path)
        if not toml_path.exists():
            return cls()

        with toml_path.open("rb") as f:
            data = tomllib.load(f)

        return cls(
            flickr=FlickrSettings(**data.get("flickr", {})),
            paths=PathsSettings(**data.get("paths", {})),
            download=DownloadSettings(**data.get("download", {})),
            sync=SyncSettings(**data.get("sync", {})),
            tagging=TaggingSettings(**data.get("tagging", {})),
        )
