from typing import Literal

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApplicationSettings(BaseModel):
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    json_logs: bool = False
    http_timeout: float = 10.0
    """Timeout in seconds applied to every outbound HTTP request"""
    search_limit: int = 10


class SheetsSettings(BaseModel):
    spreadsheet_id: str = ""
    worksheet: str = "Sheet1"
    client_email: str = ""
    private_key: str = ""
    """Service account private key. Escaped newlines (\\n) are unescaped on use."""
    token_uri: str = "https://oauth2.googleapis.com/token"

    @property
    def is_configured(self) -> bool:
        return bool(self.spreadsheet_id and self.client_email and self.private_key)


class StorageSettings(BaseModel):
    bucket: str = ""
    region: str = "eu-west-1"
    endpoint_url: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None
    prefix: str = "covers/"
    public_base_url: str = ""
    """Base URL the uploaded objects are served from. Defaults to the bucket's S3 URL."""

    @property
    def is_configured(self) -> bool:
        return bool(self.bucket)


class SourceSettings(BaseModel):
    default_sources: list[str] = ["google_books", "openlibrary", "isbndb"]
    google_books_api_key: str = ""
    isbndb_api_key: str = ""
    isbndb_base_url: str = "https://api2.isbndb.com"

    # outbound link templates, an empty template disables that tier
    local_marketplace_url: str = "https://www.bol.com/nl/nl/s/?searchtext={isbn}"
    general_marketplace_url: str = "https://www.amazon.nl/s?k={isbn}"
    library_catalog_url: str = "https://search.worldcat.org/search?q=bn:{isbn}"

    rehost_search_covers: bool = False
    rehost_on_add: bool = True


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BOOKSHELF_",
        env_nested_delimiter="__",
        env_file=(".env", ".env.local"),
        extra="ignore",
    )

    app: ApplicationSettings = ApplicationSettings()
    sheets: SheetsSettings = SheetsSettings()
    storage: StorageSettings = StorageSettings()
    sources: SourceSettings = SourceSettings()
