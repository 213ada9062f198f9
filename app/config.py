from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Firebase web config; passed through to the SDKs untouched
    firebase_api_key: str = ""
    firebase_auth_domain: str = ""
    firebase_project_id: str = ""
    firebase_storage_bucket: str = ""
    firebase_messaging_sender_id: str = ""
    firebase_app_id: str = ""

    reviews_collection: str = "reviews"
    review_store_backend: Literal["firestore", "memory"] = "firestore"
    store_timeout_seconds: float = 10.0
    log_level: str = "INFO"


settings = Settings()
