from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PLANTDOC_", env_file=".env", protected_namespaces=())

    model_path: str = "model/plant_disease_model.tflite"
    labels_path: str = "model/labels.txt"
    language: Literal["tr", "en"] = "tr"

    # Optional Hugging Face repo to pull the model from when it's missing locally
    hub_repo_id: str | None = None
    hub_filename: str = "plant_disease_model.tflite"
    hf_token: str | None = None


settings = Settings()
