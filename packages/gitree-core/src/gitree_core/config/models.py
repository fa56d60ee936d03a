from pydantic import BaseModel, Field
from typing import Literal


class StoreConfig(BaseModel):
    backend: Literal["memory", "disk"] = "memory"
    path: str = ".gitree/objects"


class SerializerConfig(BaseModel):
    max_concurrency: int = Field(default=16, gt=0)


class GitreeConfig(BaseModel):
    store: StoreConfig = Field(default_factory=StoreConfig)
    serializer: SerializerConfig = Field(default_factory=SerializerConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
