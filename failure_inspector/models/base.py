"""Base model configuration for report and plugin configuration schemas."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Base model with frozen configuration."""

    model_config = ConfigDict(frozen=True)
