"""Base model configuration for suite file structures."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Base model with standard configuration.

    Suite files use legacy key spellings, so fields may declare aliases while
    still being constructible by their Python names.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)
