"""Base Pydantic models for Confucius.

This module provides the base model class that all Confucius Pydantic models
should inherit from. It establishes consistent configuration across all models:

- Strict field validation (no extra fields allowed)
- Immutable instances, so settings can be shared between resolvers and threads

Example:
    >>> from confucius.models import ConfuciusBaseModel
    >>>
    >>> class ListSettings(ConfuciusBaseModel):
    ...     delimiter: str = ","
    >>>
    >>> ListSettings().model_dump()
    {'delimiter': ','}
"""

from pydantic import BaseModel, ConfigDict


class ConfuciusBaseModel(BaseModel):
    """Base model for all Confucius Pydantic models.

    - extra="forbid": Rejects any fields not defined in the model
    - frozen=True: Makes instances immutable for thread safety
    """

    model_config = ConfigDict(extra="forbid", frozen=True)
