"""Base factory configuration for polyfactory."""

from polyfactory.factories.pydantic_factory import ModelFactory
from pydantic import BaseModel

from src.taskboard.models import new_id, utc_now

__all__ = ["BaseFactory", "new_id", "utc_now"]


class BaseFactory[T: BaseModel](ModelFactory[T]):
    """Base factory with common configuration for all records.

    Subclasses pin every field explicitly: random identifiers or capability
    strings would not survive the payload validators.
    """

    __is_base_factory__ = True
