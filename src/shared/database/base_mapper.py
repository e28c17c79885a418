import abc
from typing import Generic, TypeVar


TModel = TypeVar("TModel")
TEntity = TypeVar("TEntity")


class BaseEntityMapper(abc.ABC, Generic[TModel, TEntity]):
    """Converts a pydantic domain model to its SQLAlchemy entity and back."""

    @staticmethod
    @abc.abstractmethod
    def to_entity(model_instance: TModel) -> TEntity:
        """Build a detached entity graph from the domain model."""

    @staticmethod
    @abc.abstractmethod
    def to_model(entity: TEntity) -> TModel:
        """Build the domain model from a loaded entity graph."""
