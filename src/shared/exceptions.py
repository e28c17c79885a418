"""Custom exceptions for the application."""
from typing import Any


class InvalidInput(ValueError):
    """Raised when a caller supplies a value the operation cannot accept."""

    def __init__(self, field_name: str, message: str):
        """
        Initialize the exception.

        Args:
            field_name: Name of the rejected field or argument
            message: Human readable reason for the rejection
        """
        super().__init__(f"{field_name}: {message}")
        self.field_name = field_name
        self.message = message


class StorageFailure(Exception):
    """Raised when the persistence layer fails (connection loss, constraint violation, ...)."""

    def __init__(self, operation: str):
        super().__init__(f"Storage failure while trying to {operation}")
        self.operation = operation


class ConflictingEntityFound(StorageFailure):
    """Raised when an entity with a conflicting field already exists."""

    def __init__(self, entity_name: str, field_name: str, field_value: Any):
        """
        Initialize the exception.

        Args:
            entity_name: Name of the entity
            field_name: Name of the conflicting field
            field_value: Value of the conflicting field
        """
        Exception.__init__(self, f"{entity_name} with {field_name} '{field_value}' already exists")
        self.operation = f"store {entity_name}"
        self.entity_name = entity_name
        self.field_name = field_name
        self.field_value = field_value


class DataCorruption(Exception):
    """Raised when stored data can no longer be decoded into its domain model."""

    def __init__(self, entity_name: str, entity_id: Any):
        super().__init__(f"{entity_name} with ID {entity_id} could not be decoded")
        self.entity_name = entity_name
        self.entity_id = entity_id
