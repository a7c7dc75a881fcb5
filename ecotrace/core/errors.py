"""
Errors raised by the lifecycle engine.

All of them are recoverable by the caller and leave the store untouched.
"""

from typing import Optional


class EngineError(Exception):
    """Base class for lifecycle engine errors."""


class ValidationError(EngineError):
    """Malformed input to an operation (non-positive weight, empty string)."""


class IllegalTransitionError(ValidationError):
    """Operation is not allowed from the material's current status."""

    def __init__(self, current: str, target: str, message: Optional[str] = None):
        self.current = current
        self.target = target
        super().__init__(
            message or f"Illegal transition: {current} -> {target}"
        )


class NotFoundError(EngineError):
    """Referenced material or credit does not exist."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")
