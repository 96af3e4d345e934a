"""
SEQMATCH — Shared Error Definitions

Common exceptions used across all SEQMATCH components.
"""

from __future__ import annotations

from typing import Any


class SeqMatchError(Exception):
    """Base exception for all SEQMATCH errors."""
    pass


# =============================================================================
# Configuration Errors
# =============================================================================
class ConfigurationError(SeqMatchError):
    """Raised when configuration is missing or invalid."""
    pass


class InvalidSettingError(ConfigurationError):
    """Raised when an environment variable cannot be parsed."""
    def __init__(self, var_name: str, value: str):
        self.var_name = var_name
        self.value = value
        super().__init__(f"Invalid value for {var_name}: {value!r}")


# =============================================================================
# Construction Errors
# =============================================================================
class ConstructionError(SeqMatchError):
    """
    Base exception for errors raised while building a sequence.

    Always raised synchronously by the combinator that received the bad
    input, before anything is registered.
    """
    def __init__(self, combinator: str, argument: Any, message: str):
        self.combinator = combinator
        self.argument = argument
        super().__init__(f"{combinator}: {message} (got {argument!r})")


class InvalidTokenError(ConstructionError):
    """Raised when a pattern token has an unsupported shape."""
    pass


class InvalidArgumentError(ConstructionError):
    """Raised when a non-token argument (e.g. a repeat count) is invalid."""
    pass


class InvalidSequenceError(ConstructionError):
    """Raised when a sequence builder callback returns something unusable."""
    pass


class InvalidReactionError(ConstructionError):
    """Raised when a reaction cannot be resolved."""
    pass
