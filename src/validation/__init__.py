"""Form validation package."""

from src.validation.validator import AccountFormValidator

__all__ = ["AccountFormValidator"]
