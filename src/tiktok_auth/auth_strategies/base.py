# auth_strategies/base.py

from abc import ABC, abstractmethod
from typing import Any


class BaseAuthStrategy(ABC):
    """
    Base class for all authentication strategies
    All strategies must implement this interface
    """

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    async def authenticate(self, credentials: dict[str, Any]) -> Any:
        """
        Authenticate user with provided credentials

        Args:
            credentials: Dictionary containing authentication credentials

        Returns:
            The verified user, or the normalized login result

        Raises:
            AuthenticationError: If authentication fails
        """
        pass

    def get_strategy_metadata(self) -> dict[str, Any]:
        """
        Get metadata about this strategy

        Returns:
            Dictionary with strategy information
        """
        return {
            "name": self.name,
            "requires_password": self.requires_password(),
        }

    def requires_password(self) -> bool:
        """Whether this strategy requires a password"""
        return False


class TokenBasedStrategy(BaseAuthStrategy):
    """Base class for token-based authentication strategies"""
