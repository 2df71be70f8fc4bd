"""Cart port — abstract interface for the shopping cart service."""

from abc import ABC, abstractmethod


class CartPort(ABC):
    @abstractmethod
    def clear(self, user_id: str) -> None:
        """Empty the user's cart after a successful checkout."""
        ...
