"""
Lifecycle interfaces for components that own network resources.

These interfaces provide a consistent way to release resources
and report health across the library.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class IClosable(ABC):
    """Interface for components that own resources released by close()."""

    @abstractmethod
    async def close(self) -> None:
        """
        Release every owned resource.

        Implementations must attempt to release all resources even if
        one of them fails, and must treat a repeated call as a no-op.

        Raises:
            TeardownFailure: If any resource failed to release cleanly.
        """
        pass


class IHealthCheckable(ABC):
    """Interface for components that can report their health status."""

    @abstractmethod
    async def check_health(self) -> Dict[str, Any]:
        """
        Check the health status of the component.

        Returns:
            Dict containing health information with at least:
            - 'healthy': bool indicating if component is healthy
            - 'status': str describing current status
            - 'details': Dict with additional health details
        """
        pass
