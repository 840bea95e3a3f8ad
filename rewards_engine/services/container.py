"""
Service Container - Dependency Injection Container

Wires the rewards services to one Database and one Clock. Services are
created on first access.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

from rewards_engine.utils.datetime_helpers import Clock, now_utc

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """
    Simple dependency injection container for services.

    Services are lazy-loaded on first access via properties.
    Infrastructure dependencies (db, clock) are injected.
    """

    # Infrastructure dependencies (injected)
    db: object  # Database instance
    clock: Clock = now_utc

    # Services (lazy-loaded via properties)
    _badge_service: Optional[object] = field(default=None, init=False, repr=False)
    _xp_service: Optional[object] = field(default=None, init=False, repr=False)
    _streak_service: Optional[object] = field(default=None, init=False, repr=False)
    _rewards_service: Optional[object] = field(default=None, init=False, repr=False)

    @property
    def badge_service(self):
        """Get BadgeService instance (lazy-loaded)"""
        if self._badge_service is None:
            from rewards_engine.services.badge_service import BadgeService
            self._badge_service = BadgeService(self.db, clock=self.clock)
            logger.debug("BadgeService instantiated")
        return self._badge_service

    @property
    def xp_service(self):
        """Get XPService instance (lazy-loaded)"""
        if self._xp_service is None:
            from rewards_engine.services.xp_service import XPService
            self._xp_service = XPService(self.db, self.badge_service, clock=self.clock)
            logger.debug("XPService instantiated")
        return self._xp_service

    @property
    def streak_service(self):
        """Get StreakService instance (lazy-loaded)"""
        if self._streak_service is None:
            from rewards_engine.services.streak_service import StreakService
            self._streak_service = StreakService(self.db, self.xp_service, clock=self.clock)
            logger.debug("StreakService instantiated")
        return self._streak_service

    @property
    def rewards_service(self):
        """Get RewardsService instance (lazy-loaded)"""
        if self._rewards_service is None:
            from rewards_engine.services.rewards_service import RewardsService
            self._rewards_service = RewardsService(
                self.db,
                self.xp_service,
                self.streak_service,
                self.badge_service
            )
            logger.debug("RewardsService instantiated")
        return self._rewards_service


# Global container instance (initialized by the entry point)
_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """
    Get the global service container.

    Raises:
        RuntimeError: If container not initialized (call init_container first)
    """
    if _container is None:
        raise RuntimeError(
            "Service container not initialized. "
            "Call init_container() before using services."
        )
    return _container


def init_container(db: object, clock: Clock = now_utc) -> ServiceContainer:
    """
    Initialize the global service container.

    Args:
        db: Database instance with an initialized pool
        clock: Current-time provider shared by all services

    Returns:
        ServiceContainer: The initialized container
    """
    global _container

    _container = ServiceContainer(db=db, clock=clock)

    logger.info("Service container initialized")
    return _container
