"""RatingVault services: cache, upstream client and orchestration."""

from ratingvault.services.message_router import MessageRouter
from ratingvault.services.rating_service import (
    OperationResult,
    RatingService,
    create_rating_service,
)

__all__ = [
    "MessageRouter",
    "OperationResult",
    "RatingService",
    "create_rating_service",
]
