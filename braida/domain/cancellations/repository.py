"""Cancellation policy repository - Database operations for policy tiers"""

import logging

from sqlalchemy.orm import Session

from ...models import CancellationPolicy
from .schemas import DEFAULT_CLIENT_CANCEL_TIERS, CancellationPolicyTier

logger = logging.getLogger(__name__)


class CancellationPolicyRepository:
    """Repository for cancellation policy database operations"""

    @staticmethod
    def get_client_cancel_tiers(db: Session) -> list[CancellationPolicyTier]:
        """Get the client cancellation tiers, falling back to the platform defaults"""
        rows = (
            db.query(CancellationPolicy)
            .filter(CancellationPolicy.policy_type == "client_cancel")
            .order_by(CancellationPolicy.hours_threshold.desc(), CancellationPolicy.id)
            .all()
        )

        if not rows:
            logger.info("No client cancellation policy configured - using defaults")
            return list(DEFAULT_CLIENT_CANCEL_TIERS)

        return [
            CancellationPolicyTier(
                hours_threshold=row.hours_threshold,
                refund_percentage=row.refund_percentage,
            )
            for row in rows
        ]
