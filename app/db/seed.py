"""Database seeding helpers."""

import logging

from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.policy import DEFAULT_ALLOWED_WEEKDAYS, POLICY_ROW_ID, Policy

logger = logging.getLogger(__name__)


def ensure_policy_row(session: Session) -> Policy:
    """Return the singleton policy row, creating it with defaults when missing."""
    policy = session.get(Policy, POLICY_ROW_ID)
    if policy is not None:
        return policy

    policy = Policy(
        id=POLICY_ROW_ID,
        base_price=settings.default_base_price,
        allowed_weekdays=DEFAULT_ALLOWED_WEEKDAYS,
    )
    session.add(policy)
    session.commit()
    session.refresh(policy)
    logger.info("[BOOTSTRAP] Default policy row created (base_price=%s).", policy.base_price)
    return policy
