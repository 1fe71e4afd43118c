import enum
import logging
from typing import Callable

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class DeleteOutcome(str, enum.Enum):
    DELETED = "deleted"
    DEACTIVATED = "deactivated"


def delete_or_deactivate(db: Session, entity, has_dependents: Callable[[], bool]) -> DeleteOutcome:
    """
    Remove `entity`, or flip its is_active flag when dependent rows still point at it.
    """
    try:
        if has_dependents():
            entity.is_active = False
            outcome = DeleteOutcome.DEACTIVATED
        else:
            db.delete(entity)
            outcome = DeleteOutcome.DELETED
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("%s %s %s", type(entity).__name__, entity.id, outcome.value)
    return outcome
