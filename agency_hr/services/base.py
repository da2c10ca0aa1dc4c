import logging
from typing import Any, Type, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from agency_hr.core.exceptions import ConflictError, NotFoundError

ModelT = TypeVar("ModelT")


class BaseService:
    """
    Shared plumbing for the service layer: session handling, logging and the
    commit/rollback discipline every write path follows.
    """

    def __init__(self, db: Session):
        self.db = db
        self._logger = logging.getLogger(self.__class__.__module__)

    def log_info(self, message: str, **extra: Any) -> None:
        self._logger.info(message, extra=extra or None)

    def log_warning(self, message: str, **extra: Any) -> None:
        self._logger.warning(message, extra=extra or None)

    def _get_or_404(self, model: Type[ModelT], entity_id: str, label: str) -> ModelT:
        obj = self.db.get(model, entity_id)
        if obj is None:
            raise NotFoundError(label, entity_id)
        return obj

    def _commit(self, conflict_message: str = "Record already exists") -> None:
        """Commit the unit of work; unique-constraint violations become ConflictError."""
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            self._logger.warning(f"Integrity error on commit: {e.orig}")
            raise ConflictError(conflict_message) from e
        except Exception:
            self.db.rollback()
            raise
