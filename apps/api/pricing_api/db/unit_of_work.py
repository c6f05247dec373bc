"""
Transaction boundary for multi-row writes.
"""
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class UnitOfWork:
    """
    All-or-nothing wrapper around a SQLAlchemy session.

    The session autobegins on first use, so begin() only opens a transaction
    when none is active yet (e.g. validation queries already started one).
    """

    def __init__(self, session: Session):
        self.session = session

    def begin(self) -> None:
        if not self.session.in_transaction():
            self.session.begin()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Run a block inside one transaction.

        Commits when the block completes; any exception (including
        KeyboardInterrupt or task cancellation) rolls everything back and
        is re-raised.
        """
        self.begin()
        try:
            yield self.session
            self.commit()
        except BaseException:
            logger.error("Rolling back unit of work", exc_info=True)
            self.rollback()
            raise
