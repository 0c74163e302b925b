import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class TransactionScope:
    """
    서비스 메서드 하나를 하나의 트랜잭션으로 묶는 범위 객체입니다.

    서비스는 각 공개 메서드의 시작에서 `with self.tx():` 로 범위를 획득합니다.
    가장 바깥쪽 범위만 commit/rollback을 수행하고, 안쪽 범위는 바깥 트랜잭션에 합류합니다.
    블록 안에서 예외가 발생하면 rollback 후 예외를 그대로 다시 던집니다.
    """

    def __init__(self, db_session: Session):
        self.db = db_session
        self._depth = 0

    @property
    def active(self) -> bool:
        return self._depth > 0

    @contextmanager
    def __call__(self) -> Iterator[Session]:
        self._depth += 1
        outermost = self._depth == 1
        try:
            yield self.db
            if outermost:
                self.db.commit()
        except Exception:
            if outermost:
                logger.debug("Rolling back transaction")
                self.db.rollback()
            raise
        finally:
            self._depth -= 1
