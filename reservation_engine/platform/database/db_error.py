from sqlalchemy.exc import DBAPIError


# PostgreSQL SQLSTATE codes raised when concurrent transactions collide
SERIALIZATION_FAILURE = '40001'
DEADLOCK_DETECTED = '40P01'

_CONCURRENCY_SQLSTATES = frozenset({SERIALIZATION_FAILURE, DEADLOCK_DETECTED})


def get_sqlstate(exc: BaseException) -> str | None:
    orig = getattr(exc, 'orig', None)
    return getattr(orig, 'sqlstate', None) or getattr(orig, 'pgcode', None)


def is_serialization_failure(exc: BaseException) -> bool:
    """True when the database aborted the transaction because of a concurrent one"""
    return isinstance(exc, DBAPIError) and get_sqlstate(exc) in _CONCURRENCY_SQLSTATES
