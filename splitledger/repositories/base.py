from contextlib import contextmanager
from decimal import Decimal
from enum import Enum
from typing import Any

from bson.decimal128 import Decimal128
from pydantic import BaseModel
from pymongo.errors import DuplicateKeyError, PyMongoError

from splitledger.core.errors import StorageFailure


def to_document(model: BaseModel) -> dict:
    """Dump a model for insertion: ``_id`` key, enums as plain strings."""
    return _plain(model.model_dump(by_alias=True))


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


def as_decimal(value: Any) -> Decimal:
    """Aggregation results may bypass the codec and arrive as Decimal128."""
    if isinstance(value, Decimal128):
        return value.to_decimal()
    return Decimal(value)


@contextmanager
def storage_errors(operation: str):
    """Translate driver errors to StorageFailure. Duplicate keys pass through."""
    try:
        yield
    except DuplicateKeyError:
        raise
    except PyMongoError as exc:
        raise StorageFailure(str(exc), operation) from exc
