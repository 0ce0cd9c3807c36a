import time
from typing import Any, Dict

ID = '_id'
CREATED = '_created'
UPDATED = '_updated'
IS_DELETED = '_isDeleted'
DELETED_DATE = '_deletedDate'

RESERVED_FIELDS = (ID, CREATED, UPDATED, IS_DELETED, DELETED_DATE)

# Fields that never change once a document exists
IMMUTABLE_FIELDS = (ID, CREATED)


def reserved_properties() -> Dict[str, Dict[str, Any]]:
  """JSON-Schema fragment declaring the reserved fields"""
  return {
    ID: {"type": "string"},
    CREATED: {"type": "integer"},
    UPDATED: {"type": ["integer", "null"]},
    IS_DELETED: {"type": "boolean"},
    DELETED_DATE: {"type": ["integer", "null"]},
  }


def now_millis() -> int:
  """Current time as epoch milliseconds"""
  return int(time.time() * 1000)
