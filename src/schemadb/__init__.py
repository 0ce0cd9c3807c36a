from .database.collection import Collection
from .database.errors import (
  BadRequest, CollectionError, InsertError, InvalidIdentifier, NotFound, UsageError, ValidationError
)
from .database.registry import Database, Registry

__all__ = [
  'Collection', 'Database', 'Registry',
  'CollectionError', 'BadRequest', 'InvalidIdentifier', 'ValidationError', 'NotFound',
  'UsageError', 'InsertError'
]
