"""
Process lifecycle: configuration, connection and per-schema collections.

A Registry holds the configuration given to `initialize()` and builds the
Database handle on the first `get_handle()` call: it connects, registers every
schema with the validator, creates the planned indices and wraps each MongoDB
collection in a Collection. The handle is memoized on the Registry and passed
explicitly to whatever needs it.
"""

import asyncio
from typing import Any, Callable, Dict, Iterator, List, Optional
from pymongo import AsyncMongoClient
from schemadb.database.collection import Collection
from schemadb.database.errors import UsageError
from schemadb.database.store import MongoStore
from schemadb.schema.indexes import IndexRequest, plan_indexes
from schemadb.schema.loader import find_schemas
from schemadb.schema.validator import SchemaValidator
from schemadb.utils.config import database_config
from schemadb.utils.logger import logger


class Database:
  """Handle over every registered collection"""

  def __init__(self, client, collections: Dict[str, Collection], indexes: Dict[str, List[IndexRequest]]):
    self.client = client
    self.collections = collections
    self.indexes = indexes

  def __getitem__(self, name: str) -> Collection:
    return self.collections[name]

  def __getattr__(self, name: str) -> Collection:
    collections = self.__dict__.get('collections', {})
    if name in collections:
      return collections[name]
    raise AttributeError(name)

  def __contains__(self, name):
    return name in self.collections

  def __iter__(self) -> Iterator[str]:
    return iter(self.collections)

  async def close(self):
    await self.client.close()


def collect_schemas(db_config: Dict[str, Any]) -> List[Dict[str, Any]]:
  """Schemas discovered in schema_dir followed by the inline ones"""
  schemas = find_schemas(db_config.get('schema_dir')) + list(db_config.get('schemas') or [])
  if not schemas:
    raise UsageError("You must provide schemas")
  return schemas


def connection_options(db_config: Dict[str, Any]) -> Dict[str, Any]:
  return {
    "maxPoolSize": db_config['pool_size'],
    "connectTimeoutMS": db_config['connect_timeout_ms'],
    "socketTimeoutMS": db_config['socket_timeout_ms'],
    "serverSelectionTimeoutMS": db_config['server_selection_timeout_ms'],
  }


class Registry:
  """Owns the configuration and the memoized Database handle"""

  def __init__(self, client_factory: Callable[..., Any] = AsyncMongoClient):
    self.client_factory = client_factory
    self.config: Optional[Dict[str, Any]] = None
    self._handle: Optional[Database] = None
    self._lock = asyncio.Lock()

  def initialize(self, config: Optional[Dict[str, Any]] = None) -> 'Registry':
    """Store the database config; nothing connects until get_handle()"""
    if self._handle is not None:
      logger.warning("Registry already connected; new config ignored until reset")
      return self
    self.config = database_config(config)
    return self

  async def get_handle(self) -> Database:
    if self.config is None:
      raise UsageError("You must initialize the registry with a config before getting the database")
    if self._handle is not None:
      return self._handle

    async with self._lock:
      if self._handle is None:
        self._handle = await self._connect()
    return self._handle

  async def reset(self):
    """Close and forget the handle, keeping the config"""
    if self._handle is not None:
      handle, self._handle = self._handle, None
      await handle.close()

  async def _connect(self) -> Database:
    db_config = self.config
    schemas = collect_schemas(db_config)

    logger.info("Connecting to MongoDB...")
    client = self.client_factory(db_config['mongodb_uri'], **connection_options(db_config))
    try:
      collections, indexes = await self._register(client, schemas)
    except Exception:
      await client.close()
      raise

    logger.info("✓ Database ready")
    return Database(client, collections, indexes)

  async def _register(self, client, schemas):
    mongodb = client.get_default_database(self.config['database_name'])
    validator = SchemaValidator()
    collections = {}
    indexes = {}
    for schema_info in schemas:
      name = schema_info['collection']
      tree = validator.add_schema(name, schema_info['schema'], strict=self.config['strict'])

      store = MongoStore(mongodb[name])
      planned = plan_indexes(tree)
      for request in planned:
        await store.create_index(request.dot_path, request.options)

      collections[name] = Collection(name, store, validator)
      indexes[name] = planned
      logger.info(f"✓ Collection {name} registered ({len(planned)} indices)")
    return collections, indexes
