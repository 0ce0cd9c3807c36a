import pymongo
from pymongo.errors import PyMongoError
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from schemadb.utils.logger import logger


class DocumentStore(ABC):
  """What a Collection needs from the underlying document store"""

  @abstractmethod
  async def insert(self, doc: Dict[str, Any]) -> int:
    """Insert one document, returning the number acknowledged"""
    pass

  @abstractmethod
  async def update(self, filter_dict: Dict[str, Any], fields: Dict[str, Any]) -> int:
    """Set fields on the first match, returning the modified count"""
    pass

  @abstractmethod
  async def find(self, filter_dict: Dict[str, Any], limit: int = 0, skip: int = 0) -> List[Dict[str, Any]]:
    pass

  @abstractmethod
  async def find_one(self, filter_dict: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    pass

  @abstractmethod
  async def count(self, filter_dict: Dict[str, Any]) -> int:
    pass

  @abstractmethod
  async def create_index(self, path: str, options: Dict[str, Any]) -> str:
    pass


class MongoStore(DocumentStore):
  """DocumentStore over a pymongo AsyncCollection"""

  def __init__(self, collection):
    self.collection = collection

  @property
  def name(self) -> str:
    return self.collection.name

  async def insert(self, doc):
    result = await self.collection.insert_one(doc)
    return 1 if result.acknowledged and result.inserted_id is not None else 0

  async def update(self, filter_dict, fields):
    result = await self.collection.update_one(filter_dict, {"$set": fields})
    return result.modified_count

  async def find(self, filter_dict, limit=0, skip=0):
    cursor = self.collection.find(filter_dict, limit=limit, skip=skip)
    return await cursor.to_list()

  async def find_one(self, filter_dict):
    return await self.collection.find_one(filter_dict)

  async def count(self, filter_dict):
    return await self.collection.count_documents(filter_dict)

  async def create_index(self, path, options):
    try:
      name = await self.collection.create_index([(path, pymongo.ASCENDING)], **options)
    except PyMongoError as e:
      logger.error(f"✗ Index creation failed on {self.name}.{path}: {e}")
      raise # Fatal for startup
    logger.info(f"✓ Index {name} ready on {self.name}")
    return name
