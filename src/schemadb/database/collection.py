"""
Schema-validated, soft-deletable document collection.

Documents cross this boundary with string `_id` values; inside, `_id` is a
native ObjectId. Domain failures are raised as CollectionError subclasses,
caller misuse as UsageError, and store faults propagate untouched.

patch() reads then writes in two steps. A concurrent write landing between the
fetch and the write is overwritten by the merged document: there is no locking
and no version check.
"""

from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional
from schemadb.database import ids
from schemadb.database.errors import (
  BadRequest, InsertError, NotFound, UsageError, ValidationError
)
from schemadb.database.store import DocumentStore
from schemadb.models.document import (
  CREATED, DELETED_DATE, ID, IMMUTABLE_FIELDS, IS_DELETED, UPDATED, now_millis
)
from schemadb.schema.validator import SchemaValidator
from schemadb.utils.logger import logger

DEFAULT_PAGE_SIZE = 10
NO_QUERY = MappingProxyType({})


def _as_count(value: Any, default: int) -> int:
  """Leading integer of value; zero, negative or unparseable gives default"""
  try:
    number = int(float(value))
  except (TypeError, ValueError, OverflowError):
    return default
  return number if number > 0 else default


class Collection:
  """CRUD with soft delete over one schema-registered entity type"""

  def __init__(
      self,
      name: str,
      store: DocumentStore,
      validator: SchemaValidator,
      clock: Callable[[], int] = now_millis):
    self.name = name
    self.store = store
    self.validator = validator
    self.clock = clock

  def _not_found(self) -> NotFound:
    return NotFound(f"{self.name} not found", f"{self.name} not found")

  def _visible(self, _id, allow_deleted: bool) -> Dict[str, Any]:
    query = {ID: _id}
    if not allow_deleted:
      query[IS_DELETED] = False
    return query

  async def save(
      self,
      document: Dict[str, Any],
      allow_update_to_deleted_record: bool = False) -> Dict[str, Any]:
    """Insert a new document or overwrite the fields of an existing one"""
    doc = ids.id_to_native(dict(document))
    is_new = not doc.get(ID)
    if is_new:
      doc[ID] = ids.new_id()
      doc[CREATED] = self.clock()
      doc[UPDATED] = None
      doc[IS_DELETED] = False
      doc[DELETED_DATE] = None
    else:
      doc[UPDATED] = self.clock()

    validation = self.validator.validate(doc, self.name)
    if not validation.valid:
      logger.debug(f"Rejected {self.name} save: {len(validation.errors)} violation(s)")
      raise ValidationError("Request body is invalid", [
        {"message": e.message, "propertyPath": e.property_path}
        for e in validation.errors
      ])

    if is_new:
      inserted = await self.store.insert(doc)
      if inserted < 1:
        logger.error(f"✗ Insert into {self.name} was not acknowledged")
        raise InsertError(f"failed to insert into {self.name}")
      return ids.id_to_external(doc)

    update = {k: v for k, v in doc.items() if k not in IMMUTABLE_FIELDS}
    modified = await self.store.update(
      self._visible(doc[ID], allow_update_to_deleted_record), update
    )
    if not modified:
      raise self._not_found()
    return ids.id_to_external(doc)

  async def find(
      self,
      page: Any = 0,
      page_size: Any = DEFAULT_PAGE_SIZE,
      query: Optional[Mapping[str, Any]] = NO_QUERY,
      include_deleted: bool = False) -> List[Dict[str, Any]]:
    """One page of documents matching `query`, hiding soft-deleted ones by default"""
    if query is None:
      raise UsageError("Query must be defined")

    limit = _as_count(page_size, DEFAULT_PAGE_SIZE)
    skip = _as_count(page, 0) * limit

    filter_dict = ids.id_to_native(dict(query))
    if not include_deleted:
      filter_dict = {**filter_dict, IS_DELETED: False}

    docs = await self.store.find(filter_dict, limit=limit, skip=skip)
    return [ids.id_to_external(d) for d in docs]

  async def patch(
      self,
      partial: Dict[str, Any],
      allow_update_to_deleted_record: bool = False) -> Dict[str, Any]:
    """Shallow-merge `partial` onto the stored document and persist the result"""
    if not partial or not partial.get(ID):
      raise BadRequest("_id required", "You must include an _id field with your patch")

    partial = ids.id_to_native(dict(partial))
    query = self._visible(partial[ID], allow_update_to_deleted_record)

    current = await self.store.find_one(query)
    if current is None:
      raise self._not_found()

    # _id and _created always come from the stored document
    merged = {
      **current,
      **{k: v for k, v in partial.items() if k not in IMMUTABLE_FIELDS}
    }
    validation = self.validator.validate(merged, self.name)
    if not validation.valid:
      logger.debug(f"Rejected {self.name} patch: {len(validation.errors)} violation(s)")
      raise ValidationError("Result of patch is invalid", [
        {"message": e.message, "params": e.params}
        for e in validation.errors
      ])

    merged[UPDATED] = self.clock()
    update = {k: v for k, v in merged.items() if k not in IMMUTABLE_FIELDS}
    modified = await self.store.update(query, update)
    if not modified:
      raise self._not_found()
    return ids.id_to_external(merged)

  async def _toggle_delete(self, _id: Any, is_delete: bool) -> None:
    _id = ids.to_native(_id)
    if not _id:
      raise BadRequest("_id required", "you must supply an _id to delete")

    fields = {
      IS_DELETED: is_delete,
      DELETED_DATE: self.clock() if is_delete else None
    }
    modified = await self.store.update({ID: _id}, fields)
    if modified == 1:
      return

    # Nothing changed: either missing, or already in the requested state
    if await self.store.count({ID: _id}) == 0:
      raise self._not_found()
    logger.debug(f"{self.name} {ids.to_external(_id)} already has {IS_DELETED}={is_delete}")

  async def delete(self, _id: Any) -> None:
    """Soft delete: hide the document and stamp its deletion date"""
    await self._toggle_delete(_id, True)

  async def recover(self, _id: Any) -> None:
    """Undo a soft delete"""
    await self._toggle_delete(_id, False)
