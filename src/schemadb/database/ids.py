from typing import Any, Dict, Optional
from bson import ObjectId
from bson.errors import InvalidId
from schemadb.database.errors import InvalidIdentifier


def to_native(value: Any) -> Any:
  """Parse a string id into an ObjectId; anything else passes through"""
  if not value or not isinstance(value, str):
    return value
  try:
    return ObjectId(value)
  except InvalidId:
    raise InvalidIdentifier(
      "Invalid _id", f"'{value}' is not a valid identifier"
    ) from None


def to_external(value: Any) -> Any:
  """Render an ObjectId as its string form; anything else passes through"""
  if value and isinstance(value, ObjectId):
    return str(value)
  return value


def new_id() -> ObjectId:
  return ObjectId()


def id_to_native(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
  """Shallow copy of a document or filter with a native `_id`"""
  if not doc or not doc.get('_id'):
    return doc
  return {**doc, '_id': to_native(doc['_id'])}


def id_to_external(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
  """Shallow copy of a document with a string `_id`"""
  if not doc or not doc.get('_id'):
    return doc
  return {**doc, '_id': to_external(doc['_id'])}
