import copy
import json
import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional
from schemadb.models.document import reserved_properties
from schemadb.utils.logger import logger

SCHEMA_SUFFIXES = ('.json', '.yaml', '.yml')


def with_reserved_fields(schema: Dict[str, Any]) -> Dict[str, Any]:
  """
  Deep copy of an entity schema that also declares the reserved fields.

  Properties defined by the schema itself win over the reserved defaults.
  """
  wrapped = copy.deepcopy(schema)
  wrapped.setdefault('type', 'object')
  wrapped['properties'] = {
    **reserved_properties(),
    **(wrapped.get('properties') or {})
  }
  return wrapped


def load_schema_file(path: Path) -> Dict[str, Any]:
  """Load a single schema definition from JSON or YAML"""
  with open(path, 'r', encoding='utf-8') as f:
    if path.suffix == '.json':
      schema = json.load(f)
    else:
      schema = yaml.safe_load(f)
  if not isinstance(schema, dict):
    raise ValueError(f"Schema file {path} does not contain an object")
  return schema


def find_schemas(schema_dir: Optional[str]) -> List[Dict[str, Any]]:
  """Discover schema files; the collection name is the file stem"""
  if not schema_dir:
    return []
  full_path = Path(schema_dir).resolve()

  schemas = []
  for path in sorted(full_path.iterdir()):
    if path.is_dir() or path.suffix not in SCHEMA_SUFFIXES:
      continue
    schemas.append({"collection": path.stem, "schema": load_schema_file(path)})
    logger.debug(f"Loaded schema {path.stem} from {path}")
  return schemas
