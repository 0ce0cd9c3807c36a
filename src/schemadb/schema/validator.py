import re
from dataclasses import dataclass, field
from typing import Any, Dict, List
from jsonschema import Draft7Validator
from schemadb.database.ids import id_to_external
from schemadb.schema.loader import with_reserved_fields
from schemadb.schema.nodes import ObjectNode, SchemaNode, parse_schema, walk


@dataclass
class Violation:
  """A single schema violation"""
  message: str
  property_path: str
  params: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ValidationResult:
  valid: bool
  errors: List[Violation] = field(default_factory=list)


def _unexpected_keys(error) -> List[str]:
  schema = error.schema
  declared = schema.get('properties') or {}
  patterns = list((schema.get('patternProperties') or {}).keys())
  return [
    key for key in error.instance
    if key not in declared and not any(re.search(p, key) for p in patterns)
  ]


def _violations(error):
  """One Violation per error; one per offending key for banned extra properties"""
  path = [str(p) for p in error.absolute_path]
  params = {"keyword": error.validator, "expected": error.validator_value}

  if error.validator == 'additionalProperties' and isinstance(error.instance, dict):
    for key in _unexpected_keys(error):
      yield Violation(
        message=f"Additional properties are not allowed ('{key}' was unexpected)",
        property_path='.'.join(path + [key]),
        params=params
      )
    return

  yield Violation(message=error.message, property_path='.'.join(path), params=params)


def _ban_unknown_properties(node, path):
  if isinstance(node, ObjectNode) and 'properties' in node.raw \
      and 'patternProperties' not in node.raw:
    node.raw.setdefault('additionalProperties', False)


class SchemaValidator:
  """Named JSON-Schema registry backed by jsonschema"""

  def __init__(self):
    self._validators: Dict[str, Draft7Validator] = {}
    self._trees: Dict[str, SchemaNode] = {}

  def add_schema(self, name: str, schema: Dict[str, Any], strict: bool = True) -> SchemaNode:
    """
    Register a schema under `name` and return its typed tree.

    With `strict`, every object node declaring `properties` rejects unknown
    properties unless it sets `additionalProperties` itself.
    Raises jsonschema.SchemaError if the definition is not a valid schema.
    """
    raw = with_reserved_fields(schema)
    tree = parse_schema(raw)
    if strict:
      walk(tree, _ban_unknown_properties)

    Draft7Validator.check_schema(raw)
    self._validators[name] = Draft7Validator(raw)
    self._trees[name] = tree
    return tree

  def tree(self, name: str) -> SchemaNode:
    return self._trees[name]

  def __contains__(self, name):
    return name in self._validators

  def validate(self, document: Dict[str, Any], schema_name: str) -> ValidationResult:
    """Collect every violation of `document` against a registered schema"""
    validator = self._validators[schema_name]
    instance = id_to_external(document)

    violations = [v for e in validator.iter_errors(instance) for v in _violations(e)]
    violations.sort(key=lambda v: v.property_path.split('.'))
    return ValidationResult(valid=not violations, errors=violations)
