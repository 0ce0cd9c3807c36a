"""
Typed view of a JSON-Schema definition.

A schema is parsed once into a tree of Leaf, ObjectNode and ArrayNode values.
Each node keeps a reference to the raw dict it was built from, so visitors
can read (or, during registration, annotate) the underlying schema. `walk` is
the single traversal used by both validation registration and index planning.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Union


@dataclass
class Leaf:
  """A scalar property: its constraints plus an optional index directive"""
  raw: Dict[str, Any]
  index: Optional[Dict[str, Any]] = None


@dataclass
class ObjectNode:
  raw: Dict[str, Any]
  children: Dict[str, 'SchemaNode'] = field(default_factory=dict)
  index: Optional[Dict[str, Any]] = None


@dataclass
class ArrayNode:
  raw: Dict[str, Any]
  items: Optional['SchemaNode'] = None
  index: Optional[Dict[str, Any]] = None


SchemaNode = Union[Leaf, ObjectNode, ArrayNode]

# Returns False to stop descending below the visited node
Visitor = Callable[[SchemaNode, str], Optional[bool]]


def _types(raw: Dict[str, Any]) -> set:
  declared = raw.get('type')
  if isinstance(declared, list):
    return set(declared)
  return {declared} if declared else set()


def parse_schema(raw: Dict[str, Any]) -> SchemaNode:
  """Build the typed tree for a JSON-Schema dict"""
  index = raw.get('index') if isinstance(raw.get('index'), dict) else None
  types = _types(raw)

  if isinstance(raw.get('properties'), dict) or 'object' in types:
    children = {
      name: parse_schema(child)
      for name, child in (raw.get('properties') or {}).items()
      if isinstance(child, dict)
    }
    return ObjectNode(raw=raw, children=children, index=index)

  if 'array' in types or 'items' in raw:
    items = raw.get('items')
    return ArrayNode(
      raw=raw,
      items=parse_schema(items) if isinstance(items, dict) else None,
      index=index
    )

  return Leaf(raw=raw, index=index)


def join_path(prefix: str, name: str) -> str:
  return f"{prefix}.{name}" if prefix else name


def walk(node: SchemaNode, visit: Visitor, path: str = '') -> None:
  """Depth-first traversal calling visit(node, dot_path) on every node"""
  if visit(node, path) is False:
    return
  if isinstance(node, ObjectNode):
    for name, child in node.children.items():
      walk(child, visit, join_path(path, name))
  elif isinstance(node, ArrayNode) and node.items is not None:
    # Array items share the array's path, as in a multikey index
    walk(node.items, visit, path)
