from dataclasses import dataclass, field
from typing import Any, Dict, List
from schemadb.schema.nodes import SchemaNode, walk


@dataclass
class IndexRequest:
  """One index to create: a dot-path and the options passed to the store"""
  dot_path: str
  options: Dict[str, Any] = field(default_factory=dict)


def plan_indexes(node: SchemaNode, prefix: str = '') -> List[IndexRequest]:
  """
  Collect one IndexRequest per node carrying an index directive.

  The walk stops below an indexed node. The node at `prefix` itself is never
  indexed, only its descendants.
  """
  requests = []

  def visit(current, path):
    if path != prefix and current.index is not None:
      requests.append(IndexRequest(dot_path=path, options=dict(current.index)))
      return False
    return True

  walk(node, visit, prefix)
  return requests
