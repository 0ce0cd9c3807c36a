import copy
import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_CONFIG_PATH = Path('config') / 'config.yaml'

DEFAULTS: Dict[str, Any] = {
  'database': {
    'mongodb_uri': 'mongodb://localhost:27017/schemadb',
    'database_name': 'schemadb',
    'pool_size': 20,
    'connect_timeout_ms': 3000,
    'socket_timeout_ms': 3000,
    'server_selection_timeout_ms': 3000,
    'schema_dir': None,
    'schemas': [],
    'strict': True,
  },
  'logging': {
    'level': 'INFO',
    'log_file': 'logs/schemadb.log',
  },
}


def merge(base: Dict[str, Any], override: Optional[Dict[str, Any]]) -> Dict[str, Any]:
  """Deep-merge override onto a copy of base"""
  merged = copy.deepcopy(base)
  for key, value in (override or {}).items():
    if isinstance(value, dict) and isinstance(merged.get(key), dict):
      merged[key] = merge(merged[key], value)
    else:
      merged[key] = copy.deepcopy(value)
  return merged


def database_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
  """Database section with defaults filled in"""
  return merge(DEFAULTS['database'], overrides)


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
  """
  Load the YAML config file over the defaults.

  The file is taken from `path`, then SCHEMADB_CONFIG, then config/config.yaml.
  A missing default file just yields the defaults; MONGODB_URI, when set,
  replaces the configured connection string.
  """
  explicit = path or os.environ.get('SCHEMADB_CONFIG')
  config_path = Path(explicit) if explicit else DEFAULT_CONFIG_PATH

  loaded = {}
  if config_path.exists():
    with open(config_path, 'r', encoding='utf-8') as f:
      loaded = yaml.safe_load(f) or {}
  elif explicit:
    raise FileNotFoundError(f"Config file not found: {config_path}")

  config = merge(DEFAULTS, loaded)

  uri = os.environ.get('MONGODB_URI')
  if uri:
    config['database']['mongodb_uri'] = uri
  return config
