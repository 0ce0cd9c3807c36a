"""
Database Setup CLI

Inspect the schemas and index plan, or connect to MongoDB and create indices
"""

import asyncio
import click
from dotenv import load_dotenv
from schemadb.database.registry import Registry, collect_schemas
from schemadb.models.document import IS_DELETED
from schemadb.schema.indexes import plan_indexes
from schemadb.schema.validator import SchemaValidator
from schemadb.utils.config import load_config
from schemadb.utils.logger import configure_logging


def _banner(title):
  print("="*80)
  print(title)
  print("="*80)


@click.group()
@click.option('--config', 'config_path', default=None, help='Config file path')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.pass_context
def main(ctx, config_path, debug):
  """Schema-driven MongoDB collections"""
  load_dotenv('.env')
  config = load_config(config_path)
  configure_logging(config, debug=debug)
  ctx.obj = config


@main.command()
@click.pass_obj
def plan(config):
  """Show the planned indices for every schema, without connecting"""
  db_config = config['database']
  _banner("INDEX PLAN")

  validator = SchemaValidator()
  for schema_info in collect_schemas(db_config):
    name = schema_info['collection']
    tree = validator.add_schema(name, schema_info['schema'], strict=db_config['strict'])
    requests = plan_indexes(tree)

    print(f"\n{name}")
    if not requests:
      print("  (no indices)")
    for request in requests:
      print(f"  {request.dot_path} {request.options or ''}".rstrip())


async def _setup(db_config):
  registry = Registry().initialize(db_config)
  db = await registry.get_handle()
  try:
    counts = {}
    for name in db:
      counts[name] = await db[name].store.count({IS_DELETED: False})
    return db.indexes, counts
  finally:
    await registry.reset()


@main.command()
@click.pass_obj
def setup(config):
  """Connect, create indices and report collection sizes"""
  _banner("DATABASE SETUP")
  print("\nConnecting to MongoDB...")

  try:
    indexes, counts = asyncio.run(_setup(config['database']))
  except Exception as e:
    print(f"\n✗ Error: {e}")
    print("\nTroubleshooting:")
    print("  1. Ensure MongoDB is running (mongod)")
    print("  2. Check the connection string in the config file or MONGODB_URI")
    print("  3. Verify network connectivity")
    raise SystemExit(1)

  print("\n✓ Database connection successful!")
  print("\nCollections:")
  for name, requests in indexes.items():
    print(f"  {name}: {counts.get(name, 0)} documents, {len(requests)} indices")
  print("\n✓ Database is ready for use!")


if __name__ == "__main__":
  main()
