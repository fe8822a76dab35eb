"""
Command-line entry point: serve the item read API with uvicorn.

Usage:
    python -m item_api --table PDC-Inventory
    item-api --table PDC-Inventory --partition-key store-1 --port 8080
"""

import argparse
import logging
import sys
from typing import List, Optional

import uvicorn

from .api import create_app
from .config import ItemApiConfig
from .exceptions import ConfigurationError

logger = logging.getLogger("item_api")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Serve the item read API"
    )
    parser.add_argument(
        '--table',
        help='DynamoDB table name (default: $ITEMS_TABLE_NAME)'
    )
    parser.add_argument(
        '--region',
        help='AWS region (default: $AWS_REGION or us-west-2)'
    )
    parser.add_argument(
        '--partition-key',
        help='Partition key value; switches lookups from Scan to BatchGetItem'
    )
    parser.add_argument(
        '--endpoint-url',
        help='DynamoDB endpoint override, e.g. http://localhost:8000'
    )
    parser.add_argument(
        '--host',
        help='Interface to bind (default: $ITEMS_API_HOST or 0.0.0.0)'
    )
    parser.add_argument(
        '--port',
        type=int,
        help='Port to listen on (default: $ITEMS_API_PORT or 8080)'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ItemApiConfig:
    """Combine environment configuration with command-line overrides."""
    overrides = {
        'table_name': args.table,
        'region_name': args.region,
        'partition_key': args.partition_key,
        'endpoint_url': args.endpoint_url,
        'host': args.host,
        'port': args.port,
    }
    overrides = {name: value for name, value in overrides.items() if value is not None}
    if args.debug:
        overrides['enable_debug_logging'] = True

    try:
        return ItemApiConfig(**overrides)
    except ValueError as e:
        raise ConfigurationError(f"Invalid item API configuration: {e}", original_error=e) from e


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        config = build_config(args)
    except ConfigurationError as e:
        configure_logging()
        logger.error(str(e))
        return 2

    configure_logging(config.enable_debug_logging)

    mode = f"BatchGetItem (partition key {config.partition_key!r})" if config.uses_partition_key else "Scan"
    logger.info(f"Serving table {config.table_name} in {config.region_name} using {mode}")
    logger.info(f"Server active at http://{config.host}:{config.port}")

    uvicorn.run(create_app(config), host=config.host, port=config.port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
