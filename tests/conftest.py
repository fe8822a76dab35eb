"""
Test configuration and fixtures for the item read API.

Provides configurations, moto-backed DynamoDB tables seeded with items in
both key layouts, and read API instances bound to them.
"""

import boto3
import pytest
from moto import mock_aws

from item_api import ItemApiConfig, ItemsReadApi

REGION = "us-east-1"
SIMPLE_TABLE = "test_items"
COMPOSITE_TABLE = "test_store_items"


def tagged_item(item_id: str, name: str, price: str, **extra):
    """Item in DynamoDB's low-level attribute format."""
    item = {
        'ItemId': {'S': item_id},
        'Name': {'S': name},
        'Price': {'N': price},
    }
    item.update(extra)
    return item


SAMPLE_ITEMS = [
    tagged_item(
        'D1', 'Glazed', '1.50',
        Vegan={'BOOL': False},
        Toppings={'SS': ['sugar']},
        Nutrition={'M': {'calories': {'N': '260'}, 'allergens': {'L': [{'S': 'wheat'}, {'S': 'milk'}]}}},
    ),
    tagged_item('D2', 'Chocolate', '1.75', Vegan={'BOOL': True}),
    tagged_item('D3', 'Boston Cream', '2.10', Sizes={'NS': ['6', '12']}),
]


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """Keep tests away from real AWS credentials and local .env settings."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)
    for name in (
        "AWS_REGION", "ITEMS_TABLE_NAME", "ITEMS_PARTITION_KEY", "ITEMS_KEY_ATTRIBUTE",
        "ITEMS_PARTITION_KEY_ATTRIBUTE", "DYNAMODB_ENDPOINT_URL",
        "ITEMS_REQUEST_TIMEOUT_SECONDS", "ITEMS_API_HOST", "ITEMS_API_PORT", "ITEMS_DEBUG_LOGGING",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mock_config():
    """Configuration for a simple-key table (Scan path)."""
    return ItemApiConfig(
        table_name=SIMPLE_TABLE,
        aws_access_key_id="test_key",
        aws_secret_access_key="test_secret",
        region_name=REGION,
        endpoint_url=None,
    )


@pytest.fixture
def composite_config():
    """Configuration for a composite-key table (BatchGetItem path)."""
    return ItemApiConfig(
        table_name=COMPOSITE_TABLE,
        partition_key="store-1",
        aws_access_key_id="test_key",
        aws_secret_access_key="test_secret",
        region_name=REGION,
        endpoint_url=None,
    )


@pytest.fixture
def mock_dynamodb_client():
    """Mocked low-level DynamoDB client."""
    with mock_aws():
        yield boto3.client('dynamodb', region_name=REGION)


@pytest.fixture
def items_table(mock_dynamodb_client):
    """Simple-key items table (ItemId HASH) seeded with SAMPLE_ITEMS."""
    mock_dynamodb_client.create_table(
        TableName=SIMPLE_TABLE,
        KeySchema=[{'AttributeName': 'ItemId', 'KeyType': 'HASH'}],
        AttributeDefinitions=[{'AttributeName': 'ItemId', 'AttributeType': 'S'}],
        BillingMode='PAY_PER_REQUEST',
    )
    for item in SAMPLE_ITEMS:
        mock_dynamodb_client.put_item(TableName=SIMPLE_TABLE, Item=item)
    return SIMPLE_TABLE


@pytest.fixture
def composite_items_table(mock_dynamodb_client):
    """Composite-key table (StoreId HASH, ItemId RANGE).

    store-1 holds D1 and D2 only; store-2 holds D3 so partition scoping is visible.
    """
    mock_dynamodb_client.create_table(
        TableName=COMPOSITE_TABLE,
        KeySchema=[
            {'AttributeName': 'StoreId', 'KeyType': 'HASH'},
            {'AttributeName': 'ItemId', 'KeyType': 'RANGE'},
        ],
        AttributeDefinitions=[
            {'AttributeName': 'StoreId', 'AttributeType': 'S'},
            {'AttributeName': 'ItemId', 'AttributeType': 'S'},
        ],
        BillingMode='PAY_PER_REQUEST',
    )
    placements = {'D1': 'store-1', 'D2': 'store-1', 'D3': 'store-2'}
    for item in SAMPLE_ITEMS:
        store_id = placements[item['ItemId']['S']]
        mock_dynamodb_client.put_item(
            TableName=COMPOSITE_TABLE,
            Item=dict(item, StoreId={'S': store_id}),
        )
    return COMPOSITE_TABLE


@pytest.fixture
def items_read_api(mock_config, items_table):
    """Read API over the simple-key table."""
    return ItemsReadApi(mock_config)


@pytest.fixture
def composite_read_api(composite_config, composite_items_table):
    """Read API over the composite-key table."""
    return ItemsReadApi(composite_config)
