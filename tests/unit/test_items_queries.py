"""
Tests for ItemsReadApi (handlers/items/queries.py)

The gateway is mocked so each test can assert the exact DynamoDB request the
read API chooses for a given set of identifiers.
"""

import logging
import threading

import pytest
from unittest.mock import Mock

from item_api.config import ItemApiConfig
from item_api.exceptions import StoreUnavailable, ValidationError
from item_api.handlers.items.queries import MAX_UNPROCESSED_ROUNDS, ItemsReadApi
from item_api.utils import MAX_BATCH_GET_KEYS

TABLE = "test_items"


def raw(item_id, name="Glazed", store_id=None):
    item = {'ItemId': {'S': item_id}, 'Name': {'S': name}, 'Price': {'N': '1.50'}}
    if store_id:
        item['StoreId'] = {'S': store_id}
    return item


@pytest.fixture
def config():
    return ItemApiConfig(
        table_name=TABLE,
        region_name="us-east-1",
        aws_access_key_id="test",
        aws_secret_access_key="test"
    )


@pytest.fixture
def mock_gateway():
    """Mock TableGateway for testing."""
    gateway = Mock()
    gateway.table_name = TABLE
    gateway.batch_get_item.return_value = {'Responses': {TABLE: []}, 'UnprocessedKeys': {}}
    gateway.scan.return_value = {'Items': []}
    gateway.query.return_value = {'Items': []}
    gateway.get_item.return_value = None
    return gateway


@pytest.fixture
def read_api(config, mock_gateway):
    return ItemsReadApi(config, gateway=mock_gateway)


class TestResolveWithPartitionKey:
    """BatchGetItem path."""

    def test_issues_one_batch_fetch_for_composite_keys(self, read_api, mock_gateway):
        mock_gateway.batch_get_item.return_value = {
            'Responses': {TABLE: [raw('D1', store_id='store-1')]},
            'UnprocessedKeys': {}
        }

        records = read_api.resolve(['D1', 'D2'], partition_key='store-1')

        mock_gateway.batch_get_item.assert_called_once_with({
            TABLE: {'Keys': [
                {'StoreId': {'S': 'store-1'}, 'ItemId': {'S': 'D1'}},
                {'StoreId': {'S': 'store-1'}, 'ItemId': {'S': 'D2'}},
            ]}
        })
        mock_gateway.scan.assert_not_called()
        assert records == [{'ItemId': 'D1', 'Name': 'Glazed', 'Price': '1.50', 'StoreId': 'store-1'}]

    def test_missing_items_are_not_errors(self, read_api, mock_gateway):
        assert read_api.resolve(['nope'], partition_key='store-1') == []

    def test_duplicate_ids_share_one_key(self, read_api, mock_gateway):
        read_api.resolve(['D1', 'D2', 'D1'], partition_key='store-1')

        keys = mock_gateway.batch_get_item.call_args.args[0][TABLE]['Keys']
        assert [key['ItemId']['S'] for key in keys] == ['D1', 'D2']

    def test_records_follow_request_order(self, read_api, mock_gateway):
        mock_gateway.batch_get_item.return_value = {
            'Responses': {TABLE: [raw('D3'), raw('D1'), raw('D2')]},
            'UnprocessedKeys': {}
        }

        records = read_api.resolve(['D2', 'D3', 'D1'], partition_key='store-1')

        assert [record['ItemId'] for record in records] == ['D2', 'D3', 'D1']

    def test_large_requests_are_chunked(self, read_api, mock_gateway):
        ids = [f"D{i}" for i in range(MAX_BATCH_GET_KEYS + 1)]

        read_api.resolve(ids, partition_key='store-1')

        assert mock_gateway.batch_get_item.call_count == 2
        first, second = mock_gateway.batch_get_item.call_args_list
        assert len(first.args[0][TABLE]['Keys']) == MAX_BATCH_GET_KEYS
        assert len(second.args[0][TABLE]['Keys']) == 1

    def test_unprocessed_keys_are_requested_again(self, read_api, mock_gateway):
        leftover = {TABLE: {'Keys': [{'StoreId': {'S': 'store-1'}, 'ItemId': {'S': 'D2'}}]}}
        mock_gateway.batch_get_item.side_effect = [
            {'Responses': {TABLE: [raw('D1')]}, 'UnprocessedKeys': leftover},
            {'Responses': {TABLE: [raw('D2')]}, 'UnprocessedKeys': {}},
        ]

        records = read_api.resolve(['D1', 'D2'], partition_key='store-1')

        assert [record['ItemId'] for record in records] == ['D1', 'D2']
        assert mock_gateway.batch_get_item.call_args_list[1].args[0] == leftover

    def test_unprocessed_keys_are_bounded(self, read_api, mock_gateway):
        leftover = {TABLE: {'Keys': [{'StoreId': {'S': 'store-1'}, 'ItemId': {'S': 'D1'}}]}}
        mock_gateway.batch_get_item.return_value = {'Responses': {TABLE: []}, 'UnprocessedKeys': leftover}

        with pytest.raises(StoreUnavailable, match="unprocessed"):
            read_api.resolve(['D1'], partition_key='store-1')

        assert mock_gateway.batch_get_item.call_count == MAX_UNPROCESSED_ROUNDS

    def test_store_failure_propagates(self, read_api, mock_gateway):
        mock_gateway.batch_get_item.side_effect = StoreUnavailable("boom", operation="BatchGetItem")

        with pytest.raises(StoreUnavailable):
            read_api.resolve(['D1'], partition_key='store-1')


class TestResolveWithoutPartitionKey:
    """Filtered Scan path."""

    def test_scans_with_bound_in_filter(self, read_api, mock_gateway):
        mock_gateway.scan.return_value = {'Items': [raw('D1'), raw('D2', 'Chocolate')]}

        records = read_api.resolve(['D1', 'D2'])

        mock_gateway.scan.assert_called_once_with(
            FilterExpression='#k IN (:v0, :v1)',
            ExpressionAttributeNames={'#k': 'ItemId'},
            ExpressionAttributeValues={':v0': {'S': 'D1'}, ':v1': {'S': 'D2'}}
        )
        mock_gateway.batch_get_item.assert_not_called()
        assert [record['Name'] for record in records] == ['Glazed', 'Chocolate']

    def test_ids_never_appear_in_filter_text(self, read_api, mock_gateway):
        read_api.resolve(['D1) OR attribute_exists(Secret'])

        expression = mock_gateway.scan.call_args.kwargs['FilterExpression']
        assert 'Secret' not in expression

    def test_duplicate_ids_are_redundant_terms(self, read_api, mock_gateway):
        read_api.resolve(['D1', 'D1'])

        assert mock_gateway.scan.call_args.kwargs['FilterExpression'] == '#k IN (:v0, :v1)'

    def test_custom_key_attribute(self, config, mock_gateway):
        config.key_attribute = 'sku'
        read_api = ItemsReadApi(config, gateway=mock_gateway)

        read_api.resolve(['A-1'])

        assert mock_gateway.scan.call_args.kwargs['ExpressionAttributeNames'] == {'#k': 'sku'}

    def test_truncated_scan_is_flagged(self, read_api, mock_gateway, caplog):
        mock_gateway.scan.return_value = {'Items': [raw('D1')], 'LastEvaluatedKey': {'ItemId': {'S': 'D1'}}}

        with caplog.at_level(logging.WARNING):
            records = read_api.resolve(['D1', 'D9'])

        assert len(records) == 1
        assert "result page limit" in caplog.text

    def test_empty_ids_rejected_before_store_access(self, read_api, mock_gateway):
        with pytest.raises(ValidationError):
            read_api.resolve([])

        mock_gateway.scan.assert_not_called()
        mock_gateway.batch_get_item.assert_not_called()


class TestGetById:
    """Single item lookup."""

    def test_simple_key(self, read_api, mock_gateway):
        mock_gateway.get_item.return_value = raw('D1')

        record = read_api.get_by_id('D1')

        mock_gateway.get_item.assert_called_once_with({'ItemId': {'S': 'D1'}})
        assert record['Name'] == 'Glazed'

    def test_composite_key(self, read_api, mock_gateway):
        read_api.get_by_id('D1', partition_key='store-1')

        mock_gateway.get_item.assert_called_once_with({'StoreId': {'S': 'store-1'}, 'ItemId': {'S': 'D1'}})

    def test_missing(self, read_api):
        assert read_api.get_by_id('nope') is None


class TestListAll:
    """Whole-table and whole-partition listings."""

    def test_scan_without_partition_key(self, read_api, mock_gateway):
        mock_gateway.scan.return_value = {'Items': [raw('D1'), raw('D2')]}

        records = read_api.list_all()

        mock_gateway.scan.assert_called_once_with()
        assert len(records) == 2

    def test_query_with_partition_key(self, read_api, mock_gateway):
        mock_gateway.query.return_value = {'Items': [raw('D1', store_id='store-1')]}

        records = read_api.list_all(partition_key='store-1')

        mock_gateway.query.assert_called_once_with(
            KeyConditionExpression='#p = :p',
            ExpressionAttributeNames={'#p': 'StoreId'},
            ExpressionAttributeValues={':p': {'S': 'store-1'}}
        )
        mock_gateway.scan.assert_not_called()
        assert records[0]['StoreId'] == 'store-1'


class TestCancellation:
    """A set cancellation event stops DynamoDB calls at the next boundary."""

    @pytest.fixture
    def cancelled(self):
        event = threading.Event()
        event.set()
        return event

    def test_batch_path_sends_nothing(self, read_api, mock_gateway, cancelled):
        with pytest.raises(StoreUnavailable, match="cancelled"):
            read_api.resolve(['D1'], partition_key='store-1', cancelled=cancelled)

        mock_gateway.batch_get_item.assert_not_called()

    def test_scan_path_sends_nothing(self, read_api, mock_gateway, cancelled):
        with pytest.raises(StoreUnavailable, match="cancelled"):
            read_api.resolve(['D1'], cancelled=cancelled)

        mock_gateway.scan.assert_not_called()

    def test_unprocessed_rounds_stop_once_cancelled(self, read_api, mock_gateway):
        cancelled = threading.Event()
        leftover = {TABLE: {'Keys': [{'StoreId': {'S': 'store-1'}, 'ItemId': {'S': 'D1'}}]}}

        def abandon_after_first_round(request_items):
            cancelled.set()
            return {'Responses': {TABLE: []}, 'UnprocessedKeys': leftover}

        mock_gateway.batch_get_item.side_effect = abandon_after_first_round

        with pytest.raises(StoreUnavailable, match="cancelled"):
            read_api.resolve(['D1'], partition_key='store-1', cancelled=cancelled)

        assert mock_gateway.batch_get_item.call_count == 1

    def test_later_chunks_are_not_sent(self, read_api, mock_gateway):
        cancelled = threading.Event()

        def abandon(request_items):
            cancelled.set()
            return {'Responses': {TABLE: []}, 'UnprocessedKeys': {}}

        mock_gateway.batch_get_item.side_effect = abandon
        ids = [f"D{i}" for i in range(MAX_BATCH_GET_KEYS * 2)]

        with pytest.raises(StoreUnavailable):
            read_api.resolve(ids, partition_key='store-1', cancelled=cancelled)

        assert mock_gateway.batch_get_item.call_count == 1

    def test_get_by_id_and_list_all(self, read_api, mock_gateway, cancelled):
        with pytest.raises(StoreUnavailable):
            read_api.get_by_id('D1', cancelled=cancelled)
        with pytest.raises(StoreUnavailable):
            read_api.list_all(cancelled=cancelled)
        with pytest.raises(StoreUnavailable):
            read_api.list_all(partition_key='store-1', cancelled=cancelled)

        mock_gateway.get_item.assert_not_called()
        mock_gateway.scan.assert_not_called()
        mock_gateway.query.assert_not_called()

    def test_unset_event_changes_nothing(self, read_api, mock_gateway):
        read_api.resolve(['D1'], cancelled=threading.Event())

        mock_gateway.scan.assert_called_once()
