"""Tests for the DynamoDB session store.

Uses a stand-in table object; no AWS access.
"""

import pytest
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import ClientError, EndpointConnectionError, NoRegionError

from fastmath_analytics.store import dynamodb
from fastmath_analytics.store.base import StoreError
from fastmath_analytics.store.dynamodb import DynamoDbSessionStore


class FakeTable:
    """Returns canned scan responses and records the request parameters."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def scan(self, **params):
        self.calls.append(params)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class TestScanRequests:
    """Test scan parameters and cursor handling."""

    def test_filter_expression(self, window):
        """Kind and window filters are pushed into the scan."""
        table = FakeTable([{"Items": []}])
        list(DynamoDbSessionStore(table).scan(window))

        expected = Attr("SK").eq("SESSION") & Attr("startTime").between(window.start, window.end)
        assert table.calls[0]["FilterExpression"] == expected
        assert "ExclusiveStartKey" not in table.calls[0]
        assert "Limit" not in table.calls[0]

    def test_follows_last_evaluated_key(self, window, make_item):
        """LastEvaluatedKey becomes the next ExclusiveStartKey."""
        key = {"PK": "USER#u1", "SK": "SESSION"}
        table = FakeTable(
            [
                {"Items": [make_item("u1")], "LastEvaluatedKey": key},
                {"Items": [], "LastEvaluatedKey": {"PK": "USER#u2", "SK": "SESSION"}},
                {"Items": [make_item("u3")]},
            ]
        )
        items = list(DynamoDbSessionStore(table).scan(window))

        assert [item["PK"] for item in items] == ["USER#u1", "USER#u3"]
        assert len(table.calls) == 3
        assert table.calls[1]["ExclusiveStartKey"] == key

    def test_page_size_sets_limit(self, window):
        """page_size maps to the scan Limit."""
        table = FakeTable([{"Items": []}])
        list(DynamoDbSessionStore(table, page_size=25, kind="SESSION#TRACK1").scan(window))
        assert table.calls[0]["Limit"] == 25

    def test_missing_items_key(self, window):
        """A response without Items is an empty page."""
        table = FakeTable([{"Count": 0}])
        assert list(DynamoDbSessionStore(table).scan(window)) == []


class TestErrors:
    """Test error wrapping."""

    def test_client_error_wrapped(self, window):
        """Service errors surface as StoreError."""
        error = ClientError(
            {"Error": {"Code": "ResourceNotFoundException", "Message": "Table not found"}},
            "Scan",
        )
        table = FakeTable([error])
        with pytest.raises(StoreError, match="ResourceNotFoundException"):
            list(DynamoDbSessionStore(table).scan(window))

    def test_connection_error_on_later_page(self, window, make_item):
        """A failure after the first page still aborts the scan."""
        table = FakeTable(
            [
                {"Items": [make_item()], "LastEvaluatedKey": {"PK": "USER#user-1"}},
                EndpointConnectionError(endpoint_url="https://dynamodb.us-east-1.amazonaws.com"),
            ]
        )
        with pytest.raises(StoreError):
            list(DynamoDbSessionStore(table).scan(window))

    def test_from_table_name_without_region(self, monkeypatch):
        """Resource creation errors surface as StoreError."""

        def no_region(*args, **kwargs):
            raise NoRegionError()

        monkeypatch.setattr(dynamodb.boto3, "resource", no_region)
        with pytest.raises(StoreError, match="FastMath2"):
            DynamoDbSessionStore.from_table_name("FastMath2")

    def test_from_table_name_opens_table(self, monkeypatch):
        """from_table_name asks boto3 for the named table."""
        opened = []

        class FakeResource:
            def Table(self, name):
                opened.append(name)
                return FakeTable([])

        monkeypatch.setattr(dynamodb.boto3, "resource", lambda service: FakeResource())
        store = DynamoDbSessionStore.from_table_name("SessionsStaging", page_size=10)
        assert opened == ["SessionsStaging"]
        assert store.page_size == 10
