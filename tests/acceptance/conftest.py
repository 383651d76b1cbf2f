"""
Acceptance test fixtures — real boto3 clients answered by botocore's Stubber.

Every request is checked against the service model before the queued
response is returned, so parameter names and shapes are exercised exactly
as they would be against AWS, without any network traffic.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any
from unittest.mock import MagicMock

import boto3
import pytest
from botocore.stub import Stubber


def _client(service: str) -> Any:
    return boto3.client(
        service,
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


@pytest.fixture()
def acm_client() -> Any:
    return _client("acm")


@pytest.fixture()
def route53_client() -> Any:
    return _client("route53")


@pytest.fixture()
def acm_stub(acm_client: Any) -> Iterator[Stubber]:
    with Stubber(acm_client) as stubber:
        yield stubber
        stubber.assert_no_pending_responses()


@pytest.fixture()
def route53_stub(route53_client: Any) -> Iterator[Stubber]:
    with Stubber(route53_client) as stubber:
        yield stubber
        stubber.assert_no_pending_responses()


@pytest.fixture()
def session(acm_client: Any, route53_client: Any) -> MagicMock:
    """A stand-in for the host's boto3 session handing out the stubbed clients."""
    clients = {"acm": acm_client, "route53": route53_client}
    mock = MagicMock()
    mock.client.side_effect = lambda service, **kwargs: clients[service]
    return mock
