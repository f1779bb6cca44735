"""Shared fixtures for the ipnetwork tests."""

import pytest

from ipnetwork import IPNetwork


@pytest.fixture
def net24():
    """The documentation example network, 192.168.168.0/24."""
    return IPNetwork('192.168.168.100/24')


@pytest.fixture
def net6():
    """An IPv6 /64 network."""
    return IPNetwork('2001:db8::/64')
