"""Tests for splitting networks into subnets."""

import pytest

from ipnetwork import IPNetwork, InvalidSplitError, NetworkRange


class TestSubnet:

    def test_split_in_two(self):
        subnets = IPNetwork('10.0.0.0/8').subnet(9)
        assert list(subnets) == [IPNetwork('10.0.0.0/9'),
                                 IPNetwork('10.128.0.0/9')]

    def test_same_prefixlen_is_itself(self, net24):
        assert list(net24.subnet(24)) == [net24]

    @pytest.mark.parametrize('prefixlen', [23, 33, -1])
    def test_invalid_split(self, net24, prefixlen):
        with pytest.raises(InvalidSplitError):
            net24.subnet(prefixlen)
        assert net24.try_subnet(prefixlen) is None

    def test_prefixlen_must_be_an_integer(self, net24):
        with pytest.raises(TypeError):
            net24.subnet('25')

    @pytest.mark.parametrize('k', range(5))
    def test_children_tile_the_parent(self, k):
        """2**k children are disjoint, contiguous and cover the parent."""
        parent = IPNetwork('192.168.0.0/22')
        children = list(parent.subnet(parent.prefixlen + k))
        assert len(children) == 2**k
        assert children[0].network_address == parent.network_address
        assert children[-1].last_address == parent.last_address
        for left, right in zip(children, children[1:]):
            assert int(left.last_address) + 1 == int(right.network_address)
            assert not left.overlaps(right)
        assert sum(child.num_addresses for child in children) == \
            parent.num_addresses


class TestNetworkRange:
    """The lazy sequence returned by subnet()."""

    @pytest.fixture
    def subnets(self):
        return IPNetwork('10.0.0.0/8').subnet(10)

    def test_len_and_count(self, subnets):
        assert len(subnets) == 4
        assert subnets.count == 4
        assert subnets.prefixlen == 10
        assert subnets.network == IPNetwork('10.0.0.0/8')

    def test_indexing(self, subnets):
        assert subnets[0] == IPNetwork('10.0.0.0/10')
        assert subnets[3] == IPNetwork('10.192.0.0/10')
        assert subnets[-1] == IPNetwork('10.192.0.0/10')
        assert subnets[-4] == IPNetwork('10.0.0.0/10')
        assert subnets.first == subnets[0]
        assert subnets.last == subnets[-1]

    @pytest.mark.parametrize('index', [4, -5, 100])
    def test_index_out_of_range(self, subnets, index):
        with pytest.raises(IndexError):
            subnets[index]

    def test_index_type(self, subnets):
        with pytest.raises(TypeError):
            subnets['1']
        with pytest.raises(TypeError):
            subnets[0:2]

    def test_iteration_restarts(self, subnets):
        assert list(subnets) == list(subnets)
        assert len(list(subnets)) == 4

    def test_membership(self, subnets):
        assert IPNetwork('10.64.0.0/10') in subnets
        assert IPNetwork('10.0.0.0/11') not in subnets
        assert IPNetwork('11.0.0.0/10') not in subnets
        assert '10.0.0.0/10' not in subnets

    def test_repr(self, subnets):
        assert repr(subnets) == "NetworkRange(IPNetwork('10.0.0.0/8'), 10)"

    def test_huge_range_is_lazy(self):
        subnets = IPNetwork('2001:db8::/32').subnet(128)
        assert isinstance(subnets, NetworkRange)
        assert subnets.count == 2**96
        assert str(subnets[0]) == '2001:db8::/128'
        assert str(subnets[2**95]) == '2001:db8:8000::/128'
        assert (str(subnets[-1]) ==
                '2001:db8:ffff:ffff:ffff:ffff:ffff:ffff/128')
        assert str(next(iter(subnets))) == '2001:db8::/128'
        with pytest.raises(OverflowError):
            len(subnets)
