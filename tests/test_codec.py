"""Tests for address conversion to and from integers, text and bytes."""

import ipaddress
import pickle

import pytest

from ipnetwork import (
    IPV4, IPV6, MAX_IPV4, AddressValueError, FamilyError, IPAddress,
    from_integer, to_integer, try_from_integer, try_to_integer,
    v4_from_string, v6_from_string,
)


class TestIPv4Text:
    """Dotted quad parsing and formatting."""

    def test_parse(self):
        assert v4_from_string('192.168.1.1') == 3232235777
        assert v4_from_string('0.0.0.0') == 0
        assert v4_from_string('255.255.255.255') == MAX_IPV4

    @pytest.mark.parametrize('txt', [
        '', '1.2.3', '1.2.3.4.5', '01.2.3.4', '256.0.0.1', 'a.b.c.d',
        '1.2.3.-4', '1.2..4', ' 1.2.3.4',
    ])
    def test_malformed(self, txt):
        with pytest.raises(AddressValueError):
            v4_from_string(txt)

    def test_format(self):
        assert str(IPAddress(3232235777)) == '192.168.1.1'
        assert str(IPAddress(0)) == '0.0.0.0'


class TestIPv6Text:
    """Colon hex parsing and compressed formatting."""

    @pytest.mark.parametrize('txt,expected', [
        ('::', 0),
        ('::1', 1),
        ('1::', 1 << 112),
        ('2001:db8::1', 0x20010db8000000000000000000000001),
        ('2001:DB8:0:0:0:0:0:1', 0x20010db8000000000000000000000001),
        ('::ffff:192.0.2.1', 0xffffc0000201),
        ('1:2:3:4:5:6:7:8', 0x00010002000300040005000600070008),
        ('1:2:3:4:5:6:1.2.3.4', 0x00010002000300040005000601020304),
    ])
    def test_parse(self, txt, expected):
        assert v6_from_string(txt) == expected

    @pytest.mark.parametrize('txt', [
        '1::2::3', '12345::', ':1', '1:', '1:2:3:4:5:6:7:8:9',
        '1:2:3:4:5:6:7', '1::2:3:4:5:6:7:8', 'g::', '1.2.3.4::',
        '::1.2.3', '::1.2.3.4:5',
    ])
    def test_malformed(self, txt):
        with pytest.raises(AddressValueError):
            v6_from_string(txt)

    @pytest.mark.parametrize('txt,expected', [
        ('0:0:0:0:0:0:0:0', '::'),
        ('2001:0db8:0:0:0:0:0:1', '2001:db8::1'),
        ('1:0:0:0:0:0:0:0', '1::'),
        ('1:0:0:2:0:0:0:3', '1:0:0:2::3'),
        ('1:0:0:2:0:0:3:4', '1::2:0:0:3:4'),
        ('1:0:2:3:4:5:6:7', '1:0:2:3:4:5:6:7'),
        ('ABCD:EF01::', 'abcd:ef01::'),
    ])
    def test_compressed_format(self, txt, expected):
        assert str(IPAddress(txt)) == expected

    def test_exploded(self):
        assert (IPAddress('2001:db8::1').exploded ==
                '2001:0db8:0000:0000:0000:0000:0000:0001')
        assert IPAddress('10.0.0.1').exploded == '10.0.0.1'


class TestIPAddress:
    """Construction, comparison and conversion of addresses."""

    def test_family_defaults_by_size(self):
        assert IPAddress(MAX_IPV4).family == IPV4
        assert IPAddress(MAX_IPV4 + 1).family == IPV6
        assert str(IPAddress(2**32)) == '::1:0:0'

    def test_explicit_family(self):
        assert str(IPAddress(1, IPV6)) == '::1'
        assert IPAddress(1, 6).version == 6

    def test_family_mismatch(self):
        with pytest.raises(AddressValueError):
            IPAddress('10.0.0.1', IPV6)

    def test_bad_family(self):
        with pytest.raises(FamilyError):
            IPAddress(1, 5)

    @pytest.mark.parametrize('value', [-1, 2**128, None, 1.5, b'\x00' * 5])
    def test_invalid(self, value):
        with pytest.raises(AddressValueError):
            IPAddress(value)

    def test_packed(self):
        assert IPAddress('10.0.0.1').packed == b'\x0a\x00\x00\x01'
        assert IPAddress(b'\x0a\x00\x00\x01') == IPAddress('10.0.0.1')
        assert len(IPAddress('::1').packed) == 16

    def test_ordering(self):
        addresses = [IPAddress('::'), IPAddress('10.0.0.2'),
                     IPAddress('10.0.0.1')]
        assert sorted(addresses) == [IPAddress('10.0.0.1'),
                                     IPAddress('10.0.0.2'), IPAddress('::')]
        assert IPAddress('255.255.255.255') < IPAddress('::')

    def test_equality_and_hash(self):
        assert IPAddress('10.0.0.1') == IPAddress(167772161)
        assert IPAddress('0.0.0.1') != IPAddress('::1')
        assert len({IPAddress('10.0.0.1'), IPAddress(167772161)}) == 1
        assert IPAddress('10.0.0.1') != '10.0.0.1'

    def test_repr_and_int(self):
        assert repr(IPAddress('10.0.0.1')) == "IPAddress('10.0.0.1')"
        assert int(IPAddress('10.0.0.1')) == 167772161

    def test_pickle(self):
        address = IPAddress('2001:db8::1')
        assert pickle.loads(pickle.dumps(address)) == address


class TestIntegerConversion:
    """to_integer and from_integer."""

    def test_to_integer(self):
        assert to_integer('10.0.0.1') == 167772161
        assert to_integer(b'\x0a\x00\x00\x01') == 167772161
        assert to_integer(IPAddress('::1')) == 1

    def test_to_integer_from_stdlib_address(self):
        assert to_integer(ipaddress.ip_address('10.0.0.1')) == 167772161
        assert to_integer(ipaddress.ip_address('::2')) == 2

    def test_to_integer_malformed(self):
        with pytest.raises(AddressValueError):
            to_integer('10.0.0')

    def test_from_integer(self):
        assert from_integer(167772161, IPV4) == IPAddress('10.0.0.1')
        assert from_integer(1, IPV6) == IPAddress('::1')

    def test_from_integer_truncates(self):
        assert from_integer(2**32 + 5, IPV4) == IPAddress('0.0.0.5')

    def test_from_integer_errors(self):
        with pytest.raises(FamilyError):
            from_integer(1, 5)
        with pytest.raises(AddressValueError):
            from_integer(-1, IPV4)

    @pytest.mark.parametrize('address', ['10.0.0', b'\x00' * 5, None, '::1::'])
    def test_try_to_integer_failure(self, address):
        with pytest.raises(AddressValueError):
            to_integer(address)
        assert try_to_integer(address) is None

    def test_try_to_integer_success(self):
        assert try_to_integer('10.0.0.1') == to_integer('10.0.0.1')
        assert try_to_integer('::') == 0

    @pytest.mark.parametrize('value,family,error', [
        (1, 5, FamilyError),
        (1, None, FamilyError),
        (-1, IPV4, AddressValueError),
    ])
    def test_try_from_integer_failure(self, value, family, error):
        with pytest.raises(error):
            from_integer(value, family)
        assert try_from_integer(value, family) is None

    def test_try_from_integer_success(self):
        assert try_from_integer(2**32 + 5, IPV4) == from_integer(5, IPV4)
        assert try_from_integer(1, IPV6) == IPAddress('::1')
