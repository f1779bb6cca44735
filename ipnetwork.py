"""A lightweight IPv4/IPv6 network prefix library in Python.

This module is used to parse, inspect, split and merge IPv4 and IPv6
networks expressed in CIDR notation.  Networks are immutable values:
a base address, a prefix length and an address family.

    >>> net = parse('192.168.168.100/24')
    >>> str(net), str(net.broadcast_address), net.usable
    ('192.168.168.0/24', '192.168.168.255', 254)
    >>> [str(sub) for sub in parse('10.0.0.0/8').subnet(9)]
    ['10.0.0.0/9', '10.128.0.0/9']
"""

import enum
import logging
import re
import threading

logger = logging.getLogger(__name__)

# =============================================================================
# Module specific constants
# =============================================================================

__version__ = '0.1.0'

class AddressFamily(enum.IntEnum):
    """The family of an IP address, valued by its IP version number."""

    IPV4 = 4
    IPV6 = 6

# IP version numbers
IPV4 = AddressFamily.IPV4
IPV6 = AddressFamily.IPV6

# IP address length, in bits
IPV4LENGTH = 32
IPV6LENGTH = 128

# Max IP address integer
MAX_IPV4 = 2**IPV4LENGTH - 1
MAX_IPV6 = 2**IPV6LENGTH - 1

_ADDRESS_LEN = {IPV4: IPV4LENGTH, IPV6: IPV6LENGTH}
_MAX_ADDRESS = {IPV4: MAX_IPV4, IPV6: MAX_IPV6}
_PACKED_FAMILY = {4: IPV4, 16: IPV6}

# =============================================================================
# Module specific exceptions
# =============================================================================

class IPNetworkError(ValueError):
    """Base class for the errors raised by this module."""

class EmptyInputError(IPNetworkError):
    """A required input string or value was empty or missing."""

class AddressValueError(IPNetworkError):
    """A Value Error related to the address."""

class NetmaskValueError(IPNetworkError):
    """A Value Error related to the netmask or prefix."""

class InvalidNetmaskError(NetmaskValueError):
    """The netmask bits are not a left-aligned run of ones."""

class PrefixLengthError(NetmaskValueError):
    """The prefix length is outside the range of the address family."""

class UnguessableLengthError(IPNetworkError):
    """No prefix length could be guessed for a bare address."""

class FamilyError(IPNetworkError):
    """The address family is not IPv4 or IPv6."""

class MixedFamilyError(FamilyError):
    """The operands of an operation belong to different families."""

class NotAdjacentError(IPNetworkError):
    """Two networks cannot be merged: they do not touch, or differ in size."""

class MisalignedBoundaryError(IPNetworkError):
    """Two adjacent networks do not start on their supernet boundary."""

class InvalidSplitError(IPNetworkError):
    """A network cannot be split at the requested prefix length."""

# =============================================================================
# Utility functions
# =============================================================================

_HEX_DIGITS = frozenset('0123456789ABCDEFabcdef')

def ishexdigit(txt):
    """Returns True if all characters are hex digits"""
    for digit in txt:
        if digit not in _HEX_DIGITS:
            return False
    # an empty string is not hex
    return txt != ''

def _isdecimal(txt):
    """Returns True if txt is a non-empty string of ASCII digits."""
    return txt.isascii() and txt.isdigit()

def _try(fn, *args, **kwargs):
    """Call fn, returning None instead of raising an IPNetworkError."""
    try:
        return fn(*args, **kwargs)
    except IPNetworkError as exc:
        logger.debug(f"{fn.__name__} failed: {exc}")
        return None

def to_family(family):
    """Validate an address family.

    Args:
        family: An AddressFamily, or the IP version number 4 or 6.

    Returns:
        The AddressFamily member.

    Raises:
        FamilyError: if family is neither IPv4 nor IPv6.
    """
    try:
        return AddressFamily(family)
    except ValueError:
        raise FamilyError('invalid address family: %r' % (family,))

def address_length(family):
    """The address length of a family, in bits."""
    return _ADDRESS_LEN[to_family(family)]

def max_address(family):
    """The largest address integer of a family."""
    return _MAX_ADDRESS[to_family(family)]

def _count_righthand_zero_bits(number, bits):
    """Count the number of zero bits on the right hand side.

    Args:
        number: An integer.
        bits: Maximum number of bits to count.

    Returns:
        The number of zero bits on the right hand side of the number.
    """
    if number == 0:
        return bits
    return min(bits, (~number & (number - 1)).bit_length())

# =============================================================================
# Address codec
# =============================================================================

def v4_from_string(txt):
    """Convert an IPv4 address string to an integer.

    The string format is "a.b.c.d", where a, b, c and d are decimal
    integers in the range 0 to 255, inclusive.  Spaces, or leading
    zeros, are not permitted.

    Raises:
        AddressValueError if the string is not a valid IPv4 address.
    """
    octets = txt.split('.')
    if len(octets) != 4:
        raise AddressValueError('IPv4 string is not n.n.n.n: %r' % (txt,))
    ip = 0
    for octet in octets:
        if not _isdecimal(octet):
            raise AddressValueError('non-decimal octet in %r' % (txt,))
        if octet[0] == '0' and len(octet) != 1:
            raise AddressValueError('leading zero not allowed: %r' % (txt,))
        val = int(octet, 10)
        if val > 255:
            raise AddressValueError('octet too big: %r' % (txt,))
        ip = (ip << 8) + val
    return ip

def v6_from_string(txt):
    """Convert an IPv6 address string to an integer.

    The string format is "n1:n2:n3:n4:n5:n6:n7:n8", where n1 to n8 are
    hexadecimal integers of at most 4 digits.  A single run of zero
    words may be written as '::', and the last two words may be written
    as a dotted IPv4 address.  Scope ids are not supported.

    Raises:
        AddressValueError if the string is not a valid IPv6 address.
    """
    halves = txt.split('::')
    if len(halves) > 2:
        raise AddressValueError('multiple "::" ranges: %r' % (txt,))
    # words before (head) and after (tail) the '::'
    groups = ([], [])
    for index, half in enumerate(halves):
        if not half:
            continue
        parts = half.split(':')
        for pos, part in enumerate(parts):
            if ishexdigit(part) and len(part) <= 4:
                groups[index].append(int(part, 16))
                continue
            # a dotted IPv4 address may only end the address
            if (index + 1 == len(halves) and pos + 1 == len(parts) and
                    '.' in part):
                try:
                    v4 = v4_from_string(part)
                except AddressValueError:
                    raise AddressValueError('invalid embedded IPv4: %r' %
                                            (txt,))
                groups[index].extend((v4 >> 16, v4 & 0xffff))
                continue
            raise AddressValueError('invalid word %r in %r' % (part, txt))
    head, tail = groups
    if len(halves) == 2:
        missing = 8 - len(head) - len(tail)
        if missing < 1:
            raise AddressValueError('too many words: %r' % (txt,))
        head.extend([0] * missing)
        head.extend(tail)
    if len(head) != 8:
        raise AddressValueError('too many/few words: %r' % (txt,))
    ip = 0
    for word in head:
        ip = (ip << 16) + word
    return ip

def v4_to_string(ip):
    """Convert an integer to an IPv4 address string."""
    return '%s.%s.%s.%s' % (ip >> 24 & 0xff, ip >> 16 & 0xff,
                            ip >>  8 & 0xff, ip >>  0 & 0xff)

def v6_to_string(ip):
    """Convert an integer to a compressed IPv6 address string.

    The first of the longest runs of two or more zero words is
    replaced by '::', as recommended by RFC 5952.
    """
    words = [ip >> shift & 0xffff for shift in range(112, -16, -16)]
    best_start, best_len = 0, 0
    start = None
    # a trailing non-zero sentinel closes a run of zeros at the end
    for index, word in enumerate(words + [1]):
        if word == 0:
            if start is None:
                start = index
        elif start is not None:
            if index - start > best_len:
                best_start, best_len = start, index - start
            start = None
    if best_len < 2:
        return ':'.join('%x' % word for word in words)
    head = ':'.join('%x' % word for word in words[:best_start])
    tail = ':'.join('%x' % word for word in words[best_start + best_len:])
    return '::'.join((head, tail))

def v6_to_string_exploded(ip):
    """Convert an integer to a fully expanded IPv6 address string."""
    return ':'.join('%04x' % (ip >> shift & 0xffff)
                    for shift in range(112, -16, -16))

_TO_STRING = {IPV4: v4_to_string, IPV6: v6_to_string}

def to_integer(address):
    """Convert an address to an unsigned integer.

    Args:
        address: An IPAddress, an address string, 4 or 16 packed bytes
            in network order, or an object with a 'packed' attribute,
            such as an ipaddress.IPv4Address.

    Returns:
        The address as a non-negative integer.

    Raises:
        AddressValueError: if the address cannot be converted.
    """
    return IPAddress(address)._ip

def try_to_integer(address):
    """Like to_integer, but returns None if address is not valid."""
    return _try(to_integer, address)

def from_integer(value, family):
    """Convert an integer to an IPAddress of a given family.

    Bits above the width of the family are discarded.

    Raises:
        FamilyError: if family is neither IPv4 nor IPv6.
        AddressValueError: if value is negative.
    """
    family = to_family(family)
    if value < 0:
        raise AddressValueError('negative address integer: %r' % (value,))
    return IPAddress(value & _MAX_ADDRESS[family], family)

def try_from_integer(value, family):
    """Like from_integer, but returns None on failure."""
    return _try(from_integer, value, family)

# =============================================================================
# Prefix arithmetic
# =============================================================================

def to_netmask_int(prefixlen, family):
    """Convert a prefix length to a netmask integer.

    Args:
        prefixlen: The prefix length, 0 to 32 for IPv4, 0 to 128 for IPv6.
        family: The address family.

    Returns:
        The netmask, as an integer.

    Raises:
        FamilyError: if family is neither IPv4 nor IPv6.
        PrefixLengthError: if prefixlen is out of range for the family.
    """
    family = to_family(family)
    bits = _ADDRESS_LEN[family]
    if not isinstance(prefixlen, int):
        raise TypeError('prefix length must be an integer: %r' % (prefixlen,))
    if not 0 <= prefixlen <= bits:
        raise PrefixLengthError('prefix length %r is invalid for IPv%d' %
                                (prefixlen, family))
    return _MAX_ADDRESS[family] - 2**(bits - prefixlen) + 1

def try_to_netmask_int(prefixlen, family):
    """Like to_netmask_int, but returns None if prefixlen is not valid."""
    return _try(to_netmask_int, prefixlen, family)

def to_netmask(prefixlen, family):
    """Convert a prefix length to a netmask, as an IPAddress."""
    return IPAddress(to_netmask_int(prefixlen, family), family)

def try_to_netmask(prefixlen, family):
    """Like to_netmask, but returns None if prefixlen is not valid."""
    return _try(to_netmask, prefixlen, family)

def hostmask_int(prefixlen, family):
    """The host bits of a prefix length, all set, as an integer."""
    return _MAX_ADDRESS[to_family(family)] - to_netmask_int(prefixlen, family)

def is_valid_netmask(netmask, family):
    """Test if an integer is a valid netmask for a family.

    A valid netmask is a run of one bits, aligned to the left of the
    address, followed only by zero bits.  The inverted mask must then
    be one less than a power of two.
    """
    mask = max_address(family)
    if not 0 <= netmask <= mask:
        return False
    neg = ~netmask & mask
    return ((neg + 1) & neg) == 0

def bits_set(number):
    """Count the one bits of a non-negative integer."""
    return bin(number).count('1')

def to_cidr(netmask, family=None):
    """Convert a netmask to a prefix length.

    Args:
        netmask: The netmask, as an IPAddress, an address string, or an
            integer.
        family: The address family.  Required if netmask is an integer
            larger than MAX_IPV4; must match netmask otherwise.

    Returns:
        The prefix length, as an integer.

    Raises:
        AddressValueError: if netmask is not an address.
        InvalidNetmaskError: if netmask is not a valid netmask.
    """
    mask = IPAddress(netmask, family)
    if not is_valid_netmask(mask._ip, mask._family):
        raise InvalidNetmaskError('%s is not a valid netmask' % (mask,))
    return bits_set(mask._ip)

def try_to_cidr(netmask, family=None):
    """Like to_cidr, but returns None if netmask is not valid."""
    return _try(to_cidr, netmask, family)

def broadcast_int(network, netmask, family):
    """The highest address of a network, as an integer.

    Args:
        network: The network base address integer.
        netmask: The netmask integer.
        family: The address family.
    """
    return network + (~netmask & max_address(family))

def total_count(prefixlen, family):
    """The number of addresses in a network of a given prefix length."""
    return 2**(address_length(family) - prefixlen)

def usable_count(prefixlen, family):
    """The number of host addresses in a network.

    IPv4 networks reserve the network and broadcast addresses, and
    have no usable addresses beyond a /30.  All IPv6 addresses are
    usable.
    """
    if to_family(family) == IPV6:
        return total_count(prefixlen, family)
    if prefixlen > 30:
        return 0
    return total_count(prefixlen, family) - 2

# =============================================================================
# IP Address class
# =============================================================================

class IPAddress:
    """An IPv4 or IPv6 address."""

    __slots__ = ('_ip', '_family')

    @staticmethod
    def from_string(txt):
        """Convert an address string to an integer and address family.

        Returns:
            A tuple of the address integer and its AddressFamily.

        Raises:
            AddressValueError if the string is not a valid address.
        """
        if ':' in txt:
            return v6_from_string(txt), IPV6
        return v4_from_string(txt), IPV4

    def __init__(self, address, family=None):
        """Instantiate a new IP address.

        Args:
            address: The address as a string, an integer, packed bytes,
                another IPAddress, or any object with a 'packed'
                attribute.  Integers up to MAX_IPV4 are taken as IPv4
                addresses unless family says otherwise.
            family: The expected address family, or None.

        Raises:
            AddressValueError: if address is not valid, or is not of
                the expected family.
            FamilyError: if family is neither IPv4 nor IPv6.
        """
        if family is not None:
            family = to_family(family)
        if isinstance(address, IPAddress):
            ip, parsed = address._ip, address._family
        elif isinstance(address, int):
            ip = address
            if family is not None:
                parsed = family
            else:
                parsed = IPV4 if 0 <= address <= MAX_IPV4 else IPV6
        elif isinstance(address, str):
            ip, parsed = self.from_string(address)
        else:
            packed = address
            if not isinstance(packed, bytes):
                packed = getattr(address, 'packed', None)
                if not isinstance(packed, bytes):
                    raise AddressValueError('invalid address type: %r' %
                                            (type(address),))
            parsed = _PACKED_FAMILY.get(len(packed))
            if parsed is None:
                raise AddressValueError('packed address is not 4 or 16 '
                                        'bytes: %r' % (packed,))
            ip = int.from_bytes(packed, 'big')
        if family is not None and parsed != family:
            raise AddressValueError('%r is not an IPv%d address' %
                                    (address, family))
        if not 0 <= ip <= _MAX_ADDRESS[parsed]:
            raise AddressValueError('invalid address: %r' % (address,))
        self._ip = ip
        self._family = parsed

    def __int__(self):
        """The IP address as an integer."""
        return self._ip

    def __str__(self):
        return _TO_STRING[self._family](self._ip)

    def __repr__(self):
        return "%s('%s')" % (self.__class__.__name__, self.__str__())

    def __reduce__(self):
        return self.__class__, (self._ip, int(self._family))

    def _key(self):
        return self._family, self._ip

    def __eq__(self, other):
        if not isinstance(other, IPAddress):
            return NotImplemented
        return self._key() == other._key()

    def __ne__(self, other):
        if not isinstance(other, IPAddress):
            return NotImplemented
        return self._key() != other._key()

    def __lt__(self, other):
        if not isinstance(other, IPAddress):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other):
        if not isinstance(other, IPAddress):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other):
        if not isinstance(other, IPAddress):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other):
        if not isinstance(other, IPAddress):
            return NotImplemented
        return self._key() >= other._key()

    def __hash__(self):
        return hash(self._key())

    @property
    def family(self):
        """The AddressFamily of this address."""
        return self._family

    @property
    def version(self):
        """The IP version of this address, 4 or 6."""
        return int(self._family)

    @property
    def max_prefixlen(self):
        return _ADDRESS_LEN[self._family]

    @property
    def packed(self):
        """The binary representation of this address."""
        return self._ip.to_bytes(_ADDRESS_LEN[self._family] // 8, 'big')

    @property
    def exploded(self):
        """The fully expanded string representation of this address."""
        if self._family == IPV6:
            return v6_to_string_exploded(self._ip)
        return self.__str__()

# =============================================================================
# IP Network class
# =============================================================================

class IPNetwork:
    """An IPv4 or IPv6 network: a base address and a prefix length.

    The base address is always masked to the network boundary, so
    IPNetwork('10.1.2.3/8') is the network 10.0.0.0/8.  Instances are
    immutable and may be shared between threads.
    """

    __slots__ = ('_ip', '_prefixlen', '_family', '_hash',
                 '_broadcast', '_lock')

    def __init__(self, address=None, prefix=None):
        """Instantiate a new IPNetwork object.

        Args:
            address: The network as a string, in any form accepted by
                parse(); or an address (string, integer, bytes or
                IPAddress) combined with prefix; or a tuple of
                (address, prefix); or another IPNetwork.  With no
                arguments, the network is 0.0.0.0/0.

                An integer, bytes or IPAddress with no prefix is taken
                as a host network, a /32 for IPv4 or a /128 for IPv6.
                A string with no prefix goes through parse(), so its
                prefix length is guessed: IPNetwork('10.0.0.1') is
                10.0.0.0/8, while IPNetwork(0x0a000001) is 10.0.0.1/32.

            prefix: The prefix length as an integer or decimal string,
                or a netmask as an address string or IPAddress.

        Raises:
            IPNetworkError: (a subclass of ValueError) if the address or
                prefix is not valid.
        """
        if isinstance(address, tuple):
            if len(address) != 2 or prefix is not None:
                raise AddressValueError('invalid network: %r' % (address,))
            address, prefix = address
        if address is None and prefix is None:
            self._init(0, 0, IPV4)
            return
        if prefix is not None:
            net = _parse_pair(address, prefix)
        elif isinstance(address, IPNetwork):
            net = address
        elif isinstance(address, str):
            net = parse(address)
        else:
            addr = IPAddress(address)
            self._init(addr._ip, _ADDRESS_LEN[addr._family], addr._family)
            return
        self._init(net._ip, net._prefixlen, net._family)

    def _init(self, ip, prefixlen, family):
        self._family = family
        self._prefixlen = prefixlen
        self._ip = ip & to_netmask_int(prefixlen, family)
        self._hash = hash((family, self._ip, prefixlen))
        # The broadcast integer is assigned on first use
        self._broadcast = None
        self._lock = threading.Lock()

    @classmethod
    def _from_int(cls, ip, prefixlen, family):
        """Create a network from an address integer, without parsing.

        Raises:
            PrefixLengthError: if prefixlen is out of range for family.
        """
        net = cls.__new__(cls)
        net._init(ip, prefixlen, family)
        return net

    @classmethod
    def from_netmask(cls, address, netmask):
        """Create a network from an address and a netmask.

        Example:
            >>> IPNetwork.from_netmask('10.0.0.1', '255.255.255.0')
            IPNetwork('10.0.0.0/24')

        Raises:
            AddressValueError: if address is not valid.
            NetmaskValueError: if netmask is not an address.
            InvalidNetmaskError: if netmask is not a valid netmask.
            MixedFamilyError: if address and netmask differ in family.
        """
        if isinstance(netmask, int):
            raise TypeError('netmask must be an address: %r' % (netmask,))
        return _parse_pair(address, netmask)

    def __str__(self):
        return '%s/%d' % (_TO_STRING[self._family](self._ip), self._prefixlen)

    def __repr__(self):
        return "%s('%s')" % (self.__class__.__name__, self.__str__())

    def __reduce__(self):
        return self.__class__, (self.__str__(),)

    def _key(self):
        return self._family, self._ip, self._prefixlen

    def __eq__(self, other):
        if not isinstance(other, IPNetwork):
            return NotImplemented
        return self._key() == other._key()

    def __ne__(self, other):
        if not isinstance(other, IPNetwork):
            return NotImplemented
        return self._key() != other._key()

    def __lt__(self, other):
        if not isinstance(other, IPNetwork):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other):
        if not isinstance(other, IPNetwork):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other):
        if not isinstance(other, IPNetwork):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other):
        if not isinstance(other, IPNetwork):
            return NotImplemented
        return self._key() >= other._key()

    def __hash__(self):
        return self._hash

    def compare_networks(self, other):
        """Compare with another IP network.

        Returns:
            -1 if self < other; 0 if self == other; 1 if self > other

        Raises:
            TypeError if other is not an IPNetwork.
        """
        if not isinstance(other, IPNetwork):
            raise TypeError('comparing %r to %r' % (self, other))
        if self._key() < other._key():
            return -1
        if self._key() > other._key():
            return 1
        return 0

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def family(self):
        """The AddressFamily of this network."""
        return self._family

    @property
    def version(self):
        """The IP version of this network, 4 or 6."""
        return int(self._family)

    @property
    def max_prefixlen(self):
        """Returns the maximum prefix length for networks of this family."""
        return _ADDRESS_LEN[self._family]

    @property
    def prefixlen(self):
        """The network prefix length, in bits."""
        return self._prefixlen

    @property
    def _netmask(self):
        return to_netmask_int(self._prefixlen, self._family)

    @property
    def _broadcast_int(self):
        """The highest address of the network, as an integer.

        Computed once, on first use.  The lock only guards the check
        and store of the cached value.
        """
        value = self._broadcast
        if value is None:
            with self._lock:
                value = self._broadcast
                if value is None:
                    value = broadcast_int(self._ip, self._netmask,
                                          self._family)
                    self._broadcast = value
        return value

    def _address(self, ip):
        return IPAddress(ip, self._family)

    @property
    def network_address(self):
        """The network base address."""
        return self._address(self._ip)

    @property
    def netmask(self):
        """Returns the network mask for the network, as an IP address."""
        return self._address(self._netmask)

    @property
    def hostmask(self):
        """Returns the host mask for the network, as an IP address."""
        return self._address(hostmask_int(self._prefixlen, self._family))

    @property
    def wildcard_mask(self):
        """The complement of the netmask, as used by access lists.

        For example, the wildcard mask of a /24 IPv4 network is
        0.0.0.255.
        """
        return self._address(_MAX_ADDRESS[self._family] - self._netmask)

    @property
    def broadcast_address(self):
        """Returns the broadcast address, or None for an IPv6 network."""
        if self._family == IPV6:
            return None
        return self._address(self._broadcast_int)

    @property
    def last_address(self):
        """The highest address of the network, for either family."""
        return self._address(self._broadcast_int)

    @property
    def usable(self):
        """The number of usable host addresses in the network."""
        return usable_count(self._prefixlen, self._family)

    @property
    def num_addresses(self):
        """The number of addresses in this network."""
        return total_count(self._prefixlen, self._family)

    @property
    def first_usable(self):
        """The first usable host address.

        This is the network address for IPv6, and for IPv4 networks with
        no usable addresses (/31 and /32).
        """
        if self._family == IPV6 or self.usable <= 0:
            return self._address(self._ip)
        return self._address(self._ip + 1)

    @property
    def last_usable(self):
        """The last usable host address.

        This is the last address for IPv6, and the network address for
        IPv4 networks with no usable addresses (/31 and /32).
        """
        if self._family == IPV6:
            return self._address(self._broadcast_int)
        if self.usable <= 0:
            return self._address(self._ip)
        return self._address(self._broadcast_int - 1)

    @property
    def with_prefixlen(self):
        """Returns the network address and prefix length as a string."""
        return self.__str__()

    @property
    def value(self):
        """The canonical 'address/prefixlen' string of the network."""
        return self.__str__()

    @property
    def with_netmask(self):
        """Returns the network address and network mask as a string."""
        return '%s/%s' % (self.network_address, self.netmask)

    def describe(self):
        """Return a multi-line, human readable dump of the network.

        This is for diagnostics only, it is not meant to be parsed.
        """
        broadcast = self.broadcast_address
        fields = (
            ('IPNetwork', self),
            ('Network', self.network_address),
            ('Netmask', self.netmask),
            ('Cidr', self._prefixlen),
            ('Broadcast', '' if broadcast is None else broadcast),
            ('FirstUsable', self.first_usable),
            ('LastUsable', self.last_usable),
            ('Usable', self.usable),
        )
        return ''.join('%-12s: %s\n' % field for field in fields)

    # -------------------------------------------------------------------------
    # Predicates
    # -------------------------------------------------------------------------

    def contains(self, other):
        """Check if an address, or another network, is in this network.

        Args:
            other: An IPNetwork, or an address in any form accepted by
                IPAddress.

        Returns:
            True if other lies entirely within this network.  An
            address or network of the other family is never contained.

        Raises:
            AddressValueError: if other is not a network and cannot be
                converted to an address.
        """
        if isinstance(other, IPNetwork):
            if other._family != self._family:
                return False
            return (self._ip <= other._ip and
                    other._broadcast_int <= self._broadcast_int)
        if not isinstance(other, IPAddress):
            other = IPAddress(other)
        if other._family != self._family:
            return False
        return self._ip <= other._ip <= self._broadcast_int

    __contains__ = contains

    def overlaps(self, other):
        """Check if another IP network overlaps this one.

        Returns:
            True if the two networks share at least one address.
            Networks of different families never overlap.

        Raises:
            TypeError: If other is not an IPNetwork.
        """
        if not isinstance(other, IPNetwork):
            raise TypeError('other (%r) must be an IPNetwork' % (other,))
        if other._family != self._family:
            return False
        low, high = self._ip, self._broadcast_int
        first, last = other._ip, other._broadcast_int
        return (low <= first <= high or
                low <= last <= high or
                (first <= low and high <= last))

    def is_iana_reserved(self):
        """Test if the network lies in an RFC 1918 private block.

        Returns:
            True if the network is inside 10.0.0.0/8, 172.16.0.0/12 or
            192.168.0.0/16.
        """
        return any(net.contains(self) for net in _IANA_RESERVED_NETS)

    # -------------------------------------------------------------------------
    # Subnetting and supernetting
    # -------------------------------------------------------------------------

    def subnet(self, prefixlen):
        """Split the network into subnets of a longer prefix length.

        Example:
            >>> list(IPNetwork('10.0.0.0/8').subnet(9))
            [IPNetwork('10.0.0.0/9'), IPNetwork('10.128.0.0/9')]

        Args:
            prefixlen: The prefix length of the subnets.  This must not
                be shorter than the prefix length of this network.

        Returns:
            A NetworkRange of the subnets.  They are computed on demand,
            so even a /128 split of a large IPv6 network is cheap.

        Raises:
            InvalidSplitError: if prefixlen is shorter than the current
                prefix length, or longer than the address length.
        """
        if not isinstance(prefixlen, int):
            raise TypeError('prefix length must be an integer: %r' %
                            (prefixlen,))
        if not self._prefixlen <= prefixlen <= self.max_prefixlen:
            raise InvalidSplitError('cannot split %s into /%s networks' %
                                    (self, prefixlen))
        return NetworkRange(self, prefixlen)

    def try_subnet(self, prefixlen):
        """Like subnet, but returns None if the split is invalid."""
        return _try(self.subnet, prefixlen)

    def supernet(self, other):
        """Merge this network with another into a single network.

        If either network contains the other, the containing network is
        returned.  Otherwise the two networks must have the same prefix
        length, be adjacent and together fill a network one bit shorter:

            192.168.0.0/24 + 192.168.1.0/24 = 192.168.0.0/23
            10.1.0.0/16 + 10.0.0.0/16 = 10.0.0.0/15
            192.168.0.0/24 + 192.168.0.0/25 = 192.168.0.0/24

        Raises:
            MixedFamilyError: if the networks differ in family.
            NotAdjacentError: if the prefix lengths differ, or the
                networks are not adjacent.
            MisalignedBoundaryError: if the adjacent networks straddle
                the boundary of the shorter prefix, as with
                192.168.1.0/24 and 192.168.2.0/24.
        """
        if not isinstance(other, IPNetwork):
            raise TypeError('other (%r) must be an IPNetwork' % (other,))
        if other._family != self._family:
            raise MixedFamilyError('cannot merge %s and %s' % (self, other))
        if self.contains(other):
            return self
        if other.contains(self):
            return other
        if self._prefixlen != other._prefixlen:
            raise NotAdjacentError('%s and %s differ in prefix length' %
                                   (self, other))
        first, last = (self, other) if self._ip < other._ip else (other, self)
        if first._broadcast_int + 1 != last._ip:
            raise NotAdjacentError('%s and %s are not adjacent' %
                                   (first, last))
        prefixlen = first._prefixlen - 1
        if first._ip & to_netmask_int(prefixlen, first._family) != first._ip:
            raise MisalignedBoundaryError(
                    '%s and %s do not start on a /%d boundary' %
                    (first, last, prefixlen))
        return self._from_int(first._ip, prefixlen, first._family)

    def try_supernet(self, other):
        """Like supernet, but returns None if the networks do not merge."""
        return _try(self.supernet, other)

    def list_addresses(self, filter=None):
        """List the addresses of the network.

        Args:
            filter: An AddressFilter selecting the addresses to list,
                AddressFilter.ALL by default.

        Returns:
            An AddressRange, which computes its addresses on demand.
        """
        if filter is None:
            filter = AddressFilter.ALL
        return AddressRange(self, filter)

# =============================================================================
# Lazy ranges
# =============================================================================

class NetworkRange:
    """The subnets of a network, at a longer prefix length.

    Subnets are computed when they are indexed or iterated over, never
    stored.  Iteration always restarts from the first subnet.
    """

    __slots__ = ('_network', '_prefixlen', '_count', '_step')

    def __init__(self, network, prefixlen):
        self._network = network
        self._prefixlen = prefixlen
        self._count = 2**(prefixlen - network._prefixlen)
        self._step = 2**(network.max_prefixlen - prefixlen)

    def __repr__(self):
        return '%s(%r, %d)' % (self.__class__.__name__, self._network,
                               self._prefixlen)

    @property
    def network(self):
        """The network being split."""
        return self._network

    @property
    def prefixlen(self):
        """The prefix length of the subnets."""
        return self._prefixlen

    @property
    def count(self):
        """The number of subnets, as an unbounded integer.

        Unlike len(), this works for more than sys.maxsize subnets.
        """
        return self._count

    def __len__(self):
        return self._count

    def __getitem__(self, n):
        """Get an indexed subnet, without computing the others.

        Args:
            n: The integer index of the subnet.  Negative indexes count
                back from the last subnet.

        Slice index notation is not supported
        """
        if not isinstance(n, int):
            raise TypeError('invalid index type: %r' % (n,))
        i = n if n >= 0 else self._count + n
        if 0 <= i < self._count:
            return IPNetwork._from_int(self._network._ip + i * self._step,
                                       self._prefixlen, self._network._family)
        raise IndexError('subnet index out of range: %r' % (n,))

    def __iter__(self):
        base = self._network._ip
        family = self._network._family
        for ip in range(base, base + self._count * self._step, self._step):
            yield IPNetwork._from_int(ip, self._prefixlen, family)

    def __contains__(self, net):
        return (isinstance(net, IPNetwork) and
                net._prefixlen == self._prefixlen and
                self._network.contains(net))

    @property
    def first(self):
        return self[0]

    @property
    def last(self):
        return self[-1]

class AddressFilter(enum.Enum):
    """Selects the addresses listed by IPNetwork.list_addresses."""

    ALL = 'all'
    USABLE = 'usable'
    UNUSABLE = 'unusable'
    BROADCAST = 'broadcast'
    NETWORK = 'network'

class AddressRange:
    """The addresses of a network, selected by an AddressFilter.

    The selected addresses form at most two runs of consecutive
    integers, so the count and any indexed address are computed
    directly.  Iteration always restarts from the first address.
    """

    __slots__ = ('_network', '_filter', '_runs', '_count')

    def __init__(self, network, filter=AddressFilter.ALL):
        self._network = network
        self._filter = AddressFilter(filter)
        self._runs = self._select(network, self._filter)
        self._count = sum(count for _, count in self._runs)

    @staticmethod
    def _select(network, filter):
        """Return the runs of selected addresses, as (start, count)."""
        base = network._ip
        last = network._broadcast_int
        total = network.num_addresses
        usable = network.usable
        ipv6 = network._family == IPV6
        if filter == AddressFilter.ALL:
            return ((base, total),)
        if filter == AddressFilter.NETWORK:
            return ((base, 1),)
        if filter == AddressFilter.BROADCAST:
            return () if ipv6 else ((last, 1),)
        if filter == AddressFilter.USABLE:
            if ipv6:
                return ((base, total),)
            return ((base + 1, usable),) if usable > 0 else ()
        # UNUSABLE
        if ipv6:
            return ()
        if usable > 0:
            return ((base, 1), (last, 1))
        return ((base, total),)

    def __repr__(self):
        return '%s(%r, %s)' % (self.__class__.__name__, self._network,
                               self._filter)

    @property
    def network(self):
        return self._network

    @property
    def filter(self):
        return self._filter

    @property
    def count(self):
        """The number of addresses, as an unbounded integer."""
        return self._count

    def __len__(self):
        return self._count

    def __getitem__(self, n):
        if not isinstance(n, int):
            raise TypeError('invalid index type: %r' % (n,))
        i = n if n >= 0 else self._count + n
        if 0 <= i < self._count:
            for start, count in self._runs:
                if i < count:
                    return IPAddress(start + i, self._network._family)
                i -= count
        raise IndexError('address index out of range: %r' % (n,))

    def __iter__(self):
        family = self._network._family
        for start, count in self._runs:
            for ip in range(start, start + count):
                yield IPAddress(ip, family)

    def __contains__(self, address):
        if not isinstance(address, IPAddress):
            address = IPAddress(address)
        if address._family != self._network._family:
            return False
        return any(start <= address._ip < start + count
                   for start, count in self._runs)

# =============================================================================
# Parser
# =============================================================================

class CidrGuess:
    """A strategy guessing the prefix length of a bare address.

    Subclasses implement try_guess().  Any object with a compatible
    try_guess() method may be passed to parse() as its guess argument.
    """

    def try_guess(self, address):
        """Guess the prefix length for an address string.

        Returns:
            The prefix length as an integer, or None if it cannot be
            guessed.
        """
        raise NotImplementedError

class ClassfulGuess(CidrGuess):
    """Guess from the legacy IPv4 address classes.

    Class A (0.x to 127.x) is a /8, class B (128.x to 191.x) a /16 and
    class C (192.x to 223.x) a /24.  Classes D and E have no guess.
    IPv6 addresses are taken as /64 networks.
    """

    def try_guess(self, address):
        try:
            ip, family = IPAddress.from_string(address)
        except AddressValueError:
            return None
        if family == IPV6:
            return 64
        first = ip >> 24
        if first <= 127:
            return 8
        if first <= 191:
            return 16
        if first <= 223:
            return 24
        return None

class ClasslessGuess(CidrGuess):
    """Guess a host network: a /32 for IPv4, a /128 for IPv6."""

    def try_guess(self, address):
        try:
            _, family = IPAddress.from_string(address)
        except AddressValueError:
            return None
        return _ADDRESS_LEN[family]

# The strategy used by parse() when no guess is given
DEFAULT_CIDR_GUESS = ClassfulGuess()

def guess_cidr(address):
    """Guess the prefix length of an address with DEFAULT_CIDR_GUESS."""
    return DEFAULT_CIDR_GUESS.try_guess(address)

_SANITIZE_RE = re.compile(r'[^0-9a-fA-F./\s:]+')
_WHITESPACE_RE = re.compile(r'\s{2,}')
_SPLIT_RE = re.compile(r'[\s/]')

def sanitize_text(txt):
    """Remove characters that cannot be part of a network string.

    Characters other than hex digits, '.', '/', ':' and whitespace are
    dropped, runs of whitespace are collapsed and the result is
    trimmed.
    """
    txt = _SANITIZE_RE.sub('', txt)
    txt = _WHITESPACE_RE.sub(' ', txt)
    return txt.strip()

def parse_cidr(txt, family):
    """Convert a prefix length string to an integer.

    Args:
        txt: A decimal string, e.g. '24'.
        family: The address family the prefix length applies to.

    Raises:
        NetmaskValueError: if txt is not a decimal integer.
        PrefixLengthError: if the prefix length is too big for family.
    """
    family = to_family(family)
    if not _isdecimal(txt):
        raise NetmaskValueError('invalid prefix length: %r' % (txt,))
    prefixlen = int(txt)
    if prefixlen > _ADDRESS_LEN[family]:
        raise PrefixLengthError('prefix length too big for IPv%d: %r' %
                                (family, txt))
    return prefixlen

def try_parse_cidr(txt, family):
    """Like parse_cidr, but returns None if txt is not valid."""
    return _try(parse_cidr, txt, family)

def _parse_pair(address, prefix):
    """Build a network from an address and a prefix length or netmask."""
    if address is None or address == '':
        raise EmptyInputError('no address given')
    if prefix is None or prefix == '':
        raise EmptyInputError('no prefix length or netmask given')
    addr = IPAddress(address)
    if isinstance(prefix, int):
        prefixlen = prefix
    elif isinstance(prefix, str) and _isdecimal(prefix):
        prefixlen = parse_cidr(prefix, addr._family)
    else:
        try:
            mask = IPAddress(prefix)
        except AddressValueError:
            raise NetmaskValueError('invalid netmask: %r' % (prefix,))
        if mask._family != addr._family:
            raise MixedFamilyError('netmask %s does not match address %s' %
                                   (mask, addr))
        prefixlen = to_cidr(mask)
    return IPNetwork._from_int(addr._ip, prefixlen, addr._family)

def _parse_guessed(address, guess):
    """Build a network from a bare address, guessing its prefix length."""
    ip, family = IPAddress.from_string(address)
    strategy = DEFAULT_CIDR_GUESS if guess is None else guess
    prefixlen = strategy.try_guess(address)
    if prefixlen is None:
        logger.debug(f"{type(strategy).__name__} has no guess for {address}")
        raise UnguessableLengthError('cannot guess the prefix length of %r' %
                                     (address,))
    return IPNetwork._from_int(ip, prefixlen, family)

def parse(network, netmask=None, guess=None, sanitize=True):
    """Parse a network from text.

    Accepted forms are:

        '192.168.168.100/24'   address and prefix length
        '192.168.168.100 24'
        '192.168.168.100 255.255.255.0'   address and netmask
        '192.168.168.100'      address alone, prefix length guessed

    The network and netmask may also be given as two arguments, as in
    parse('10.0.0.1', '255.255.255.0') or parse('10.0.0.1', 24).  Host
    bits of the address are cleared.

    Args:
        network: The network string, or the address if netmask is given.
        netmask: The netmask or prefix length, or None.
        guess: A CidrGuess for addresses given alone, or None for
            DEFAULT_CIDR_GUESS.  Unused when netmask is given.
        sanitize: If True (the default), drop characters which cannot
            be part of a network string, and extra whitespace, before
            parsing.  With two arguments, each string argument is
            sanitized on its own.  Pass False to parse the text as is.

    Returns:
        An IPNetwork.

    Raises:
        EmptyInputError: if the network (or netmask) is empty.
        AddressValueError: if the address is malformed.
        NetmaskValueError: if the netmask is malformed.
        InvalidNetmaskError: if the netmask is not a left-aligned mask.
        PrefixLengthError: if the prefix length is too big.
        UnguessableLengthError: if no prefix length can be guessed.
        MixedFamilyError: if the address and netmask differ in family.
    """
    if netmask is not None:
        if sanitize:
            if isinstance(network, str):
                network = sanitize_text(network)
            if isinstance(netmask, str):
                netmask = sanitize_text(netmask)
        return _parse_pair(network, netmask)
    if network is None or network == '':
        raise EmptyInputError('no network given')
    if not isinstance(network, str):
        raise AddressValueError('network must be a string: %r' % (network,))
    if sanitize:
        network = sanitize_text(network)
    tokens = _SPLIT_RE.split(network)
    if sanitize:
        tokens = [token for token in tokens if token]
        if not tokens:
            raise EmptyInputError('nothing left to parse after sanitizing')
    if len(tokens) == 1:
        return _parse_guessed(tokens[0], guess)
    if len(tokens) != 2:
        raise AddressValueError('invalid network: %r' % (network,))
    return _parse_pair(tokens[0], tokens[1])

def try_parse(network, netmask=None, guess=None, sanitize=True):
    """Like parse, but returns None if the network is not valid."""
    return _try(parse, network, netmask, guess=guess, sanitize=sanitize)

# =============================================================================
# Network set functions
# =============================================================================

def _check_family(nets):
    """Return the family shared by all of nets."""
    family = nets[0]._family
    for net in nets:
        if net._family != family:
            raise MixedFamilyError('%s and %s must be of the same family' %
                                   (nets[0], net))
    return family

def supernet_all(networks):
    """Merge a list of networks into as few supernets as possible.

    Example:
        >>> supernet_all([IPNetwork('192.168.0.0/24'),
        ...               IPNetwork('192.168.1.0/24'),
        ...               IPNetwork('192.168.2.0/24'),
        ...               IPNetwork('192.168.3.0/24')])
        [IPNetwork('192.168.0.0/22')]

    None entries are dropped.  The networks are sorted and pairs are
    merged off a stack; passes repeat until one leaves the number of
    networks unchanged.  The merge is greedy: it finds every merge of
    two equal, adjacent and aligned networks, but unlike
    collapse_networks() does not split ranges into new blocks.

    Args:
        networks: An iterable of IPNetwork objects, or None entries.

    Returns:
        A list of the merged networks.
    """
    stack = sorted(net for net in networks if net is not None)
    # the lowest network must be on top of the stack
    stack.reverse()
    count = len(stack)
    passes = 0
    while True:
        merged = []
        while len(stack) > 1:
            net = stack.pop()
            supernet = net.try_supernet(stack[-1])
            if supernet is None:
                merged.append(net)
            else:
                stack[-1] = supernet
        merged.extend(stack)
        passes += 1
        logger.debug(f"supernet pass {passes}: {count} -> {len(merged)} "
                     f"networks")
        if len(merged) == count:
            return sorted(merged)
        count = len(merged)
        stack = sorted(merged, reverse=True)

def _summarize_address_range(first, last, family):
    """Summarize a range of address integers into aligned networks.

    This internal function assumes all validation has already been done.

    Example:
        >>> list(_summarize_address_range(v4_from_string('192.0.2.0'),
        ...                               v4_from_string('192.0.2.130'),
        ...                               IPV4))
        [IPNetwork('192.0.2.0/25'), IPNetwork('192.0.2.128/31'),
         IPNetwork('192.0.2.130/32')]
    """
    bits = _ADDRESS_LEN[family]
    while first <= last:
        nbits = min(_count_righthand_zero_bits(first, bits),
                    (last - first + 1).bit_length() - 1)
        yield IPNetwork._from_int(first, bits - nbits, family)
        first += 1 << nbits

def summarize_address_range(first, last):
    """Summarize a network range given the first and last IP addresses.

    Returns:
        An iterator of the fewest networks exactly covering the range.

    Raises:
        MixedFamilyError: if first and last differ in family.
        ValueError: if first is greater than last.
    """
    first, last = IPAddress(first), IPAddress(last)
    if first._family != last._family:
        raise MixedFamilyError('%s and %s must be of the same family' %
                               (first, last))
    if first._ip > last._ip:
        raise ValueError('first address %s is greater than last %s' %
                         (first, last))
    return _summarize_address_range(first._ip, last._ip, first._family)

def collapse_networks(networks):
    """Collapse networks into the fewest networks covering them.

    Example:
        collapse_networks([IPNetwork('192.0.2.0/25'),
                           IPNetwork('192.0.2.128/25')]) ->
                          [IPNetwork('192.0.2.0/24')]

    Args:
        networks: An iterable of IPNetwork objects, or None entries.

    Returns:
        An iterator of the collapsed networks, in ascending order.

    Raises:
        MixedFamilyError: If passed networks of mixed families.
    """
    # sort nets so we only have to check each net against the previous one
    nets = sorted(net for net in networks if net is not None)
    if not nets:
        return
    family = _check_family(nets)
    first, last = None, None
    for net in nets:
        if first is None:
            first, last = net._ip, net._broadcast_int
        elif net._ip <= last + 1:
            # net overlaps or is adjacent, merge with the previous range
            last = max(last, net._broadcast_int)
        else:
            yield from _summarize_address_range(first, last, family)
            first, last = net._ip, net._broadcast_int
    yield from _summarize_address_range(first, last, family)

def _covering_network(low, high, family):
    """The smallest network containing both address integers."""
    prefixlen = _ADDRESS_LEN[family] - (low ^ high).bit_length()
    return IPNetwork._from_int(low, prefixlen, family)

def wide_subnet(start, end):
    """The smallest network containing two addresses.

    Example:
        >>> wide_subnet('192.168.0.10', '192.168.1.20')
        IPNetwork('192.168.0.0/23')

    Raises:
        EmptyInputError: if either address is empty.
        AddressValueError: if either address is not valid.
        MixedFamilyError: if the addresses differ in family.
    """
    if start is None or start == '' or end is None or end == '':
        raise EmptyInputError('both start and end addresses are required')
    first, last = IPAddress(start), IPAddress(end)
    if first._family != last._family:
        raise MixedFamilyError('%s and %s must be of the same family' %
                               (first, last))
    return _covering_network(first._ip, last._ip, first._family)

def wide_subnet_networks(networks):
    """The smallest network containing all the given networks.

    Args:
        networks: An iterable of IPNetwork objects, or None entries.

    Raises:
        EmptyInputError: if no networks remain after dropping None.
        MixedFamilyError: if the networks differ in family.
    """
    nets = [net for net in networks if net is not None]
    if not nets:
        raise EmptyInputError('no networks given')
    family = _check_family(nets)
    low = min(net._ip for net in nets)
    high = max(net._broadcast_int for net in nets)
    return _covering_network(low, high, family)

def try_wide_subnet(start, end):
    """Like wide_subnet, but returns None on failure."""
    return _try(wide_subnet, start, end)

def try_wide_subnet_networks(networks):
    """Like wide_subnet_networks, but returns None on failure."""
    return _try(wide_subnet_networks, networks)

# =============================================================================

_IANA_RESERVED_NETS = (
    IPNetwork('10.0.0.0/8'),
    IPNetwork('172.16.0.0/12'),
    IPNetwork('192.168.0.0/16'),
)
