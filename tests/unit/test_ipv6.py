"""Unit tests for IPv6 parsing and formatting."""

import pytest
from netdash.core.ipv6 import (
    calculate_ipv6_subnet,
    classify_ipv6,
    compress_ipv6,
    expand_ipv6,
    parse_ipv6,
    parse_ipv6_subnet,
    solicited_node_address,
)
from netdash.models import IPv6Address, IPv6AddressClass
from netdash.utils.errors import AddressError, ErrorCodes


class TestCompression:
    """Test canonical (RFC 5952) formatting."""

    @pytest.mark.parametrize(
        'text,expected',
        [
            ('2001:0db8:0000:0000:0000:0000:0000:0001', '2001:db8::1'),
            ('2001:DB8::1', '2001:db8::1'),
            ('2001:db8:0:0:1:0:0:1', '2001:db8::1:0:0:1'),
            ('2001:db8:0:1:1:1:1:1', '2001:db8:0:1:1:1:1:1'),
            ('0:0:0:0:0:0:0:0', '::'),
            ('0:0:0:0:0:0:0:1', '::1'),
            ('fe80:0:0:0:0:0:0:0', 'fe80::'),
        ],
    )
    def test_compress(self, text, expected):
        """Test longest zero run is collapsed, leftmost on a tie, single groups kept."""
        assert compress_ipv6(text) == expected

    def test_expand(self):
        """Test the eight-group form keeps leading zeros."""
        assert expand_ipv6('::1') == '0000:0000:0000:0000:0000:0000:0000:0001'
        assert expand_ipv6('2001:db8::ff00:42:8329') == '2001:0db8:0000:0000:0000:ff00:0042:8329'

    def test_round_trip(self):
        """Test expanding then compressing returns the canonical text."""
        for text in ('2001:db8::1', 'fe80::1:2', '2001:db8:0:1::', 'ff02::1:ff0e:8c6c'):
            assert compress_ipv6(expand_ipv6(text)) == text

    @pytest.mark.parametrize('text', ['2001:db8::g', '1::2::3', '2001:db8:0:0:0:0:0:0:1', '', '12345::'])
    def test_invalid(self, text):
        """Test malformed addresses are INVALID_ADDRESS."""
        result = parse_ipv6(text)
        assert isinstance(result, AddressError)
        assert result.error_code == ErrorCodes.INVALID_ADDRESS

    def test_brackets(self):
        """Test URL-style brackets are stripped."""
        assert str(parse_ipv6('[2001:db8::1]')) == '2001:db8::1'


class TestIPv6Subnet:
    """Test IPv6 prefix parsing."""

    def test_normalizes(self):
        """Test host bits are cleared in lenient mode."""
        assert parse_ipv6_subnet('2001:db8::1/64').cidr == '2001:db8::/64'

    def test_strict_rejects_host_bits(self):
        """Test host bits are INVALID_DEFINITION in strict mode."""
        result = parse_ipv6_subnet('2001:db8::1/64', strict=True)
        assert result.error_code == ErrorCodes.INVALID_DEFINITION

    def test_prefix_out_of_range(self):
        """Test /129 is INVALID_MASK."""
        assert parse_ipv6_subnet('2001:db8::/129').error_code == ErrorCodes.INVALID_MASK

    def test_missing_prefix(self):
        """Test a bare address is not a subnet."""
        assert parse_ipv6_subnet('2001:db8::').error_code == ErrorCodes.INVALID_ADDRESS


class TestClassification:
    """Test IPv6 address classification."""

    @pytest.mark.parametrize(
        'text,expected',
        [
            ('::', IPv6AddressClass.UNSPECIFIED),
            ('::1', IPv6AddressClass.LOOPBACK),
            ('fe80::1', IPv6AddressClass.LINK_LOCAL),
            ('fd00::1', IPv6AddressClass.UNIQUE_LOCAL),
            ('ff02::1', IPv6AddressClass.MULTICAST),
            ('2001:db8::1', IPv6AddressClass.DOCUMENTATION),
            ('::ffff:192.0.2.1', IPv6AddressClass.IPV4_MAPPED),
            ('2606:4700::1111', IPv6AddressClass.GLOBAL),
        ],
    )
    def test_classes(self, text, expected):
        """Test each range is tagged."""
        assert classify_ipv6(parse_ipv6(text)) == expected

    def test_solicited_node(self):
        """Test the group keeps the low 24 bits of the address."""
        group = solicited_node_address(parse_ipv6('2001:db8::1:800:200e:8c6c'))
        assert str(group) == 'ff02::1:ff0e:8c6c'

    def test_no_solicited_node_for_multicast(self):
        """Test multicast, loopback and unspecified have no group."""
        for text in ('ff02::1', '::1', '::'):
            assert solicited_node_address(parse_ipv6(text)) is None


class TestCalculator:
    """Test the IPv6 calculator entry point."""

    def test_prefix(self):
        """Test facts for a /64."""
        facts = calculate_ipv6_subnet('2001:db8:abcd:12::1/64')
        assert facts.cidr == '2001:db8:abcd:12::/64'
        assert facts.compressed == '2001:db8:abcd:12::'
        assert facts.expanded == '2001:0db8:abcd:0012:0000:0000:0000:0000'
        assert facts.host_bits == 64
        assert facts.total_address_count == 2**64
        assert facts.address_class == IPv6AddressClass.DOCUMENTATION

    def test_bare_address_is_host(self):
        """Test an address without prefix is a /128."""
        facts = calculate_ipv6_subnet('2606:4700::1111')
        assert facts.prefix == 128
        assert facts.total_address_count == 1
        assert isinstance(facts.solicited_node, IPv6Address)

    def test_errors_pass_through(self):
        """Test parse errors are returned."""
        assert calculate_ipv6_subnet('nope/64').error_code == ErrorCodes.INVALID_ADDRESS
        assert calculate_ipv6_subnet('2001:db8::/200').error_code == ErrorCodes.INVALID_MASK
