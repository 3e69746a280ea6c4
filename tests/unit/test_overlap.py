"""Unit tests for overlap detection and routing statement validation."""

import pytest
from netdash.core.overlap import (
    check_vlan_subnets,
    evaluate_network_statement,
    evaluate_static_route,
    find_overlaps,
    is_reserved_vlan,
    is_valid_vlan_id,
    parse_vlan_list,
    parse_wildcard,
    validate_cidrs,
)
from netdash.core.ipv4 import parse_subnet
from netdash.models import VLAN, NamedCIDR, OverlapRelation
from netdash.utils.errors import AddressError, ErrorCodes


class TestValidateCIDRs:
    """Test labelled CIDR validation."""

    def test_contains(self):
        """Test a /24 listed before its /25 is reported as containing it."""
        report = validate_cidrs([('Corp', '192.168.1.0/24'), ('Guest', '192.168.1.0/25')])
        assert len(report.overlaps) == 1
        overlap = report.overlaps[0]
        assert overlap.a.label == 'Corp'
        assert overlap.b.label == 'Guest'
        assert overlap.relation == OverlapRelation.CONTAINS
        assert not report.healthy

    def test_contained_by(self):
        """Test the reverse order reports contained-by."""
        report = validate_cidrs([('Guest', '192.168.1.0/25'), ('Corp', '192.168.1.0/24')])
        assert report.overlaps[0].relation == OverlapRelation.CONTAINED_BY

    def test_identical(self):
        """Test duplicate networks are identical overlaps."""
        report = validate_cidrs([('A', '10.0.0.0/24'), ('B', '10.0.0.0/24')])
        assert report.overlaps[0].relation == OverlapRelation.IDENTICAL
        assert report.overlaps[0].description == 'A and B both use 10.0.0.0/24'

    def test_disjoint(self):
        """Test separate networks are healthy."""
        report = validate_cidrs([('A', '10.0.0.0/25'), ('B', '10.0.0.128/25'), ('C', '10.0.1.0/24')])
        assert report.overlaps == []
        assert report.errors == []
        assert report.healthy

    def test_invalid_entry_skipped(self):
        """Test unparseable entries are reported with their label and left out."""
        report = validate_cidrs([('Bad', '10.0.0.0/33'), ('Good', '10.0.0.0/24')])
        assert [e.label for e in report.errors] == ['Bad']
        assert report.errors[0].error_code == ErrorCodes.INVALID_MASK
        assert [e.label for e in report.entries] == ['Good']

    def test_off_boundary_still_checked(self):
        """Test an off-boundary entry is flagged and its network still overlap-checked."""
        report = validate_cidrs([('Servers', '192.168.1.5/24'), ('Guest', '192.168.1.0/25')])
        assert report.errors_for('Servers')[0].error_code == ErrorCodes.INVALID_DEFINITION
        assert report.entries[0].subnet.cidr == '192.168.1.0/24'
        assert len(report.overlaps) == 1

    def test_mixed_families(self):
        """Test IPv4 and IPv6 entries never overlap each other."""
        report = validate_cidrs([
            ('v4', '10.0.0.0/8'),
            ('v6-a', '2001:db8::/32'),
            ('v6-b', '2001:db8:1::/48'),
        ])
        assert len(report.overlaps) == 1
        assert report.overlaps[0].a.label == 'v6-a'

    def test_pair_order(self):
        """Test pairs are reported once each, earlier entry first."""
        entries = [
            NamedCIDR(label=label, subnet=parse_subnet(cidr))
            for label, cidr in [('wide', '10.0.0.0/8'), ('mid', '10.1.0.0/16'), ('narrow', '10.1.1.0/24')]
        ]
        pairs = [(o.a.label, o.b.label) for o in find_overlaps(entries)]
        assert pairs == [('wide', 'mid'), ('wide', 'narrow'), ('mid', 'narrow')]


class TestNetworkStatement:
    """Test OSPF/EIGRP network statements."""

    def test_wildcard_statement(self):
        """Test a network with wildcard and area."""
        statement = evaluate_network_statement('10.1.1.0', '0.0.0.255', '0')
        assert statement.render() == 'network 10.1.1.0 0.0.0.255 area 0'
        assert statement.warnings == []

    def test_normalizes_network(self):
        """Test host bits are cleared with a warning."""
        statement = evaluate_network_statement('10.1.1.5', '0.0.0.255')
        assert statement.subnet.cidr == '10.1.1.0/24'
        assert statement.warnings == ['Normalized network to 10.1.1.0/24']

    def test_missing_wildcard(self):
        """Test a missing wildcard becomes a host statement."""
        statement = evaluate_network_statement('10.1.1.1')
        assert statement.render() == 'network 10.1.1.1 0.0.0.0'
        assert 'Wildcard mask missing' in statement.warnings[0]

    def test_cidr_form(self):
        """Test CIDR input derives the wildcard."""
        statement = evaluate_network_statement('10.1.0.0/16')
        assert str(statement.wildcard) == '0.0.255.255'

    def test_leading_zeros_not_normalized(self):
        """Test an address equal to its network is not flagged just because of its spelling."""
        statement = evaluate_network_statement('010.0.0.0', '0.0.0.255')
        assert statement.subnet.cidr == '10.0.0.0/24'
        assert statement.warnings == []

    def test_cidr_with_conflicting_wildcard(self):
        """Test a wildcard that disagrees with the CIDR prefix is reported and ignored."""
        statement = evaluate_network_statement('10.1.0.0/16', '0.0.0.255')
        assert statement.subnet.cidr == '10.1.0.0/16'
        assert statement.warnings == ['Wildcard 0.0.0.255 ignored; using /16 from CIDR']

    def test_cidr_with_matching_wildcard(self):
        """Test a wildcard that agrees with the CIDR prefix raises no warning."""
        assert evaluate_network_statement('10.1.0.0/16', '0.0.255.255').warnings == []

    def test_empty_address(self):
        """Test a blank address is INVALID_ADDRESS."""
        assert evaluate_network_statement('  ').error_code == ErrorCodes.INVALID_ADDRESS

    @pytest.mark.parametrize('wildcard', ['0.0.255.0', '0.0.0.256', 'any'])
    def test_bad_wildcard(self, wildcard):
        """Test non-contiguous and malformed wildcards."""
        result = evaluate_network_statement('10.0.0.0', wildcard)
        assert isinstance(result, AddressError)
        assert result.error_code == ErrorCodes.INVALID_WILDCARD

    def test_parse_wildcard(self):
        """Test wildcard to prefix conversion."""
        assert parse_wildcard('0.0.0.255') == 24
        assert parse_wildcard('0.0.0.0') == 32
        assert parse_wildcard('255.255.255.255') == 0


class TestStaticRoute:
    """Test static route validation."""

    def test_next_hop_route(self):
        """Test a route via a next hop."""
        route = evaluate_static_route('10.2.0.0', '255.255.0.0', next_hop='192.168.1.1')
        assert route.render() == 'ip route 10.2.0.0 255.255.0.0 192.168.1.1'

    def test_full_route(self):
        """Test interface, next hop and distance together."""
        route = evaluate_static_route('10.2.0.0/16', next_hop='192.168.1.1', exit_interface='Gi0/1', admin_distance='250')
        assert route.render() == 'ip route 10.2.0.0 255.255.0.0 Gi0/1 192.168.1.1 250'

    def test_destination_normalized(self):
        """Test host bits in the destination are cleared with a warning."""
        route = evaluate_static_route('10.2.3.0/16', exit_interface='Null0')
        assert route.destination.cidr == '10.2.0.0/16'
        assert route.warnings == ['Destination normalized to 10.2.0.0/16']

    def test_leading_zeros_not_normalized(self):
        """Test a zero-padded destination on its boundary is not flagged."""
        route = evaluate_static_route('010.2.0.0/16', next_hop='192.168.1.1')
        assert route.destination.cidr == '10.2.0.0/16'
        assert route.warnings == []

    def test_cidr_with_conflicting_mask(self):
        """Test a mask that disagrees with the CIDR prefix is reported and ignored."""
        route = evaluate_static_route('10.2.0.0/16', '255.255.255.0', next_hop='192.168.1.1')
        assert route.destination.cidr == '10.2.0.0/16'
        assert route.warnings == ['Mask 255.255.255.0 ignored; using /16 from CIDR']

    def test_cidr_with_matching_mask(self):
        """Test a mask that agrees with the CIDR prefix raises no warning."""
        assert evaluate_static_route('10.2.0.0/16', '/16', next_hop='192.168.1.1').warnings == []

    def test_missing_mask(self):
        """Test a bare destination needs a mask."""
        result = evaluate_static_route('10.2.0.0', next_hop='192.168.1.1')
        assert result.error_code == ErrorCodes.INVALID_MASK

    def test_needs_hop_or_interface(self):
        """Test a route without a way out is incomplete."""
        result = evaluate_static_route('10.2.0.0/16')
        assert result.error_code == ErrorCodes.INVALID_DEFINITION

    def test_bad_next_hop(self):
        """Test an invalid next hop is reported as such."""
        result = evaluate_static_route('10.2.0.0/16', next_hop='192.168.1.300')
        assert result.error_code == ErrorCodes.INVALID_ADDRESS
        assert result.message == 'Invalid next-hop address'

    def test_distance_clamped(self):
        """Test out-of-range distances are clamped."""
        route = evaluate_static_route('0.0.0.0/0', next_hop='203.0.113.1', admin_distance='999')
        assert route.admin_distance == 255


class TestVLANs:
    """Test VLAN helpers and VLAN subnet checks."""

    def test_vlan_id_range(self):
        """Test valid and reserved VLAN IDs."""
        assert is_valid_vlan_id(1)
        assert is_valid_vlan_id(4094)
        assert not is_valid_vlan_id(0)
        assert not is_valid_vlan_id(4095)
        assert is_reserved_vlan(1)
        assert is_reserved_vlan(1002)
        assert not is_reserved_vlan(10)

    def test_parse_vlan_list(self):
        """Test lists and ranges expand; invalid pieces are dropped."""
        assert parse_vlan_list('10,20,30-32,5000,abc,20') == [10, 20, 30, 31, 32]

    def test_overlap_between_vlans(self):
        """Test overlapping subnets on different VLANs are reported."""
        report = check_vlan_subnets([
            VLAN(id=10, name='Corp', subnets=['192.168.10.0/24']),
            VLAN(id=20, name='Guest', subnets=['192.168.10.128/25']),
        ])
        assert len(report.overlaps) == 1
        assert report.overlaps[0].a.label == 'VLAN 10 (Corp)'

    def test_nested_subnets_same_vlan(self):
        """Test subnets of one VLAN may nest."""
        report = check_vlan_subnets([
            VLAN(id=10, name='Corp', subnets=['10.10.0.0/16', '10.10.1.0/24']),
        ])
        assert report.healthy

    def test_duplicate_vlan_id(self):
        """Test a reused VLAN ID is an INVALID_DEFINITION."""
        report = check_vlan_subnets([
            VLAN(id=10, name='Corp', subnets=['10.0.10.0/24']),
            VLAN(id=10, name='Voice', subnets=['10.0.11.0/24']),
        ])
        assert report.errors[0].error_code == ErrorCodes.INVALID_DEFINITION
        assert report.errors[0].message == 'VLAN ID 10 already exists (Corp)'
        assert report.errors[0].label == 'VLAN 10 (Voice)'

    def test_blank_vlan_name(self):
        """Test a VLAN without a name is an INVALID_DEFINITION."""
        report = check_vlan_subnets([VLAN(id=30, name='  ', subnets=['10.0.30.0/24'])])
        assert not report.healthy
        assert report.errors[0].error_code == ErrorCodes.INVALID_DEFINITION
        assert report.errors[0].message == 'VLAN name is required'
        assert report.errors[0].value == '30'

    def test_long_vlan_name(self):
        """Test a VLAN name over 32 characters is reported."""
        report = check_vlan_subnets([VLAN(id=40, name='x' * 33, subnets=['10.0.40.0/24'])])
        assert report.errors[0].error_code == ErrorCodes.INVALID_DEFINITION
        assert 'longer than 32' in report.errors[0].message
        assert check_vlan_subnets([VLAN(id=40, name='x' * 32, subnets=['10.0.40.0/24'])]).healthy
