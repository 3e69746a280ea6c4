"""Addressing core: IPv4/IPv6 arithmetic, VLSM planning and overlap validation."""

from netdash.core.ipv4 import (
    address_formats,
    address_in_subnet,
    calculate_subnet,
    classify_ipv4,
    derive_subnet_facts,
    iter_hosts,
    normalize_to_network,
    parse_address_any,
    parse_ipv4,
    parse_netmask_or_prefix,
    parse_subnet,
    prefix_to_netmask,
    prefix_to_wildcard,
    subnet_contains,
    subnets_overlap,
    summarize_subnets,
)
from netdash.core.ipv6 import (
    calculate_ipv6_subnet,
    classify_ipv6,
    compress_ipv6,
    expand_ipv6,
    parse_ipv6,
    parse_ipv6_subnet,
    solicited_node_address,
)
from netdash.core.overlap import (
    check_vlan_subnets,
    evaluate_network_statement,
    evaluate_static_route,
    find_overlaps,
    parse_vlan_list,
    parse_wildcard,
    validate_cidrs,
)
from netdash.core.vlsm import parse_vlsm_request, plan_vlsm


__all__ = [
    # IPv4
    'address_formats',
    'address_in_subnet',
    'calculate_subnet',
    'classify_ipv4',
    'derive_subnet_facts',
    'iter_hosts',
    'normalize_to_network',
    'parse_address_any',
    'parse_ipv4',
    'parse_netmask_or_prefix',
    'parse_subnet',
    'prefix_to_netmask',
    'prefix_to_wildcard',
    'subnet_contains',
    'subnets_overlap',
    'summarize_subnets',
    # IPv6
    'calculate_ipv6_subnet',
    'classify_ipv6',
    'compress_ipv6',
    'expand_ipv6',
    'parse_ipv6',
    'parse_ipv6_subnet',
    'solicited_node_address',
    # Overlap
    'check_vlan_subnets',
    'evaluate_network_statement',
    'evaluate_static_route',
    'find_overlaps',
    'parse_vlan_list',
    'parse_wildcard',
    'validate_cidrs',
    # VLSM
    'parse_vlsm_request',
    'plan_vlsm',
]
