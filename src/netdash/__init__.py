#!/usr/bin/env python3
"""
netdash package.
IPv4/IPv6 addressing arithmetic, VLSM planning and overlap validation.
"""

from loguru import logger

__version__ = "1.0.0"
__license__ = "MIT"

# Library default: silent until configure_logging() is called
logger.disable("netdash")

from .core import (  # noqa: E402
    calculate_subnet,
    derive_subnet_facts,
    find_overlaps,
    parse_ipv4,
    parse_netmask_or_prefix,
    parse_subnet,
    plan_vlsm,
    subnets_overlap,
    validate_cidrs,
)
from .models import Subnet, VLSMPlan, VLSMRequest  # noqa: E402
from .utils.errors import AddressError, ErrorCodes, ToolError, unwrap  # noqa: E402
