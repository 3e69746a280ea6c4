#!/usr/bin/env python3
"""
Typer-based CLI for netdash.
"""

from pathlib import Path
from typing import Annotated, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .config import NetDashConfig
from .core import ipv4, ipv6, overlap, vlsm
from .models import VLAN, Subnet, VLSMRequest
from .utility.format_table import build_table, export_csv, export_json
from .utils.errors import ToolError, is_error, unwrap
from .utils.logging import configure_logging, log_operation, log_operation_result

console = Console()
err_console = Console(stderr=True)


# Global CLI state
class State:
    """Global CLI state."""
    config: NetDashConfig = NetDashConfig()
    output_format: str = "table"
    debug: bool = False


state = State()


def setup_logging(config: NetDashConfig, debug: bool = False):
    """Configure loguru sinks, with rich console output in debug mode."""
    level = "DEBUG" if debug else config.log_level
    configure_logging(log_file=config.log_file, log_level=level)
    if debug:
        logger.add(
            RichHandler(console=err_console, rich_tracebacks=True),
            format="{message}",
            level="DEBUG",
        )


app = typer.Typer(
    name="netdash",
    help="🧮 Subnet, VLSM and overlap calculators for network engineers",
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@app.callback()
def main(
    output_format: Annotated[
        Optional[str],
        typer.Option('--format', '-f', help='📄 Output format (table, json, csv)'),
    ] = None,
    env_file: Annotated[
        Path,
        typer.Option('--env-file', help='📁 Path to .env configuration file', envvar='NETDASH_ENV_FILE'),
    ] = Path('.env'),
    debug: Annotated[
        bool,
        typer.Option('--debug', help='🐛 Enable debug logging'),
    ] = False,
):
    """🧮 Subnet, VLSM and overlap calculators for network engineers."""
    try:
        config = NetDashConfig.from_env(str(env_file))
        if output_format is not None:
            config = NetDashConfig(**{**config.to_dict(), 'output_format': output_format})
    except ValueError as e:
        err_console.print(f"❌ [bold red]Configuration error: {e}[/bold red]")
        raise typer.Exit(2)

    state.config = config
    state.output_format = config.output_format
    state.debug = debug
    setup_logging(config, debug=debug)


def _emit(records: list, title: str, columns: Optional[list[str]] = None) -> None:
    """Print records in the selected output format."""
    if state.output_format == "json":
        typer.echo(export_json(records))
    elif state.output_format == "csv":
        typer.echo(export_csv(records, columns), nl=False)
    else:
        console.print(build_table(records, columns, title))


def _run(operation: str, params: dict, result):
    """Unwrap a core result, logging the outcome and exiting 1 on failure."""
    log_operation(operation, params)
    try:
        value = unwrap(result)
    except ToolError as e:
        log_operation_result(operation, success=False, error=str(e))
        err_console.print(f"❌ [bold red]{escape(e.message)}[/bold red] [dim]({e.error_code})[/dim]")
        if e.suggestion:
            err_console.print(f"💡 {escape(e.suggestion)}")
        raise typer.Exit(1)
    log_operation_result(operation, success=True, result=value)
    return value


def _warn(warnings: list[str]) -> None:
    for warning in warnings:
        err_console.print(f"⚠️ [yellow]{escape(warning)}[/yellow]")


def _parse_network(operation: str, text: str) -> Subnet:
    """Parse an IPv4 network, warning when host bits had to be cleared."""
    block = _run(operation, {'cidr': text}, ipv4.parse_subnet(text))
    if is_error(ipv4.parse_subnet(text, strict=True)):
        _warn([f"Normalized {text} to {block.cidr}"])
    return block


@app.command()
def subnet(
    address: Annotated[str, typer.Argument(help='Address with prefix (10.1.2.3/24) or bare address')],
    mask: Annotated[Optional[str], typer.Argument(help='Mask as /24, 24 or 255.255.255.0')] = None,
):
    """🔢 Calculate network, broadcast, host range and masks."""
    facts = _run('subnet', {'address': address, 'mask': mask}, ipv4.calculate_subnet(address, mask))
    _emit([facts], title=f"Subnet {facts.cidr}")


@app.command("mask")
def mask_convert(
    value: Annotated[str, typer.Argument(help='Mask as /24, 24 or 255.255.255.0')],
):
    """🎭 Convert between prefix length, netmask and wildcard mask."""
    prefix = _run('mask', {'value': value}, ipv4.parse_netmask_or_prefix(value))
    netmask = ipv4.prefix_to_netmask(prefix)
    usable = Subnet(network='0.0.0.0', prefix=prefix).usable_host_count
    _emit([{
        'prefix': prefix,
        'netmask': str(netmask),
        'wildcard': str(ipv4.prefix_to_wildcard(prefix)),
        'binary': '.'.join(f'{octet:08b}' for octet in netmask.octets),
        'usable_hosts': usable,
        'total_addresses': 1 << (32 - prefix),
    }], title="Subnet Mask")


@app.command("vlsm")
def vlsm_plan(
    supernet: Annotated[str, typer.Argument(help='Block to carve, e.g. 10.0.0.0/24')],
    requests: Annotated[list[str], typer.Argument(help='Requests as label=hosts')],
    point_to_point: Annotated[
        Optional[bool],
        typer.Option('--p2p/--no-p2p', help='Allow /31 blocks for 1-2 host requests'),
    ] = None,
):
    """📐 Plan a VLSM allocation, largest request first."""
    block = _parse_network('vlsm', supernet)
    parsed: list[VLSMRequest] = [
        _run('vlsm', {'request': text}, vlsm.parse_vlsm_request(text)) for text in requests
    ]
    allow_p2p = state.config.allow_point_to_point if point_to_point is None else point_to_point
    plan = _run(
        'vlsm',
        {'supernet': block.cidr, 'requests': len(parsed), 'p2p': allow_p2p},
        vlsm.plan_vlsm(block, parsed, allow_point_to_point=allow_p2p),
    )

    if state.output_format == "json":
        typer.echo(export_json(plan))
        return

    _emit(
        plan.allocations,
        title=f"VLSM plan for {plan.supernet.cidr}",
        columns=['label', 'cidr', 'hosts_needed', 'hosts_available', 'wasted_hosts',
                 'first_host', 'last_host', 'broadcast', 'netmask'],
    )
    if state.output_format == "table":
        console.print(
            f"📊 Allocated [cyan]{plan.allocated_addresses}[/cyan] of "
            f"[cyan]{plan.total_addresses}[/cyan] addresses "
            f"({plan.utilization_percent:.1f}%), "
            f"[cyan]{plan.unallocated_addresses}[/cyan] unallocated, "
            f"[cyan]{plan.wasted_hosts}[/cyan] hosts wasted"
        )


def _parse_definitions(definitions: list[str]) -> list[tuple[str, str]]:
    pairs = []
    for index, text in enumerate(definitions, 1):
        label, sep, cidr = text.partition('=')
        pairs.append((label.strip(), cidr.strip()) if sep else (f"#{index}", text.strip()))
    return pairs


def _emit_report(report, title: str) -> None:
    """Print an overlap report; exits 1 when it has overlaps or errors."""
    if state.output_format == "json":
        typer.echo(export_json(report))
    else:
        for error in report.errors:
            err_console.print(f"⚠️ [yellow]{escape(str(error.label))}: {escape(error.message)}[/yellow]")

        if report.overlaps:
            _emit(
                [{'first': str(o.a), 'second': str(o.b), 'relation': o.relation.value}
                 for o in report.overlaps],
                title=title,
            )
        elif state.output_format == "table":
            console.print(f"✅ [bold green]No overlaps among {len(report.entries)} entries[/bold green]")

    if not report.healthy:
        raise typer.Exit(1)


@app.command()
def overlaps(
    definitions: Annotated[list[str], typer.Argument(help='Entries as label=cidr (or bare cidr)')],
):
    """🔀 Detect overlapping subnets and off-boundary definitions."""
    pairs = _parse_definitions(definitions)
    log_operation('overlaps', {'entries': len(pairs)})
    report = overlap.validate_cidrs(pairs)
    log_operation_result('overlaps', success=report.healthy, result=report,
                         error=None if report.healthy else f"{len(report.overlaps)} overlaps, {len(report.errors)} errors")
    _emit_report(report, title="Overlapping subnets")


@app.command()
def vlans(
    definitions: Annotated[list[str], typer.Argument(help='VLANs as ID:NAME:CIDR[,CIDR...]')],
):
    """🏷️ Check VLAN subnets for overlaps and duplicate IDs."""
    parsed: list[VLAN] = []
    for text in definitions:
        # Split at most twice so IPv6 subnets keep their colons
        pieces = text.split(':', 2)
        id_text = pieces[0].strip()
        if len(pieces) != 3 or not id_text.isdigit() or not overlap.is_valid_vlan_id(int(id_text)):
            err_console.print(f"❌ [bold red]Invalid VLAN definition: {escape(text)}[/bold red]")
            err_console.print("💡 Use ID:NAME:CIDR with an ID from 1 to 4094")
            raise typer.Exit(1)
        parsed.append(VLAN(
            id=int(id_text),
            name=pieces[1].strip(),
            subnets=[s.strip() for s in pieces[2].split(',') if s.strip()],
        ))

    for vlan in parsed:
        if overlap.is_reserved_vlan(vlan.id):
            err_console.print(f"⚠️ [yellow]VLAN {vlan.id} is reserved (default or legacy VLAN)[/yellow]")

    log_operation('vlans', {'vlans': len(parsed)})
    report = overlap.check_vlan_subnets(parsed)
    log_operation_result('vlans', success=report.healthy, result=report)
    _emit_report(report, title="Overlapping VLAN subnets")


@app.command()
def statement(
    address: Annotated[str, typer.Argument(help='Network address or CIDR')],
    wildcard: Annotated[Optional[str], typer.Argument(help='Wildcard mask, e.g. 0.0.0.255')] = None,
    area: Annotated[Optional[str], typer.Option('--area', help='OSPF area')] = None,
):
    """🛣️ Validate an OSPF/EIGRP network statement."""
    result = _run('statement', {'address': address, 'wildcard': wildcard},
                  overlap.evaluate_network_statement(address, wildcard, area))
    _warn(result.warnings)
    if state.output_format == "table":
        console.print(f"[bold green]{result.render()}[/bold green]")
    else:
        _emit([{'network': str(result.subnet.network), 'wildcard': str(result.wildcard),
                'cidr': result.subnet.cidr, 'area': result.area}], title="Network statement")


@app.command()
def route(
    destination: Annotated[str, typer.Argument(help='Destination network or CIDR')],
    mask: Annotated[Optional[str], typer.Option('--mask', help='Mask or prefix when not in CIDR')] = None,
    next_hop: Annotated[Optional[str], typer.Option('--next-hop', help='Next-hop address')] = None,
    interface: Annotated[Optional[str], typer.Option('--interface', help='Exit interface')] = None,
    distance: Annotated[Optional[str], typer.Option('--distance', help='Administrative distance')] = None,
):
    """🧭 Validate a static route."""
    result = _run('route', {'destination': destination},
                  overlap.evaluate_static_route(destination, mask, next_hop, interface, distance))
    _warn(result.warnings)
    if state.output_format == "table":
        console.print(f"[bold green]{result.render()}[/bold green]")
    else:
        _emit([{'destination': result.destination.cidr, 'netmask': str(result.destination.netmask),
                'next_hop': str(result.next_hop) if result.next_hop else None,
                'exit_interface': result.exit_interface,
                'admin_distance': result.admin_distance}], title="Static route")


@app.command("ipv6")
def ipv6_info(
    address: Annotated[str, typer.Argument(help='IPv6 address, optionally with /prefix')],
):
    """🌐 Compress, expand and classify an IPv6 address or prefix."""
    facts = _run('ipv6', {'address': address}, ipv6.calculate_ipv6_subnet(address))
    _emit([facts], title=f"IPv6 {facts.cidr}")


@app.command()
def summarize(
    cidrs: Annotated[list[str], typer.Argument(help='IPv4 networks to summarize')],
):
    """🧩 Merge networks into the fewest covering CIDR blocks."""
    subnets = [_parse_network('summarize', text) for text in cidrs]
    summary = ipv4.summarize_subnets(subnets)
    _emit([{'cidr': s.cidr, 'addresses': s.total_address_count} for s in summary],
          title="Summary routes")


@app.command()
def convert(
    value: Annotated[str, typer.Argument(help='IPv4 address in the chosen notation')],
    source: Annotated[
        str, typer.Option('--from', help='Input notation (dotted, decimal, binary, hex)')
    ] = 'dotted',
):
    """🔁 Show an IPv4 address in every notation."""
    address = _run('convert', {'value': value, 'from': source}, ipv4.parse_address_any(value, source))
    _emit([ipv4.address_formats(address)], title=f"Address {address}")


@app.command()
def hosts(
    cidr: Annotated[str, typer.Argument(help='Network to enumerate')],
    limit: Annotated[Optional[int], typer.Option('--limit', min=1, help='Maximum addresses to list')] = None,
):
    """📋 List usable host addresses of a network."""
    block = _parse_network('hosts', cidr)
    count = state.config.enumerate_limit if limit is None else limit
    addresses = list(ipv4.iter_hosts(block, count))
    _emit([{'address': str(a)} for a in addresses], title=f"Hosts in {block.cidr}")
    if state.output_format == "table" and len(addresses) < block.usable_host_count:
        console.print(f"… {block.usable_host_count - len(addresses)} more not shown")


if __name__ == "__main__":
    app()
