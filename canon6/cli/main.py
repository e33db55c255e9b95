import logging
import os
import re
import time
from typing import List

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from scapy.all import rdpcap, sniff

from canon6.analysis.address_stats import AddressStatistics
from canon6.analysis.ipv6_address import IPv6Address, InvalidAddressError
from canon6.analysis.ipv6_analyzer import IPv6Analyzer

app = typer.Typer(help="canon6 - RFC 5952 canonical IPv6 addresses, from segments or from the wire")
console = Console()
logger = logging.getLogger("canon6")

# one hex group, optional 0x prefix
SEGMENT_PATTERN = re.compile(r"(0[xX])?[0-9a-fA-F]{1,4}")
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def parse_segment(token):
    if not SEGMENT_PATTERN.fullmatch(token):
        raise InvalidAddressError(f"Not a 16-bit hex group: {token!r}")
    return int(token, 16)


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", envvar="CANON6_LOG_LEVEL", help="Logging level"),
):
    level = log_level.upper()
    if level not in LOG_LEVELS:
        console.print(f"[bold red]Unknown log level: {log_level} (choose from {', '.join(LOG_LEVELS)})[/bold red]")
        raise typer.Exit(code=1)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True,
    )


@app.command("format")
def format_address(
    segments: List[str] = typer.Argument(..., help="8 hex groups, most significant first"),
    as_bytes: bool = typer.Option(False, "--bytes", "-b", help="Print the raw ASCII bytes"),
):
    """
        canon6 format 2001 0db8 0 0 0 0 0 1
        canon6 format 0 0 0 0 0 0 0 1 --bytes
    """
    try:
        address = IPv6Address(*[parse_segment(token) for token in segments])
    except InvalidAddressError as e:
        console.print(f"[bold red]Invalid address: {e}[/bold red]")
        raise typer.Exit(code=1)

    logger.debug("Segments %s", address.segments)
    if as_bytes:
        console.print(repr(address.canonical_bytes()), highlight=False)
    else:
        console.print(address.canonical(), highlight=False)


@app.command()
def analyze(
    file: str = typer.Argument(..., help="PCAP file to analyze"),
    limit: int = typer.Option(20, "--limit", "-l", help="Number of packets to list"),
):
    """
        canon6 analyze capture.pcap
        canon6 analyze traffic.pcap --limit 50
    """
    console.print(f"[bold cyan]Analyzing {file}...[/bold cyan]\n")

    if not os.path.exists(file):
        console.print(f"[bold red]File not found: {file}[/bold red]")
        raise typer.Exit(code=1)

    analyzer = IPv6Analyzer()
    stats_collector = AddressStatistics()
    rows = []

    with console.status("[bold green]Reading PCAP file..."):
        packets = rdpcap(file)

    console.print(f"Found [yellow]{len(packets)}[/yellow] packets\n")

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Analyzing packets...", total=len(packets))

        for packet in packets:
            ipv6_info = analyzer.analyze(packet)
            if ipv6_info:
                stats_collector.update(ipv6_info)
                if len(rows) < limit:
                    rows.append(ipv6_info)
            progress.update(task, advance=1)

    if rows:
        table = Table(title=f"IPv6 Packets (showing {len(rows)})")
        table.add_column("Source", style="cyan", no_wrap=True)
        table.add_column("Destination", style="yellow", no_wrap=True)
        table.add_column("Next Header", style="green")
        table.add_column("Hop Limit", justify="right", style="magenta")

        for info in rows:
            table.add_row(
                info['src_ip'],
                info['dst_ip'],
                info['next_header_name'],
                str(info['hop_limit']),
            )
        console.print(table)
    else:
        console.print("[dim]No IPv6 packets found[/dim]")

    show_stats(stats_collector)


@app.command()
def capture(
    count: int = typer.Option(10, "--count", "-c", help="Number of packets to be captured"),
    interface: str = typer.Option(None, "--interface", "-i", envvar="CANON6_INTERFACE", help="Network interface to capture on"),
    filter: str = typer.Option("ip6", "--filter", "-f", help="BPF filter"),
):
    """
        canon6 capture -c 50
        canon6 capture -i eth0 -f "icmp6"
    """
    console.print("[bold cyan] Starting the packet capture.... [/bold cyan]")
    console.print(f"Interface: {interface or 'default'}")
    console.print(f"Count: {count}")
    console.print(f"Filter: {filter or None}\n")

    analyzer = IPv6Analyzer()
    stats_collector = AddressStatistics()
    start_time = time.time()

    def packet_handler(packet):
        ipv6_info = analyzer.analyze(packet)
        if ipv6_info:
            stats_collector.update(ipv6_info)
            console.print(
                f"  [green]IPv6:[/green] {ipv6_info['src_ip']} → {ipv6_info['dst_ip']} "
                f"({ipv6_info['next_header_name']})",
                highlight=False,
            )

    try:
        sniff(
            prn=packet_handler,
            count=count,
            iface=interface,
            filter=filter,
            store=False,
        )
        elapsed_time = time.time() - start_time
        console.print(f"\n[bold green] Captured {stats_collector.stats['ipv6']['total']} IPv6 packets in {elapsed_time:.2f}s![/bold green]")
        show_stats(stats_collector)

    except PermissionError:
        console.print("[bold red]Error: Need root Privileges for this operation")
        console.print("Run with sudo canon6 capture")
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        console.print(f"\n[yellow]  Interrupted! Captured {stats_collector.stats['ipv6']['total']} IPv6 packets[/yellow]")
        show_stats(stats_collector)


def show_stats(stats_collector):
    summary = stats_collector.get_summary()

    console.print("\n[bold]Session Statistics:[/bold]")
    console.print(f"  IPv6 Packets: {summary['ipv6']['total']}")
    console.print(f"  Total Bytes: {summary['total_bytes']:,}")
    console.print(f"  Unique Addresses: {summary['unique_addresses']}")

    if summary['top_sources']:
        talkers_table = Table(title="Top Source Addresses")
        talkers_table.add_column("IPv6 Address", style="cyan", no_wrap=True)
        talkers_table.add_column("Packet Count", justify="right", style="magenta")

        for address, count in summary['top_sources']:
            talkers_table.add_row(address, str(count))

        console.print(talkers_table)


if __name__ == "__main__":
    app()
