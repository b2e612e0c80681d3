#!/usr/bin/env python3
"""
tron-fees command line.

Quotes fee breakdowns for YAML scenarios, offline by default or against a
full node with --live.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import click
import yaml

from .clients.chain_parameters import CachedChainParameterSource
from .clients.config import ClientSettings
from .clients.tron_http import TronHttpClient
from .errors import FeeError
from .fees.calculator import FeeCalculator
from .fees.selectors import KNOWN_SELECTORS
from .networks import network_info, parse_network
from .scenario import FeeScenario, breakdown_to_list, load_scenarios

logger = logging.getLogger(__name__)


class PlainDumper(yaml.SafeDumper):
    pass


def _str_representer(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    # Double-quote any string the loader would resolve to a number, bool or null
    implicit_tag = dumper.resolve(yaml.ScalarNode, data, (True, False))
    style = '"' if implicit_tag != "tag:yaml.org,2002:str" else None
    return dumper.represent_scalar("tag:yaml.org,2002:str", data, style=style)


PlainDumper.add_representer(str, _str_representer)


def dump_yaml(data: Any) -> str:
    return yaml.dump(data, Dumper=PlainDumper, sort_keys=False, width=4096)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        stream=sys.stderr,
    )


async def _quote_all(scenarios: List[FeeScenario], live: bool, settings: ClientSettings) -> List[Dict[str, Any]]:
    results: List[Dict[str, Any]] = []
    client: Optional[TronHttpClient] = None
    if live:
        client = TronHttpClient(settings)
        await client.connect()
    try:
        for scenario in scenarios:
            if client is not None:
                source = CachedChainParameterSource(client, ttl_seconds=settings.chain_parameters_ttl)
            else:
                source = scenario.static_source()
            calculator = FeeCalculator(source)
            breakdown = await calculator.compute_fee(
                scenario.network,
                scenario.transaction,
                available_energy=scenario.available_energy,
                available_bandwidth=scenario.available_bandwidth,
                fee_limit=scenario.fee_limit,
            )
            logger.debug(f"{scenario.name}: {len(breakdown)} fee components")
            results.append(
                {
                    "name": scenario.name,
                    "network": scenario.network.value,
                    "network_name": network_info(scenario.network).name,
                    "fees": breakdown_to_list(breakdown),
                }
            )
    finally:
        if client is not None:
            await client.close()
    return results


@click.group()
def main() -> None:
    """Tron transaction fee estimation."""


@main.command()
@click.argument("scenario", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--network",
    default=None,
    help="Override the scenario network (CAIP-2 scope, e.g. tron:728126428)",
)
@click.option(
    "--live",
    is_flag=True,
    help="Fetch chain parameters and simulate contracts against a full node",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Enable verbose output",
)
def quote(scenario: Path, network: Optional[str], live: bool, verbose: bool) -> None:
    """Compute the fee breakdown for every scenario in SCENARIO."""
    settings = ClientSettings.from_env()
    _configure_logging(verbose or settings.verbose)

    try:
        scenarios = load_scenarios(scenario)
        if network:
            scope = parse_network(network)
            for s in scenarios:
                s.network = scope
        results = asyncio.run(_quote_all(scenarios, live, settings))
    except FeeError as e:
        logger.error(f"{e}")
        sys.exit(1)

    click.echo(dump_yaml(results if len(results) != 1 else results[0]), nl=False)


@main.command()
def selectors() -> None:
    """List the known function selectors."""
    for selector, signature in KNOWN_SELECTORS.items():
        click.echo(f"{selector}  {signature}")


@main.command()
@click.argument("address")
@click.option("--network", default="tron:728126428", help="CAIP-2 scope")
@click.option("--verbose", is_flag=True, help="Enable verbose output")
def resources(address: str, network: str, verbose: bool) -> None:
    """Show the free energy and bandwidth of ADDRESS (live)."""
    settings = ClientSettings.from_env()
    _configure_logging(verbose or settings.verbose)

    async def run() -> Dict[str, int]:
        async with TronHttpClient(settings) as client:
            res = await client.get_account_resources(network, address)
        return {"energy": res.available_energy, "bandwidth": res.available_bandwidth}

    try:
        click.echo(dump_yaml(asyncio.run(run())), nl=False)
    except FeeError as e:
        logger.error(f"{e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
