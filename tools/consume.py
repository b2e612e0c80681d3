"""Replay generated fee fixtures against the calculator."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

from tron_fees.errors import FeeError
from tron_fees.fees.calculator import FeeCalculator
from tron_fees.scenario import breakdown_to_list, scenario_from_dict

ROOT = Path(__file__).resolve().parent.parent


async def _check_cases(path: Path) -> list[str]:
    failures: list[str] = []
    data = json.loads(path.read_text())

    for case in data.get("cases", []):
        scenario = scenario_from_dict(case)
        calculator = FeeCalculator(scenario.static_source())
        try:
            breakdown = await calculator.compute_fee(
                scenario.network,
                scenario.transaction,
                scenario.available_energy,
                scenario.available_bandwidth,
                fee_limit=scenario.fee_limit,
            )
        except FeeError as e:
            failures.append(f"{case['name']}: {e}")
            continue

        if breakdown_to_list(breakdown) != case["expected"]:
            failures.append(f"{case['name']}: breakdown_mismatch")

    return failures


def main() -> None:
    fixtures = ROOT / "fixtures"

    failures: list[str] = []
    for path in sorted(fixtures.glob("**/*.json")):
        failures.extend(asyncio.run(_check_cases(path)))

    if failures:
        for f in failures:
            print("FAIL", f)
        raise SystemExit(1)

    print("All fixtures passed")


if __name__ == "__main__":
    main()
