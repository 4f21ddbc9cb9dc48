#!/usr/bin/env python3
"""
cli.py - Statecraft Engine CLI entry point.

Runs headless simulations and inspects the engine parameter pack.

Usage:
    # Run four years with default figures
    python cli.py run --months 48 --seed 42

    # Run a scenario file and save the trajectory
    python cli.py run --config scenarios/balanced_republic.yaml --output logs/run.json

    # Answer every decision with its cheapest option
    python cli.py run --policy cheapest

    # Print the effective parameters of a scenario
    python cli.py params --config scenarios/fragile_coalition.yaml
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Callable, Dict, Optional

import numpy as np

from scenario_loader import Scenario, load_scenario
from statecraft.analysis.logging import StateLogger
from statecraft.analysis.metrics import summary_statistics
from statecraft.core.effects import DecisionOption, PresidentialDecision
from statecraft.simulation.orchestrator import TurnOrchestrator

logger = logging.getLogger("statecraft.cli")

DecisionPolicy = Callable[[PresidentialDecision], Optional[DecisionOption]]


def _option_cost(option: DecisionOption) -> float:
    if option.cost is None:
        return 0.0
    return option.cost.budget / 100.0 + option.cost.political_capital


def _first(decision: PresidentialDecision) -> Optional[DecisionOption]:
    return decision.options[0] if decision.options else None


def _cheapest(decision: PresidentialDecision) -> Optional[DecisionOption]:
    if not decision.options:
        return None
    return min(decision.options, key=_option_cost)


def _ignore(decision: PresidentialDecision) -> Optional[DecisionOption]:
    return None


POLICIES: Dict[str, DecisionPolicy] = {
    "first": _first,
    "cheapest": _cheapest,
    "ignore": _ignore,
}


def _load(config: Optional[str]) -> Scenario:
    if config:
        return load_scenario(config)
    return Scenario(name="default")


def cmd_run(args: argparse.Namespace) -> None:
    """Run a headless simulation."""
    scenario = _load(args.config)
    seed = args.seed if args.seed is not None else scenario.settings.seed
    state = scenario.new_game(seed)

    recorder = StateLogger()
    orchestrator = TurnOrchestrator(
        params=scenario.params,
        rng=np.random.default_rng(seed),
        post_step_hooks=[lambda before, after: recorder.record(after)],
    )
    orchestrator.initialise(state)
    recorder.record(orchestrator.state)
    policy = POLICIES[args.policy]

    if not args.quiet:
        print(f"\n  Statecraft Engine - {scenario.name} ({state.country_name})")
        print(f"  Months: {args.months}, Seed: {seed}, Policy: {args.policy}")
        print()

    for _ in range(args.months):
        orchestrator.tick()
        for decision in orchestrator.pending_decisions:
            option = policy(decision)
            if option is None:
                continue
            outcome = orchestrator.resolve(decision.id, option.id)
            if not outcome.ok:
                logger.info("decision %s/%s not applied: %s", decision.id, option.id, outcome.message)
        current = orchestrator.state
        if not args.quiet:
            s = current
            print(
                f"  month {s.months_elapsed:>3}  turn {s.turn:>2}  "
                f"pop {s.stats.popularity:5.1f}  stab {s.resources.stability:5.1f}  "
                f"cap {s.resources.political_capital:5.1f}  "
                f"unemp {s.stats.unemployment * 100:4.1f}%  "
                f"support {s.parliament.government_support:5.1f}"
            )
        if current.administration_ended:
            break

    final = orchestrator.state
    summary = summary_statistics(recorder.records())
    if not args.quiet:
        print()
        for line in final.logs[-10:]:
            print(f"  > {line}")
        print()
        for key, value in summary.items():
            print(f"  {key:<26} {value:.3f}")

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "scenario": scenario.name,
            "seed": seed,
            "summary": summary,
            "trajectory": recorder.to_dicts(),
            "logs": list(final.logs),
        }
        with open(output_path, "w") as f:
            json.dump(payload, f, indent=2, default=str)
        print(f"\n  Results saved to {output_path}")


def cmd_params(args: argparse.Namespace) -> None:
    """Print the effective engine parameters."""
    scenario = _load(args.config)
    values = scenario.params.to_dict()
    if args.json:
        print(json.dumps(values, indent=2, default=str))
        return
    print(f"\n  EngineParams for '{scenario.name}':")
    for key, value in values.items():
        print(f"    {key:<32} = {value}")
    print()


def main():
    parser = argparse.ArgumentParser(
        prog="statecraft",
        description="Statecraft Engine - turn-based nation management simulation",
    )
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # ── run ──────────────────────────────────────────────────────── #
    p_run = subparsers.add_parser("run", help="Run a headless simulation")
    p_run.add_argument("--config", type=str, default=None,
                       help="Path to a scenario YAML")
    p_run.add_argument("--months", type=int, default=48)
    p_run.add_argument("--seed", type=int, default=None)
    p_run.add_argument("--policy", choices=sorted(POLICIES), default="cheapest",
                       help="How pending decisions are answered")
    p_run.add_argument("--output", type=str, default=None,
                       help="Save the trajectory JSON to this path")
    p_run.add_argument("--quiet", action="store_true")
    p_run.set_defaults(func=cmd_run)

    # ── params ───────────────────────────────────────────────────── #
    p_params = subparsers.add_parser("params", help="Print the effective parameters")
    p_params.add_argument("--config", type=str, default=None)
    p_params.add_argument("--json", action="store_true")
    p_params.set_defaults(func=cmd_params)

    args = parser.parse_args()

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    if not args.command:
        parser.print_help()
        sys.exit(0)

    args.func(args)


if __name__ == "__main__":
    main()
