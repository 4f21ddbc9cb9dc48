"""
scenario_loader.py - Scenario configuration loader for the statecraft engine.

Loads YAML scenario files and converts them into the objects the engine
consumes: an EngineParams pack and the national figures new_game() needs.

Scenario layout:

    name: balanced_republic
    description: ...
    seed: 42
    country:
      name: Republic of Example
      population: 10000000
      gdp: 500000
      seats: 300
      budget: 10000
      political_capital: 50
      stability: 60
      popularity: 50
      court_size: 9
      ideology: Centrist
    params:
      election_turn: 48
      parliament_event_chance: 0.25

Public API:
    load_scenario(path)                 -> Scenario
    build_engine_params(block)          -> EngineParams
    build_settings(block, seed)         -> ScenarioSettings
    list_scenarios(directory)           -> list of (name, description) tuples
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import yaml

from statecraft.core.enums import Ideology
from statecraft.core.errors import ConfigError
from statecraft.core.params import DEFAULT_PARAMS, EngineParams
from statecraft.core.state import GameState
from statecraft.simulation.bootstrap import new_game


# ─────────────────────────────────────────────────────────────────────────── #
# Settings                                                                     #
# ─────────────────────────────────────────────────────────────────────────── #

@dataclass(frozen=True)
class ScenarioSettings:
    """National figures for a new game."""

    country_name: str = "Republic"
    population: int = 10_000_000
    gdp: float = 500_000.0
    total_seats: int = 300
    budget: float = 10_000.0
    political_capital: float = 50.0
    stability: float = 60.0
    popularity: float = 50.0
    court_size: int = 9
    ideology: Ideology = Ideology.CENTRIST
    seed: Optional[int] = None


@dataclass(frozen=True)
class Scenario:
    name: str
    description: str = ""
    settings: ScenarioSettings = field(default_factory=ScenarioSettings)
    params: EngineParams = DEFAULT_PARAMS

    def new_game(self, seed: Optional[int] = None) -> GameState:
        """Build the opening state; an explicit seed beats the scenario's."""
        s = self.settings
        rng = np.random.default_rng(seed if seed is not None else s.seed)
        return new_game(
            rng,
            country_name=s.country_name,
            population=s.population,
            gdp=s.gdp,
            total_seats=s.total_seats,
            budget=s.budget,
            political_capital=s.political_capital,
            stability=s.stability,
            popularity=s.popularity,
            court_size=s.court_size,
            ideology=s.ideology,
        )


# Maps each YAML key of the country block → ScenarioSettings field name
_COUNTRY_MAP: Dict[str, str] = {
    "name":              "country_name",
    "population":        "population",
    "gdp":               "gdp",
    "seats":             "total_seats",
    "budget":            "budget",
    "political_capital": "political_capital",
    "stability":         "stability",
    "popularity":        "popularity",
    "court_size":        "court_size",
    "ideology":          "ideology",
}

_TOP_LEVEL_KEYS = {"name", "description", "seed", "country", "params"}


# ─────────────────────────────────────────────────────────────────────────── #
# Block conversion                                                             #
# ─────────────────────────────────────────────────────────────────────────── #

def build_engine_params(block: Optional[Dict[str, Any]]) -> EngineParams:
    """
    Convert a flat ``params:`` block into an EngineParams instance.

    Unknown fields are ignored with a warning; fields not present fall back
    to the EngineParams defaults.

    Raises:
        ConfigError: If the block is not a mapping or a value is rejected
                     by EngineParams validation.
    """
    if block is None:
        return DEFAULT_PARAMS
    if not isinstance(block, dict):
        raise ConfigError(f"'params' must be a mapping, got {type(block).__name__}")

    valid_fields = set(EngineParams.__dataclass_fields__.keys())
    kwargs: Dict[str, Any] = {}
    for key, value in block.items():
        if key in valid_fields:
            kwargs[key] = value
        else:
            warnings.warn(f"Unknown EngineParams field ignored: {key}")
    try:
        return EngineParams(**kwargs)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"invalid engine parameters: {exc}") from exc


def build_settings(block: Optional[Dict[str, Any]], seed: Optional[int] = None) -> ScenarioSettings:
    """
    Convert a ``country:`` block into ScenarioSettings.

    Raises:
        ConfigError: On a non-mapping block or an unknown ideology.
    """
    if block is None:
        return ScenarioSettings(seed=seed)
    if not isinstance(block, dict):
        raise ConfigError(f"'country' must be a mapping, got {type(block).__name__}")

    kwargs: Dict[str, Any] = {"seed": seed}
    for yaml_key, value in block.items():
        if yaml_key not in _COUNTRY_MAP:
            warnings.warn(f"Unknown country field ignored: {yaml_key}")
            continue
        kwargs[_COUNTRY_MAP[yaml_key]] = value

    if "ideology" in kwargs:
        try:
            kwargs["ideology"] = Ideology(kwargs["ideology"])
        except ValueError as exc:
            choices = [i.value for i in Ideology]
            raise ConfigError(
                f"unknown ideology {kwargs['ideology']!r}. Choose from {choices}"
            ) from exc

    try:
        for name in ("population", "total_seats", "court_size"):
            if name in kwargs:
                kwargs[name] = int(kwargs[name])
        for name in ("gdp", "budget", "political_capital", "stability", "popularity"):
            if name in kwargs:
                kwargs[name] = float(kwargs[name])
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"invalid country figure: {exc}") from exc
    return ScenarioSettings(**kwargs)


# ─────────────────────────────────────────────────────────────────────────── #
# YAML loading + validation                                                    #
# ─────────────────────────────────────────────────────────────────────────── #

def _read_yaml(path: Path) -> Dict[str, Any]:
    with open(path, "r") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Scenario file {path} must contain a mapping at the top level.")
    return raw


def load_scenario(path: str) -> Scenario:
    """Load and validate a scenario YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigError:       If the file is malformed.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Scenario not found: {p.resolve()}")

    try:
        raw = _read_yaml(p)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Scenario file {p} is not valid YAML: {exc}") from exc

    for key in raw:
        if key not in _TOP_LEVEL_KEYS:
            warnings.warn(f"Unknown scenario key ignored: {key}")

    seed = raw.get("seed")
    if seed is not None and not isinstance(seed, int):
        raise ConfigError(f"'seed' must be an integer, got {seed!r}")

    return Scenario(
        name=str(raw.get("name", p.stem)),
        description=str(raw.get("description", "")).strip(),
        settings=build_settings(raw.get("country"), seed=seed),
        params=build_engine_params(raw.get("params")),
    )


def list_scenarios(directory: str = "scenarios") -> List[Tuple[str, str]]:
    """Return (name, description) for every ``*.yaml`` file in a directory."""
    result = []
    for p in sorted(Path(directory).glob("*.yaml")):
        raw = _read_yaml(p)
        result.append((str(raw.get("name", p.stem)), str(raw.get("description", "")).strip()))
    return result


# ─────────────────────────────────────────────────────────────────────────── #
# CLI inspection                                                               #
# ─────────────────────────────────────────────────────────────────────────── #

if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Inspect statecraft scenario files")
    parser.add_argument("path", nargs="?", default=None)
    parser.add_argument("--dir", default="scenarios")
    args = parser.parse_args()

    if args.path is None:
        print(f"\nAvailable scenarios in '{args.dir}':")
        for name, desc in list_scenarios(args.dir):
            print(f"  {name:<22} {desc[:80]}")
    else:
        scenario = load_scenario(args.path)
        print(f"\nSettings for '{scenario.name}':")
        for f in fields(scenario.settings):
            print(f"  {f.name:<30} = {getattr(scenario.settings, f.name)}")
        print(f"\nEngineParams for '{scenario.name}':")
        for k, v in scenario.params.to_dict().items():
            print(f"  {k:<30} = {v}")
