#!/usr/bin/env python3
"""
Rules Engine Tools - Command Line Interface

Usage:
    python scripts/rules.py math                    # Run the combat math self-check
    python scripts/rules.py math --verbose          # Show every scenario
    python scripts/rules.py resolve encounter.json  # Resolve one card play, print JSON

Environment (also read from .env):
    RULES_WEAK_MULTIPLIER, RULES_BREAK_MULTIPLIER, RULES_THORNS_ENABLED, RULES_LOG_LEVEL
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Project setup
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from packages.rules.calc.scenarios import run_scenarios  # noqa: E402
from packages.rules.config import RulesConfig, load_config  # noqa: E402
from packages.rules.content.cards import Card  # noqa: E402
from packages.rules.effects.executor import EffectResolver  # noqa: E402
from packages.rules.errors import ConfigurationError  # noqa: E402
from packages.rules.state.combat import CombatState  # noqa: E402

logger = logging.getLogger("rules")


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_math(args: argparse.Namespace, config: RulesConfig) -> int:
    """Run every damage scenario and report PASS/FAIL."""
    outcomes = run_scenarios(config.weak_multiplier, config.break_multiplier)
    for outcome in outcomes:
        scenario = outcome.scenario
        if outcome.passed and not args.verbose:
            continue
        status = "PASS" if outcome.passed else "FAIL"
        print(f"[{status}] {scenario.name}: base {scenario.base} -> {outcome.actual} "
              f"(expected {scenario.expected})")
    failed = sum(1 for o in outcomes if not o.passed)

    print(f"\n{len(outcomes) - failed}/{len(outcomes)} scenarios passed")
    return 1 if failed else 0


def cmd_resolve(args: argparse.Namespace, config: RulesConfig) -> int:
    """Resolve the card in an encounter file and print the result."""
    path = Path(args.encounter)
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read encounter {path}: {e}")
        return 2

    try:
        combat = CombatState.from_dict(data)
        card = Card.from_dict(data["card"])
    except (ConfigurationError, KeyError, ValueError) as e:
        logger.error(f"Invalid encounter {path}: {e}")
        return 2

    resolver = EffectResolver(combat, config)
    result = resolver.resolve_card(card, data.get("source", ""), data.get("targets", []))

    output = result.to_dict()
    output["entities"] = {
        entity_id: {"health": e.health, "max_health": e.max_health, "energy": e.energy}
        for entity_id, e in combat.entities.items()
    }
    print(json.dumps(output, indent=2, default=str))
    return 0 if result.succeeded else 1


# =============================================================================
# MAIN
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Card-combat rules engine tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/rules.py math               Combat math self-check
  python scripts/rules.py math -v            Print every scenario
  python scripts/rules.py resolve fight.json Resolve a card play
""",
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="Load configuration from this .env file",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    math_parser = subparsers.add_parser(
        "math",
        help="Run the combat math scenario table",
    )
    math_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Print passing scenarios too",
    )

    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Resolve a card play described in a JSON encounter file",
    )
    resolve_parser.add_argument("encounter", help="Path to the encounter JSON")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        config = load_config(args.env_file)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(level=config.log_level, format=config.log_format)

    if args.command == "math":
        return cmd_math(args, config)
    elif args.command == "resolve":
        return cmd_resolve(args, config)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
