"""
cli.py
======
Command-line interface for the Tudor Mansion campaign planner.

Plans one campaign and prints either a readable briefing or the full plan as
JSON. All planning is delegated to campaign_planner; this module only
handles arguments, logging setup and output.

Usage:
    python cli.py --seed 42 --difficulty expert
    python cli.py --theme M04 --exclude-suspects S01 S02 --json
    python cli.py --seed 7 --validate

Exit codes:
    0  plan produced
    1  planning failed; a JSON {"code", "message"} object is printed to stderr
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from campaign_planner import plan_campaign
from config import DIFFICULTIES, load_planner_config
from errors import PlanningError
from game_elements import CATALOG
from models import CampaignPlan, ValidationResult, plan_to_dict
from validator import validate_campaign_plan

logger = logging.getLogger("tudor_mystery.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tudor-mystery",
        description="Plan a solvable Tudor Mansion theft mystery.",
    )
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for a reproducible plan (default: current time)")
    parser.add_argument("--difficulty", choices=DIFFICULTIES, default=None,
                        help="Pacing preset (default: TUDOR_MYSTERY_DIFFICULTY or intermediate)")
    parser.add_argument("--theme", dest="theme_id", default=None,
                        help="Mystery theme ID, e.g. M04")
    parser.add_argument("--exclude-suspects", nargs="*", default=[], metavar="ID")
    parser.add_argument("--exclude-items", nargs="*", default=[], metavar="ID")
    parser.add_argument("--exclude-locations", nargs="*", default=[], metavar="ID")
    parser.add_argument("--exclude-times", nargs="*", default=[], metavar="ID")
    parser.add_argument("--json", action="store_true",
                        help="Print the full plan as JSON")
    parser.add_argument("--validate", action="store_true",
                        help="Re-run the full plan validator and print its findings")
    return parser


def _print_issues(title: str, result: ValidationResult) -> None:
    print(f"\n{title}: {'VALID' if result.valid else 'INVALID'}")
    for issue in result.errors:
        print(f"  [error]   {issue.code}: {issue.message}")
    for issue in result.warnings:
        print(f"  [warning] {issue.code}: {issue.message}")


def print_plan(plan: CampaignPlan) -> None:
    """Readable briefing for a plan, solution included."""
    theme = CATALOG.theme(plan.theme_id)
    sol = plan.solution

    print("\n" + "=" * 60)
    print(f"   {theme.name if theme else plan.theme_id}  ({plan.id})")
    print("=" * 60)
    print(f"\nDIFFICULTY : {plan.difficulty}")
    print(f"SEED       : {plan.seed}")
    print(f"CULPRIT    : {CATALOG.name_of('suspect', sol.suspect_id)}")
    print(f"ITEM       : {CATALOG.name_of('item', sol.item_id)}")
    print(f"LOCATION   : {CATALOG.name_of('location', sol.location_id)}")
    print(f"TIME       : {CATALOG.name_of('time', sol.time_id)}")
    print("-" * 60)

    events_after = {}
    for event in plan.dramatic_events:
        events_after.setdefault(event.after_clue, []).append(event)

    for clue in plan.clues:
        names = ", ".join(CATALOG.name_of(clue.elimination.category, eid)
                          for eid in clue.elimination.element_ids)
        refs = f" (recalls {', '.join(map(str, clue.narrative.references))})" \
            if clue.narrative.references else ""
        print(f"{clue.position:>2}. [{clue.act}] {clue.delivery.speaker} "
              f"via {clue.delivery.type}, {clue.elimination.type}: {names}{refs}")
        for event in events_after.get(clue.position, []):
            print(f"    ** {event.event_type} ({event.purpose})")

    for herring in plan.red_herrings:
        resolved = f", resolved in {herring.resolved_in_clue}" if herring.resolved_in_clue else ""
        print(f"\nRed herring ({herring.type}) in clue {herring.introduced_in_clue}"
              f"{resolved}: {herring.hint}")

    _print_issues("Validation", plan.validation)


def run_cli(argv: Optional[List[str]] = None) -> int:
    """
    Parse arguments, plan a campaign and print it.

    Returns:
        Process exit code: 0 on success, 1 on a planning error.
    """
    args = build_parser().parse_args(argv)
    config = load_planner_config()

    request = {
        "difficulty":        args.difficulty,
        "theme_id":          args.theme_id,
        "seed":              args.seed,
        "exclude_suspects":  args.exclude_suspects,
        "exclude_items":     args.exclude_items,
        "exclude_locations": args.exclude_locations,
        "exclude_times":     args.exclude_times,
    }

    try:
        plan = plan_campaign(request, config=config)
    except PlanningError as exc:
        logger.error("Planning failed: %s", exc.message)
        print(json.dumps(exc.to_dict()), file=sys.stderr)
        return 1

    revalidation = validate_campaign_plan(plan) if args.validate else None

    if args.json:
        data = plan_to_dict(plan)
        if revalidation is not None:
            data["revalidation"] = dataclasses.asdict(revalidation)
        print(json.dumps(data, indent=2))
    else:
        print_plan(plan)
        if revalidation is not None:
            _print_issues("Full re-validation", revalidation)
    return 0


def main() -> None:
    # Load .env before reading any TUDOR_MYSTERY_* variables.
    load_dotenv()
    logging.basicConfig(
        level=load_planner_config().log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    sys.exit(run_cli())


if __name__ == "__main__":
    main()
