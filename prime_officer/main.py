"""Command line entry point for Prime Officer"""
import argparse
import asyncio
import logging
import random
import sys
from typing import List, Optional

from prime_officer.config import DATA_PATH, LOG_LEVEL, validate_config
from prime_officer.exceptions import PrimeOfficerError, ValidationError
from prime_officer.gamification.streak_system import format_streak_display
from prime_officer.services import MissionService
from prime_officer.storage.json_store import get_store
from prime_officer.utils.datetime_helpers import safe_parse_iso_date

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO)
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="prime-officer", description="Gamified self-improvement tracker")
    parser.add_argument("--data", default=None, help=f"Data folder (default: {DATA_PATH})")
    parser.add_argument("--seed", type=int, default=None, help="Seed the mission draw")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("status", help="Show officer rank, streak and current phase")

    missions = sub.add_parser("missions", help="List today's missions")
    missions.add_argument("--filter", default="all", help="Domain or tag filter")

    complete = sub.add_parser("complete", help="Complete a mission card")
    complete.add_argument("card_id")

    sub.add_parser("reroll", help="Spend a bonus roll on new missions")
    sub.add_parser("timeline", help="Show roadmap phases")
    sub.add_parser("workout", help="Toggle today's workout")

    reflect = sub.add_parser("reflect", help="Add a reflection entry")
    reflect.add_argument("consistency", help="Self rating 0-100")
    reflect.add_argument("--mood", default="")
    reflect.add_argument("--summary", default="")
    reflect.add_argument("--insights", default="", help="';'-separated insights")
    reflect.add_argument("--date", default=None, help="Entry date YYYY-MM-DD (default: today)")
    return parser


def validate_reflection_args(args: argparse.Namespace) -> None:
    """Reject raw reflect input before any data is loaded

    Raises:
        ValidationError: Non-numeric consistency or malformed date
    """
    try:
        float(args.consistency)
    except ValueError as e:
        raise ValidationError(
            "Expected a number from 0 to 100",
            field="consistency",
            value=args.consistency,
            operation="reflect",
            cause=e,
        )
    if args.date is not None and safe_parse_iso_date(args.date) is None:
        raise ValidationError(
            "Expected YYYY-MM-DD",
            field="date",
            value=args.date,
            operation="reflect",
        )


def print_status(service: MissionService) -> None:
    dash = service.dashboard()
    officer = dash["officer"]
    print(f"{officer['rank_name']} - Level {officer['level']} "
          f"({officer['xp_into_level']}/{officer['xp_for_level']} XP, total {officer['total_xp']})")
    print(format_streak_display(dash["streak"]))

    phase = dash["current_phase"]
    print(f"Phase: {phase.name if phase else 'not started'}")

    reflection = dash["reflection"]
    print(f"Drift risk: {reflection['drift_risk']} (trend: {reflection['consistency_trend']})")

    for skill in dash["skill_overview"]:
        print(f"  {skill['name'] or skill['id']}: Lv {skill['level']} "
              f"({round(skill['level_progress'] * 100)}% of {skill['level_required_xp']} XP)")


def print_missions(service: MissionService, filter_value: str) -> None:
    view = service.missions_view(filter_value)
    rolls = view["rerolls"]
    print(f"Missions for {view['date']} - bonus rolls {rolls['remaining']}/{rolls['allowed']}")
    for item in view["missions"]:
        card = item["card"]
        mark = "x" if item["completed"] else " "
        print(f"  [{mark}] {card.id}: {card.title} ({card.domain}, {card.xp_reward} XP)")
    if view["tags"]:
        print(f"Tags: {', '.join(view['tags'])}")


def print_timeline(service: MissionService) -> None:
    for entry in service.dashboard()["timeline"]:
        phase = entry["phase"]
        print(f"  {phase.start_date} -> {phase.end_date}  {phase.name}: "
              f"{entry['time_status'].value} {round(entry['progress'] * 100)}%")


async def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    validate_config()
    if args.command == "reflect":
        validate_reflection_args(args)

    rng = None
    if args.seed is not None:
        rng = random.Random(args.seed)

    service = MissionService(get_store(args.data), rng=rng)
    await service.bootstrap()

    if args.command == "status":
        print_status(service)
    elif args.command == "missions":
        print_missions(service, args.filter)
    elif args.command == "complete":
        print((await service.complete_mission(args.card_id))["message"])
    elif args.command == "reroll":
        result = await service.reroll()
        print(result["message"])
        if result["success"]:
            print_missions(service, "all")
    elif args.command == "timeline":
        print_timeline(service)
    elif args.command == "workout":
        done = await service.toggle_workout()
        print("Workout done ✅" if done else "Workout marked not done")
    elif args.command == "reflect":
        entry = await service.add_reflection(
            args.consistency, args.mood, args.summary, args.insights, date=args.date
        )
        print(f"Saved {entry.id}")
    return 0


def main() -> None:
    """Main application entry point"""
    try:
        sys.exit(asyncio.run(run()))
    except PrimeOfficerError as e:
        print(e.user_message, file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted")
        sys.exit(130)


if __name__ == "__main__":
    main()
