"""Command-line interface for the dietary safety assistant.

Usage:
    can-i-have-this status
    can-i-have-this onboard --name Ana --condition IBS --allergy Peanuts
    can-i-have-this ask "pad thai"
    can-i-have-this scan photo.jpg
    can-i-have-this mark Oatmeal --safe
    can-i-have-this log Oatmeal --status SAFE --at 08:30
    can-i-have-this day 2026-10-19
    can-i-have-this calendar 2026-10
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Awaitable, Callable
from datetime import date, datetime, time
from pathlib import Path

from pydantic import ValidationError

from can_i_have_this.app_logging import configure_logging
from can_i_have_this.config import Settings
from can_i_have_this.containers import AppContainer, build_container
from can_i_have_this.domain.analysis import AnalysisResult
from can_i_have_this.domain.catalog import (
    COMMON_ALLERGENS,
    MEDICAL_CONDITIONS,
    search_catalog,
)
from can_i_have_this.domain.profile import JournalEntry, JournalStatus, Theme
from can_i_have_this.services.classification import FoodList, InvalidFoodNameError
from can_i_have_this.services.coordinator import (
    AppView,
    FederatedIdentity,
    OnboardingDraft,
    ViewCoordinator,
)
from can_i_have_this.services.journal import from_timestamp_ms

Handler = Callable[[argparse.Namespace, ViewCoordinator], Awaitable[int]]

NO_PROFILE_MESSAGE = "No profile yet. Run `onboard` first."


async def cmd_status(args: argparse.Namespace, coordinator: ViewCoordinator) -> int:
    """Show the active profile."""
    profile = coordinator.profile
    if profile is None:
        print(NO_PROFILE_MESSAGE)
        return 1
    print(f"{profile.name} ({profile.auth_type.value}, id {profile.id})")
    print(f"Conditions: {_join(profile.conditions)}")
    print(f"Allergies: {_join(profile.allergies)}")
    print(f"Goals: {profile.goals or 'General Health'}")
    print(f"Safe foods: {_join(profile.safe_food_list)}")
    print(f"Journal entries: {len(profile.journal)}")
    return 0


async def cmd_onboard(args: argparse.Namespace, coordinator: ViewCoordinator) -> int:
    """Create a profile, signing in with a federated identity when given."""
    if args.sub:
        identity = FederatedIdentity(sub=args.sub, name=args.name, email=args.email)
        coordinator.login_federated(identity)
        if coordinator.view == AppView.DASHBOARD and coordinator.profile:
            print(f"Welcome back, {coordinator.profile.name}.")
            return 0
    else:
        coordinator.login_guest()
    profile = await coordinator.complete_onboarding(
        OnboardingDraft(
            name=args.name,
            conditions=args.condition,
            allergies=args.allergy,
            goals=args.goals,
        )
    )
    print(f"Profile created for {profile.name}.")
    print(f"Recommended to avoid: {_join(profile.generated_avoidance_list)}")
    return 0


async def cmd_medical(args: argparse.Namespace, coordinator: ViewCoordinator) -> int:
    """Replace conditions, allergies and goals, then refresh recommendations."""
    profile = await coordinator.update_medical_profile(
        args.condition, args.allergy, args.goals
    )
    if profile is None:
        print(NO_PROFILE_MESSAGE)
        return 1
    print(f"Recommended to avoid: {_join(profile.generated_avoidance_list)}")
    return 0


async def cmd_ask(args: argparse.Namespace, coordinator: ViewCoordinator) -> int:
    """Analyze a typed food description."""
    if coordinator.profile is None:
        print(NO_PROFILE_MESSAGE)
        return 1
    result = await coordinator.search_text(args.query)
    return _report_analysis(args, coordinator, result)


async def cmd_scan(args: argparse.Namespace, coordinator: ViewCoordinator) -> int:
    """Analyze a photo of a food or a label."""
    if coordinator.profile is None:
        print(NO_PROFILE_MESSAGE)
        return 1
    image_path = Path(args.image)
    if not image_path.is_file():
        print(f"Error: image not found: {image_path}")
        return 1
    result = await coordinator.search_image(image_path.read_bytes())
    return _report_analysis(args, coordinator, result)


async def cmd_mark(args: argparse.Namespace, coordinator: ViewCoordinator) -> int:
    """Mark a food as safe or unsafe."""
    profile = coordinator.add_food(args.food, args.safe)
    if profile is None:
        print(NO_PROFILE_MESSAGE)
        return 1
    print(f"Marked {args.food.strip()} as {'safe' if args.safe else 'unsafe'}.")
    return 0


async def cmd_unmark(args: argparse.Namespace, coordinator: ViewCoordinator) -> int:
    """Remove a food from one of the editable lists."""
    profile = coordinator.remove_food(args.food, FoodList(args.list))
    if profile is None:
        print(NO_PROFILE_MESSAGE)
        return 1
    print(f"Removed {args.food} from the {args.list} list.")
    return 0


async def cmd_log(args: argparse.Namespace, coordinator: ViewCoordinator) -> int:
    """Record a meal in the journal."""
    eaten_at = _eaten_at(args, coordinator)
    entry = coordinator.log_meal(
        args.food, JournalStatus(args.status), notes=args.notes, eaten_at=eaten_at
    )
    if entry is None:
        print(NO_PROFILE_MESSAGE)
        return 1
    print(f"Logged {_format_entry(entry, coordinator)}")
    return 0


async def cmd_day(args: argparse.Namespace, coordinator: ViewCoordinator) -> int:
    """List journal entries for a day."""
    if coordinator.profile is None:
        print(NO_PROFILE_MESSAGE)
        return 1
    day = args.date or datetime.now(tz=coordinator.timezone).date()
    entries = coordinator.entries_on_day(day)
    if not entries:
        print(f"No entries on {day.isoformat()}.")
        return 0
    for entry in entries:
        print(_format_entry(entry, coordinator))
    return 0


async def cmd_calendar(args: argparse.Namespace, coordinator: ViewCoordinator) -> int:
    """Show which days of a month have journal entries."""
    if coordinator.profile is None:
        print(NO_PROFILE_MESSAGE)
        return 1
    month = args.month
    days = coordinator.journal_index().days_in_month(month.year, month.month)
    if not days:
        print(f"No entries in {month:%Y-%m}.")
        return 0
    print(" ".join(f"{day.day:02d}" for day in days))
    return 0


async def cmd_avoid(args: argparse.Namespace, coordinator: ViewCoordinator) -> int:
    """Show everything to avoid, grouped by where it came from."""
    profile = coordinator.profile
    if profile is None:
        print(NO_PROFILE_MESSAGE)
        return 1
    print(f"Allergies: {_join(profile.allergies)}")
    print(f"Recommended: {_join(profile.generated_avoidance_list)}")
    print(f"My unsafe foods: {_join(profile.custom_avoidance_list)}")
    return 0


async def cmd_catalog(args: argparse.Namespace, coordinator: ViewCoordinator) -> int:
    """Search the built-in condition or allergen lists."""
    catalog = MEDICAL_CONDITIONS if args.kind == "conditions" else COMMON_ALLERGENS
    for item in search_catalog(catalog, args.query):
        print(item)
    return 0


async def cmd_theme(args: argparse.Namespace, coordinator: ViewCoordinator) -> int:
    """Switch the display theme."""
    if coordinator.set_theme(Theme(args.theme)) is None:
        print(NO_PROFILE_MESSAGE)
        return 1
    print(f"Theme set to {args.theme}.")
    return 0


async def cmd_logout(args: argparse.Namespace, coordinator: ViewCoordinator) -> int:
    """Forget the active profile on this device."""
    coordinator.logout()
    print("Logged out.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="can-i-have-this",
        description="Personal dietary safety assistant",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    status = subparsers.add_parser("status", help="Show the active profile")
    status.set_defaults(handler=cmd_status)

    onboard = subparsers.add_parser("onboard", help="Create a profile")
    onboard.add_argument("--name", required=True)
    _add_medical_arguments(onboard)
    onboard.add_argument("--sub", help="Federated identity subject")
    onboard.add_argument("--email", help="Federated identity address")
    onboard.set_defaults(handler=cmd_onboard)

    medical = subparsers.add_parser("medical", help="Update the medical profile")
    _add_medical_arguments(medical)
    medical.set_defaults(handler=cmd_medical)

    ask = subparsers.add_parser("ask", help="Ask whether a food is safe")
    ask.add_argument("query")
    _add_mark_argument(ask)
    ask.set_defaults(handler=cmd_ask)

    scan = subparsers.add_parser("scan", help="Analyze a food photo")
    scan.add_argument("image")
    _add_mark_argument(scan)
    scan.set_defaults(handler=cmd_scan)

    mark = subparsers.add_parser("mark", help="Mark a food safe or unsafe")
    mark.add_argument("food")
    verdict = mark.add_mutually_exclusive_group(required=True)
    verdict.add_argument("--safe", dest="safe", action="store_true")
    verdict.add_argument("--unsafe", dest="safe", action="store_false")
    mark.set_defaults(handler=cmd_mark)

    unmark = subparsers.add_parser("unmark", help="Remove a food from a list")
    unmark.add_argument("food")
    unmark.add_argument(
        "--list", choices=[item.value for item in FoodList], required=True
    )
    unmark.set_defaults(handler=cmd_unmark)

    log = subparsers.add_parser("log", help="Record a meal")
    log.add_argument("food")
    log.add_argument(
        "--status",
        choices=[item.value for item in JournalStatus],
        default=JournalStatus.NEUTRAL.value,
    )
    log.add_argument("--notes", default="")
    log.add_argument(
        "--date", type=_iso_date, help="Day of the meal (YYYY-MM-DD), default today"
    )
    log.add_argument(
        "--at", type=_clock_time, help="Time of the meal (HH:MM), default now"
    )
    log.set_defaults(handler=cmd_log)

    day = subparsers.add_parser("day", help="List meals for a day")
    day.add_argument(
        "date", nargs="?", type=_iso_date, help="YYYY-MM-DD, default today"
    )
    day.set_defaults(handler=cmd_day)

    calendar = subparsers.add_parser("calendar", help="Days with meals in a month")
    calendar.add_argument("month", type=_year_month, help="YYYY-MM")
    calendar.set_defaults(handler=cmd_calendar)

    avoid = subparsers.add_parser("avoid", help="Show all avoidances")
    avoid.set_defaults(handler=cmd_avoid)

    catalog = subparsers.add_parser("catalog", help="Search known conditions")
    catalog.add_argument("kind", choices=["conditions", "allergens"])
    catalog.add_argument("query", nargs="?", default="")
    catalog.set_defaults(handler=cmd_catalog)

    theme = subparsers.add_parser("theme", help="Set the display theme")
    theme.add_argument("theme", choices=[item.value for item in Theme])
    theme.set_defaults(handler=cmd_theme)

    logout = subparsers.add_parser("logout", help="Forget the active profile")
    logout.set_defaults(handler=cmd_logout)

    return parser


def main(argv: list[str] | None = None, container: AppContainer | None = None) -> int:
    """Entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose)
    if container is None:
        try:
            container = build_container(Settings())
        except (ValidationError, ValueError) as exc:
            print(f"Configuration error: {exc}", file=sys.stderr)
            return 2
    return asyncio.run(_run(args.handler, args, container))


async def _run(
    handler: Handler, args: argparse.Namespace, container: AppContainer
) -> int:
    coordinator = container.coordinator
    coordinator.start()
    try:
        return await handler(args, coordinator)
    except InvalidFoodNameError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        await container.close_resources()


def _add_medical_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--condition", action="append", default=[])
    parser.add_argument("--allergy", action="append", default=[])
    parser.add_argument("--goals", default="")


def _add_mark_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--mark",
        choices=["safe", "unsafe"],
        help="Record the analyzed food in your safe or unsafe list",
    )


def _report_analysis(
    args: argparse.Namespace,
    coordinator: ViewCoordinator,
    result: AnalysisResult | None,
) -> int:
    if result is None:
        print(f"Error: {coordinator.error_message or 'Analysis failed.'}")
        return 1
    verdict = "You can eat this." if result.can_eat else "Avoid this."
    print(f"{result.food_name}: {verdict} (threat {result.threat_level.value})")
    print(result.short_summary)
    if result.risky_ingredients:
        print(f"Risky ingredients: {_join(result.risky_ingredients)}")
    for nutrient in result.nutrients:
        print(
            f"  {nutrient.name} {nutrient.amount}: "
            f"risk {nutrient.risk_impact}/100 ({nutrient.reason})"
        )
    if args.mark:
        coordinator.classify_result(args.mark == "safe")
        print(f"Saved {result.food_name} as {args.mark}.")
    coordinator.back_to_dashboard()
    return 0


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}") from exc


def _year_month(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m").date()
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM, got {value!r}") from exc


def _clock_time(value: str) -> time:
    try:
        return datetime.strptime(value, "%H:%M").time()
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected HH:MM, got {value!r}") from exc


def _eaten_at(args: argparse.Namespace, coordinator: ViewCoordinator) -> datetime:
    moment = datetime.now(tz=coordinator.timezone)
    if args.date:
        moment = moment.replace(
            year=args.date.year, month=args.date.month, day=args.date.day
        )
    if args.at:
        moment = moment.replace(hour=args.at.hour, minute=args.at.minute)
    return moment.replace(second=0, microsecond=0)


def _format_entry(entry: JournalEntry, coordinator: ViewCoordinator) -> str:
    moment = from_timestamp_ms(entry.timestamp, coordinator.timezone)
    line = f"{moment:%Y-%m-%d %H:%M} {entry.food_name} [{entry.status.value}]"
    return f"{line} - {entry.notes}" if entry.notes else line


def _join(items: list[str]) -> str:
    return ", ".join(items) or "None"


if __name__ == "__main__":
    sys.exit(main())
