"""Command-line front end for git-pet."""

from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Sequence

from pydantic import ValidationError

from . import __version__
from .catalog import AchievementCatalog, CatalogLoadError, load_catalog
from .config import GitPetSettings, get_settings
from .engine import (
    exp_required_for_next_level,
    feed,
    normalize_progress,
    play,
    process_event,
    rename,
    resolve_mood,
)
from .engine.constants import OLD_BRANCH_WEEKS
from .engine.mood import count_old_branches
from .git import GitNotFoundError, GitRunner, RepositoryInspector, RepositorySnapshot
from .storage import Mood, PetState, StateStore
from .timeutils import hours_since, utcnow

logger = logging.getLogger(__name__)

FACES = {
    Mood.NEUTRAL: "( o_o )",
    Mood.HAPPY: "( ^o^ )",
    Mood.SAD: "( ;_; )",
    Mood.BORED: "( -_- )",
    Mood.STRESSED: "( >_< )",
    Mood.THINKING: "( o_O )",
    Mood.CONFUSED: "( ?_? )",
}

CONFIG_KEYS = ("checkRemoteStatus",)

HOOK_SCRIPTS = {
    "post-commit": """#!/bin/sh
# git-pet post-commit hook
if [ -n "$(git diff-tree --no-commit-id --name-only -r HEAD)" ]; then
    git-pet react post-commit --changes || true
else
    git-pet react post-commit || true
fi
""",
    "post-merge": """#!/bin/sh
# git-pet post-merge hook
git-pet react post-merge || true
""",
    "pre-push": """#!/bin/sh
# git-pet pre-push hook
git-pet react pre-push || true
""",
}


def configure_logging(level: str) -> None:
    """Configure root logging for the git-pet CLI."""

    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )


def load_store(settings: GitPetSettings) -> StateStore:
    return StateStore(settings.state_path)


def load_achievements(settings: GitPetSettings) -> AchievementCatalog:
    return load_catalog(settings.catalog_paths)


async def collect_snapshot(settings: GitPetSettings, *, check_remote_status: bool) -> RepositorySnapshot:
    """Inspect the repository in the current directory."""

    try:
        runner = GitRunner(
            Path(settings.git_path) if settings.git_path else None,
            timeout=settings.git_timeout,
        )
    except GitNotFoundError as exc:
        logger.error("Cannot inspect repository", extra={"error": str(exc)})
        return RepositorySnapshot.not_a_repository(str(exc))
    inspector = RepositoryInspector(runner, check_remote_status=check_remote_status)
    return await inspector.snapshot()


def render_face(mood: Mood, name: str) -> str:
    return f"{FACES.get(mood, FACES[Mood.NEUTRAL])}  {name}"


def _format_age(value: datetime | None, now: datetime, *, never: str = "Never") -> str:
    hours = hours_since(value, now)
    if hours is None:
        return never
    if hours < 1:
        return f"{int(hours * 60)} minutes ago"
    if hours < 48:
        return f"{hours:.1f} hours ago"
    return f"{hours / 24:.1f} days ago"


def _print_stats(state: PetState) -> None:
    pet = state.global_pet
    print(f"Hunger: {pet.hunger}/100")
    print(f"Happiness: {pet.happiness}/100")
    print(f"Level {pet.level} ({pet.experience}/{exp_required_for_next_level(pet.level)} EXP)")


def _load(settings: GitPetSettings) -> tuple[StateStore, PetState]:
    store = load_store(settings)
    state = store.load()
    normalize_progress(state.global_pet)
    return store, state


def cmd_status(args: argparse.Namespace, settings: GitPetSettings) -> int:
    now = utcnow()
    store, state = _load(settings)
    pet = state.global_pet
    snapshot = asyncio.run(
        collect_snapshot(settings, check_remote_status=state.config.check_remote_status)
    )
    result = resolve_mood(pet, snapshot, now)
    pet.animation_frame += 1

    if not snapshot.is_git_repo:
        print(f"You're not in a Git repository. {pet.name} is a bit confused!")
    print(render_face(result.mood, pet.name))
    print(f"Mood: {result.mood.value}")
    _print_stats(state)
    store.save(state)
    return 0


def cmd_summary(args: argparse.Namespace, settings: GitPetSettings) -> int:
    now = utcnow()
    store, state = _load(settings)
    pet = state.global_pet
    config = state.config
    snapshot = asyncio.run(collect_snapshot(settings, check_remote_status=config.check_remote_status))
    result = resolve_mood(pet, snapshot, now)

    print("--- git-pet State Summary ---")
    print(f"\nPet: {pet.name}")
    print(f"Current Mood: {result.mood.value} (Reason: {result.reason})")
    _print_stats(state)

    print("\nRecent Activity:")
    print(f"  Last Fed: {_format_age(pet.last_fed, now)}")
    print(f"  Last Played: {_format_age(pet.last_played, now)}")
    print(f"  Last Commit Seen: {_format_age(pet.last_commit_timestamp, now, never='None')}")

    print("\nRepository State:")
    if not snapshot.is_git_repo:
        print("  Not currently in a Git repository.")
    else:
        print(f"  Repository Root: {snapshot.repo_root_dir}")
        print(f"  Current Branch: {snapshot.current_branch}")
        print(f"  Uncommitted Changes: {'Yes' if snapshot.has_uncommitted_changes else 'No'}")
        print(f"  Merge Conflicts: {'YES' if snapshot.has_conflicts else 'No'}")
        if config.check_remote_status:
            print("  Remote Status Check: Enabled")
            print(f"    Ahead of Remote: {snapshot.ahead_count}")
            print(f"    Behind Remote: {snapshot.behind_count}")
        else:
            print('  Remote Status Check: Disabled (use "config set checkRemoteStatus true" to enable)')
        print(f"  Old Branches (> {OLD_BRANCH_WEEKS} weeks): {count_old_branches(snapshot, now)}")
        if snapshot.error:
            print(f"  Warnings: {snapshot.error}")

    store.save(state)
    print("\n--- End Summary ---")
    return 0


def cmd_feed(args: argparse.Namespace, settings: GitPetSettings) -> int:
    store, state = _load(settings)
    pet = state.global_pet
    feed(pet, utcnow())
    print(f"{pet.name} enjoys the virtual snack!")
    print(render_face(pet.mood, pet.name))
    _print_stats(state)
    store.save(state)
    return 0


def cmd_play(args: argparse.Namespace, settings: GitPetSettings) -> int:
    store, state = _load(settings)
    pet = state.global_pet
    play(pet, utcnow())
    print(f"{pet.name} looks happy after playing!")
    print(render_face(pet.mood, pet.name))
    _print_stats(state)
    store.save(state)
    return 0


def cmd_name(args: argparse.Namespace, settings: GitPetSettings) -> int:
    store, state = _load(settings)
    try:
        old_name = rename(state.global_pet, args.petname)
    except ValueError as exc:
        print(str(exc))
        return 2
    store.save(state)
    print(f"You renamed '{old_name}' to '{state.global_pet.name}'!")
    return 0


def _parse_config_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered not in {"true", "false"}:
        raise ValueError(f"Invalid value '{value}'. Expected true or false.")
    return lowered == "true"


def cmd_config(args: argparse.Namespace, settings: GitPetSettings) -> int:
    store, state = _load(settings)
    config = state.config

    if args.action == "set":
        if args.key is None or args.value is None:
            print("Both <key> and <value> are required for 'set'.")
            return 2
        try:
            config.check_remote_status = _parse_config_bool(args.value)
        except ValueError as exc:
            print(str(exc))
            return 2
        store.save(state)
        print(f"Configuration updated: {args.key} set to {str(config.check_remote_status).lower()}")
        return 0

    if args.action == "get":
        if args.key is None:
            print("<key> is required for 'get'.")
            return 2
        print(f"{args.key}: {str(config.check_remote_status).lower()}")
        return 0

    print("--- git-pet Configuration ---")
    for key, value in config.model_dump(by_alias=True).items():
        print(f"{key}: {str(value).lower() if isinstance(value, bool) else value}")
    return 0


def cmd_achievements(args: argparse.Namespace, settings: GitPetSettings) -> int:
    catalog = load_achievements(settings)
    _, state = _load(settings)
    unlocked = state.global_pet.achievements

    print("--- git-pet Achievements ---")
    if not unlocked:
        print("\n(No achievements unlocked yet! Keep using Git!)")
        return 0

    print(f"\nUnlocked {len(unlocked)} achievement(s):\n")
    for key, unlocked_at in sorted(unlocked.items(), key=lambda item: item[1]):
        definition = catalog.get(key)
        bonus = f" [+{definition.bonus_exp} EXP Bonus]" if definition and definition.bonus_exp else ""
        print(f"- {catalog.display_name(key)}{bonus}")
        if definition and definition.description:
            print(f"    {definition.description}")
        print(f"    (Unlocked: {unlocked_at:%Y-%m-%d %H:%M})")
    return 0


def cmd_react(args: argparse.Namespace, settings: GitPetSettings) -> int:
    catalog = load_achievements(settings)
    outcome = process_event(
        args.event,
        list(args.event_args),
        store=load_store(settings),
        catalog=catalog,
    )
    if args.quiet or not outcome.recognized:
        return 0
    if outcome.exp_awarded:
        print(f"+{outcome.exp_awarded} EXP")
    if outcome.levels_gained:
        print(f"LEVEL UP! (+{outcome.levels_gained})")
    for key in outcome.achievements_unlocked:
        print(f"Achievement Unlocked: {catalog.display_name(key)}")
    return 0


def cmd_hooks(args: argparse.Namespace, settings: GitPetSettings) -> int:
    if args.action == "install-instructions":
        print("--- git-pet Hook Installation (Manual) ---")
        print("Add the following scripts to your repository's .git/hooks/ directory")
        print("and make them executable (chmod +x .git/hooks/<hookname>).\n")
        for index, (hook, script) in enumerate(HOOK_SCRIPTS.items(), start=1):
            print(f"{index}. .git/hooks/{hook}:")
            print(script)
        print("Note: this replaces any existing hook of the same name. Back them up first!")
    else:
        print("--- git-pet Hook Uninstallation (Manual) ---")
        print("Delete the git-pet hook files from your repository's .git/hooks/ directory:")
        for hook in HOOK_SCRIPTS:
            print(f"  rm .git/hooks/{hook}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="git-pet", description="A virtual pet that lives in your git repository")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log diagnostics to stderr")
    parser.set_defaults(handler=cmd_status)
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("status", help="Check the status and mood of your pet").set_defaults(handler=cmd_status)
    sub.add_parser("summary", help="Show the factors affecting the pet's state").set_defaults(
        handler=cmd_summary
    )
    sub.add_parser("feed", help="Feed your pet").set_defaults(handler=cmd_feed)
    sub.add_parser("play", help="Play with your pet to boost happiness").set_defaults(handler=cmd_play)

    name = sub.add_parser("name", help="Give your pet a name")
    name.add_argument("petname")
    name.set_defaults(handler=cmd_name)

    config = sub.add_parser("config", help="View or set configuration options")
    config.add_argument("action", choices=["set", "get", "list"])
    config.add_argument("key", nargs="?", choices=CONFIG_KEYS)
    config.add_argument("value", nargs="?")
    config.set_defaults(handler=cmd_config)

    sub.add_parser(
        "achievements", aliases=["ach", "awards", "trophies"], help="List unlocked achievements"
    ).set_defaults(handler=cmd_achievements)

    react = sub.add_parser("react", help="React to a git event (called by hooks)")
    react.add_argument("--quiet", action="store_true", help="Print nothing")
    react.add_argument("event")
    react.add_argument("event_args", nargs=argparse.REMAINDER)
    react.set_defaults(handler=cmd_react)

    hooks = sub.add_parser("hooks", help="Show how to install or remove the git hooks")
    hooks.add_argument("action", choices=["install-instructions", "uninstall-instructions"])
    hooks.set_defaults(handler=cmd_hooks)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as exc:
        problems = "; ".join(error["msg"] for error in exc.errors())
        print(f"Invalid git-pet configuration: {problems}")
        return 1
    configure_logging("DEBUG" if args.verbose else settings.log_level)

    try:
        return args.handler(args, settings)
    except CatalogLoadError as exc:
        print(f"Achievement catalogue unavailable: {exc}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
