import argparse
import logging
import sys

from CafeOPS.config import database_url, log_level
from CafeOPS.core.errors import to_failure
from CafeOPS.core.service import CafeService
from CafeOPS.storage.store import CafeStore
from CafeOPS.ui.dashboard_view import (
    print_dashboard,
    print_failure,
    print_settings,
    print_tick_outcome,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cafeops", description="Café tick simulator and dashboard")
    parser.add_argument("--database-url", default=None, help="SQLAlchemy URL (default: $CAFEOPS_DATABASE_URL)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init", help="create the schema and default settings")
    sub.add_parser("tick", help="simulate and record one tick")

    metrics = sub.add_parser("metrics", help="print the dashboard metrics")
    metrics.add_argument("--json", action="store_true", help="dump the raw snapshot as JSON")

    settings = sub.add_parser("settings", help="show or patch the settings")
    settings.add_argument("--scenario", default=None)
    owner = settings.add_mutually_exclusive_group()
    owner.add_argument("--owner-salary", dest="include_owner_salary", action="store_true", default=None)
    owner.add_argument("--no-owner-salary", dest="include_owner_salary", action="store_false")

    sub.add_parser("rebuild", help="recompute rollups from the tick event log")
    return parser


def run(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        store = CafeStore.from_url(args.database_url or database_url())
        service = CafeService(store)
        service.bootstrap()

        if args.command == "init":
            print("Database initialized.")
        elif args.command == "tick":
            print_tick_outcome(service.process_tick())
        elif args.command == "metrics":
            snapshot = service.get_dashboard_metrics()
            if args.json:
                print(snapshot.model_dump_json(indent=2))
            else:
                print_dashboard(snapshot, service.config)
        elif args.command == "settings":
            payload = {
                key: value
                for key, value in (
                    ("scenario", args.scenario),
                    ("include_owner_salary", args.include_owner_salary),
                )
                if value is not None
            }
            settings = service.patch_settings(payload) if payload else store.get_settings()
            print_settings(settings)
        elif args.command == "rebuild":
            replayed = store.rebuild_rollups()
            print(f"Rollups rebuilt from {replayed} tick events.")
    except Exception as exc:
        logging.getLogger("cafeops").debug("Command failed", exc_info=True)
        print_failure(to_failure(exc))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(run())
