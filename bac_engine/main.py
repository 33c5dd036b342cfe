"""
BAC engine CLI. Run from project root: python -m bac_engine.main
Logs drinks into the local ledger, prints the current state, and optionally saves a graph.
"""

import argparse
import sys
from datetime import timedelta

from bac_engine.config import EngineConfig
from bac_engine.drinks import DrinkKind
from bac_engine.errors import BacEngineError
from bac_engine.graph import save_bac_graph
from bac_engine.ledger import DrinkLedger
from bac_engine.profile import UserProfile
from bac_engine.safety import get_drive_advice
from bac_engine.stats import format_time_until_sober
from bac_engine.store import SqliteStore


def main():
    config = EngineConfig.from_env()
    parser = argparse.ArgumentParser(description="BAC tracker: log drinks and view estimated BAC")
    parser.add_argument("--db", type=str, default=config.db_path, help="SQLite file for the ledger")
    parser.add_argument("--weight", type=float, help="Body weight (lb); saved to the profile")
    parser.add_argument("--female", action="store_true", help="Female (with --weight)")
    parser.add_argument("--add", choices=[k.name.lower() for k in DrinkKind], help="Log one drink of this kind")
    parser.add_argument("--size", type=float, help="Serving size in fl oz (default: kind default)")
    parser.add_argument("--percent", type=float, help="ABV percent (default: kind default)")
    parser.add_argument("--hours-ago", type=float, default=0.0, help="When the drink was consumed")
    parser.add_argument("--clear", action="store_true", help="Clear all logged drinks")
    parser.add_argument("--graph", type=str, metavar="FILE", help="Save projected BAC graph to FILE")
    args = parser.parse_args()

    ledger = DrinkLedger(SqliteStore(args.db))

    try:
        if args.weight is not None:
            ledger.update_profile(UserProfile(weight_lb=args.weight, sex="female" if args.female else "male"))
        if args.clear:
            ledger.clear_drinks()
        if args.add:
            kind = DrinkKind.parse(args.add)
            at = ledger.now() - timedelta(hours=max(0.0, args.hours_ago))
            ledger.add_drink(
                kind,
                args.size if args.size is not None else kind.default_oz,
                args.percent if args.percent is not None else kind.default_percent,
                at=at,
            )
    except BacEngineError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    state = ledger.refresh()
    print(f"Weight: {state.profile.weight_lb} lb ({state.profile.sex.value}), drinks logged: {len(state.records)}")
    print(f"BAC now: {state.current_bac:.3f}%  peak today: {state.peak_bac_today:.3f}%  [{state.safety_status.value}]")
    print(f"Time until sober: {format_time_until_sober(state.time_until_sober)}")
    if state.is_drinking_session:
        print(f"Drinking session since {state.session_start_time:%H:%M}")
    print(f"Streak: {state.drinking_streak_days} drinking day(s), {state.sober_streak_days} sober day(s)")
    print(get_drive_advice(state.current_bac, state.time_until_sober)["action"])

    if args.graph:
        try:
            path = save_bac_graph(state.records, state.profile, state.as_of, output_path=args.graph, max_hours=8.0)
            print(f"Graph saved: {path}")
        except ImportError:
            print("matplotlib not installed. pip install matplotlib", file=sys.stderr)
            sys.exit(1)

    return 0


if __name__ == "__main__":
    sys.exit(main() or 0)
