#!/usr/bin/env python3
"""
SupplyWatch operator CLI.

One-shot commands for the external scheduler and for operators:

    supply-watch status
    supply-watch sample [--json]
    supply-watch evaluate NEWEST_HEX ... OLDEST_HEX [--fail-on-trigger]

Exit codes: 0 ok / not triggered, 1 triggered (with --fail-on-trigger),
2 error.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from alerts.sink import build_sink, dispatch
from config.settings_schema import Settings, load_validated_settings
from core.exceptions import SupplyWatchError
from monitor.config_store import ConfigurationStore
from monitor.evaluator import evaluate
from monitor.sample import parse_hex
from monitor.sampler import Sampler
from monitor.web3_reader import Web3SupplyReader

logger = logging.getLogger("supply_watch")

EXIT_OK = 0
EXIT_TRIGGERED = 1
EXIT_ERROR = 2


def cmd_status(settings: Settings, args: argparse.Namespace) -> int:
    store = ConfigurationStore.from_settings(settings)
    snap = store.snapshot()
    print(json.dumps({
        "owner": store.owner,
        "target_token": snap.target_token,
        "max_allowed_increase": str(snap.max_allowed_increase),
        "status": snap.status.name,
        "window_size": settings.scheduler.window_size,
    }, indent=2))
    return EXIT_OK


def cmd_sample(settings: Settings, args: argparse.Namespace) -> int:
    store = ConfigurationStore.from_settings(settings)
    reader = Web3SupplyReader(
        rpc_url=args.rpc_url or settings.rpc.url,
        timeout_seconds=settings.rpc.timeout_seconds,
    )
    sample = Sampler(store, reader).capture()
    if args.json:
        print(json.dumps({"encoded": sample.hex(), **sample.to_dict()}, indent=2))
    else:
        print(sample.hex())
    return EXIT_OK


def cmd_evaluate(settings: Settings, args: argparse.Namespace) -> int:
    window = [parse_hex(s) for s in args.samples]
    result = evaluate(window)

    out = {"triggered": result.triggered, "payload": None}
    if result.triggered:
        alert = dispatch(result, build_sink(args.sink or settings.alerts.sink))
        out["payload"] = "0x" + result.payload.hex()
        out["alert"] = alert.to_dict()
    print(json.dumps(out, indent=2))

    if result.triggered and args.fail_on_trigger:
        return EXIT_TRIGGERED
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Bridged token supply spike monitor")
    ap.add_argument("--config", type=str, default=None, help="Path to settings YAML")
    ap.add_argument("--dotenv", type=str, default="./.env")
    ap.add_argument("-v", "--verbose", action="store_true")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("status", help="Show configuration state")
    p.set_defaults(func=cmd_status)

    p = sub.add_parser("sample", help="Capture one encoded supply sample")
    p.add_argument("--rpc-url", type=str, default=None)
    p.add_argument("--json", action="store_true", help="Print decoded fields too")
    p.set_defaults(func=cmd_sample)

    p = sub.add_parser("evaluate", help="Evaluate a window of encoded samples, newest first")
    p.add_argument("samples", nargs="*", help="0x-prefixed sample hex, newest first")
    p.add_argument("--sink", choices=["log", "memory", "telegram"], default=None)
    p.add_argument("--fail-on-trigger", action="store_true")
    p.set_defaults(func=cmd_evaluate)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    dotenv = Path(args.dotenv)
    if dotenv.exists():
        load_dotenv(dotenv)

    try:
        settings = load_validated_settings(args.config)
        return args.func(settings, args)
    except SupplyWatchError as e:
        logger.error(str(e))
        print(json.dumps({"error": e.to_dict()}, indent=2, default=str), file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
