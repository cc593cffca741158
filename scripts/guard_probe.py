#!/usr/bin/env python3
"""Probe the Steam Guard endpoints for one account.

Loads an authenticator maFile, then runs read-only calls and prints the
parsed models, optionally with the raw payloads, so parsing gaps are
easy to spot.

Usage
-----
Log in once with another tool so the session file holds cookies, then::

    export STEAMGUARD_SESSION_FILE="$HOME/.config/steamguard/sessions.json"
    python scripts/guard_probe.py --mafile alice.maFile code
    python scripts/guard_probe.py --mafile alice.maFile confirmations --raw
    python scripts/guard_probe.py --mafile alice.maFile devices --filter active

Commands::

    code            Current one-time code
    confirmations   Pending confirmations
    devices         Authorized devices, sorted by activity
    security        Account security summary
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pysteamguard import Account, DeviceFilter, GuardConfig, GuardError, SteamGuardClient  # noqa: E402


def _section(title: str) -> str:
    return f"\n{'=' * 60}\n  {title}\n{'=' * 60}"


def _dump(model: Any, *, raw: bool) -> dict[str, Any]:
    data = model.model_dump(mode="json", exclude={"raw"})
    if raw and getattr(model, "raw", None):
        data["raw"] = model.raw
    return data


async def _run(args: argparse.Namespace) -> int:
    account = Account.from_mafile(json.loads(Path(args.mafile).read_text(encoding="utf-8")))
    config = GuardConfig.from_env()

    async with SteamGuardClient.from_config(config, accounts=[account]) as client:
        if args.command == "code":
            code = await client.get_code(account.id, timeout=args.timeout)
            print(_section("CODE"))
            print(f"  {code.code}  ({code.seconds_remaining}s left, offset {client.time_sync.offset:+d}s)")
            return 0

        if args.command == "confirmations":
            confirmations = await client.list_confirmations(account.id, timeout=args.timeout)
            print(_section(f"CONFIRMATIONS ({len(confirmations)})"))
            for confirmation in confirmations:
                print(json.dumps(_dump(confirmation, raw=args.raw), indent=2, ensure_ascii=False))
            return 0

        if args.command == "devices":
            devices = await client.list_devices(
                account.steamid,
                device_filter=args.filter,
                sort=True,
                timeout=args.timeout,
            )
            print(_section(f"DEVICES ({len(devices)})"))
            for device in devices:
                marker = "*" if device.is_current_device else " "
                print(f" {marker} {device.id:<22} {device.platform_label:<16} {device.description}")
                if args.raw:
                    print(json.dumps(device.raw, indent=2, ensure_ascii=False))
            return 0

        status = await client.get_security_status(account.steamid, timeout=args.timeout)
        print(_section("SECURITY"))
        print(json.dumps(_dump(status, raw=args.raw), indent=2, ensure_ascii=False))
        return 0


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Probe Steam Guard endpoints for one account")
    parser.add_argument("--mafile", required=True, help="Path to the account's maFile (JSON)")
    parser.add_argument("--timeout", type=float, default=None, help="Per-call timeout in seconds")
    parser.add_argument("--raw", action="store_true", help="Also print raw remote payloads")
    parser.add_argument(
        "--filter",
        choices=[f.value for f in DeviceFilter],
        default=DeviceFilter.ALL.value,
        help="Device filter for the devices command",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("command", choices=["code", "confirmations", "devices", "security"])
    return parser.parse_args()


def main() -> int:
    args = _parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)
    try:
        return asyncio.run(_run(args))
    except GuardError as exc:
        print(f"{type(exc).__name__} [{exc.kind}]: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
