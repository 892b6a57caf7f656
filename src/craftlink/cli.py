"""CLI entry point for craftlink."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from craftlink.config import load_config, resolve_credentials
from craftlink.host import PostUploadAction, PrintHost, Progress, UploadRequest, create_print_host


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="craftlink",
        description="Test and upload files to a Craftbot printer",
    )
    sub = parser.add_subparsers(dest="command")

    # Shared args for subcommands
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    common.add_argument("config", type=Path, help="Path to a TOML file with a [printhost] table")

    sub.add_parser("test", parents=[common], help="Check the printer is reachable")

    upload_cmd = sub.add_parser("upload", parents=[common], help="Upload a file to the printer")
    upload_cmd.add_argument("file", type=Path, help="Local file to send")
    upload_cmd.add_argument(
        "--name", default=None, help="File name on the printer (default: local file name)"
    )
    upload_cmd.add_argument(
        "--start", action="store_true", help="Ask for the print to start after upload"
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    host = _make_host(args.config)
    if args.command == "test":
        ok = _cmd_test(host)
    else:
        ok = _cmd_upload(host, args)
    if not ok:
        sys.exit(1)


def _make_host(config_path: Path) -> PrintHost:
    cfg = resolve_credentials(load_config(config_path))
    return create_print_host(
        cfg.host_type, cfg.host, cfg.username, cfg.password, timeout=cfg.timeout
    )


def _cmd_test(host: PrintHost) -> bool:
    outcome = host.test()
    if outcome:
        print(host.get_test_ok_msg())
    else:
        print(host.get_test_failed_msg(outcome.error or ""))
    return outcome.success


def _cmd_upload(host: PrintHost, args: argparse.Namespace) -> bool:
    request = UploadRequest(
        source_path=args.file,
        upload_path=Path(args.name or args.file.name),
        post_action=PostUploadAction.START_PRINT if args.start else PostUploadAction.NONE,
    )
    print(f"Sending {request.upload_name} to {host.get_name()} at {host.get_host()}")

    def on_progress(progress: Progress) -> bool:
        if progress.total:
            pct = 100 * progress.transferred // progress.total
            print(f"\r  {pct:3d}% ({progress.transferred}/{progress.total} bytes)", end="")
        return False

    def on_error(msg: str) -> None:
        print(f"\n  Upload failed: {msg}")

    def on_info(tag: str, msg: str) -> None:
        print(f"\n  {msg}")

    return host.upload(request, on_progress, on_error, on_info)
