"""minichain.cli

Command line interface entry point for minichain.

Design constraints:
- argparse-based.
- Lazy imports: do not touch the store at parse time.
- Rendering lives here. The engine returns data.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

EPILOG = "Every block remembers the one before it."

RULE = "=" * 50


@dataclass(frozen=True)
class CliContext:
    repo_root: Path


def _repo_root_from_cwd() -> Path:
    return Path.cwd()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minichain",
        description="Append-only, hash-linked ledger.",
        epilog=EPILOG,
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit.",
    )

    sub = parser.add_subparsers(dest="command")

    p_init = sub.add_parser("init", help="Create the data directory and ledger database")
    p_init.add_argument(
        "--clock",
        choices=["local", "utc"],
        default=None,
        help="Record the block clock in config/user.yaml.",
    )

    p_add = sub.add_parser("add", help="Append a block")
    p_add.add_argument("payload", help="Text stored in the block.")

    sub.add_parser("show", help="Print every block, genesis first")
    sub.add_parser("verify", help="Verify chain integrity")
    sub.add_parser("menu", help="Interactive menu")
    sub.add_parser("status", help="Print ledger status")

    return parser


def _print_version() -> None:
    from minichain import __version__

    print(f"minichain v{__version__}")


def _load_config(ctx: CliContext):
    from minichain.core.config import Config

    return Config.load(ctx.repo_root)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _open_chain(ctx: CliContext):
    from minichain.core.chain import Blockchain
    from minichain.core.database import Database
    from minichain.core.time import clock_for

    config = _load_config(ctx)
    _configure_logging(config.logging.level)
    db = Database(ctx.repo_root / config.db_path)
    return db, Blockchain(db, clock=clock_for(config.chain.clock))


def _render_block(block) -> str:
    return "\n".join(
        [
            "",
            RULE,
            f"Sequence: {block.sequence}" + (" (genesis)" if block.is_genesis else ""),
            f"Created: {block.created_at}",
            f"Payload: {block.payload}",
            f"Previous digest: {block.predecessor_digest}",
            f"Digest: {block.digest}",
        ]
    )


def _write_user_config(*, user_cfg_path: Path, clock: str) -> None:
    import yaml

    from minichain.core.exceptions import ConfigError

    current: dict = {}
    if user_cfg_path.exists():
        try:
            current = yaml.safe_load(user_cfg_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Config file is not valid YAML: {user_cfg_path}") from e
        if not isinstance(current, dict):
            raise ConfigError(f"Config file must contain a mapping: {user_cfg_path}")

    chain = current.get("chain")
    current["chain"] = {**(chain if isinstance(chain, dict) else {}), "clock": clock}

    user_cfg_path.parent.mkdir(parents=True, exist_ok=True)
    content = "# Generated by `minichain init`\n" + yaml.safe_dump(current, sort_keys=False)
    user_cfg_path.write_text(content, encoding="utf-8")


def _cmd_init(ctx: CliContext, args: argparse.Namespace) -> int:
    from minichain.core.database import Database

    user_cfg_path = ctx.repo_root / "config" / "user.yaml"
    if args.clock:
        _write_user_config(user_cfg_path=user_cfg_path, clock=str(args.clock))

    config = _load_config(ctx)
    db_path = ctx.repo_root / config.db_path
    db = Database(db_path)
    try:
        count = db.count()
    finally:
        db.close()

    print("minichain init")
    print(f"- repo_root: {ctx.repo_root}")
    print(f"- db: {db_path}")
    print(f"- blocks: {count}")
    print(f"- clock: {config.chain.clock}")
    if args.clock:
        print(f"- config: {user_cfg_path}")
    return 0


def _cmd_add(ctx: CliContext, args: argparse.Namespace) -> int:
    db, chain = _open_chain(ctx)
    try:
        block = chain.append(str(args.payload))
    finally:
        db.close()
    print(f"Block {block.sequence} added")
    print(f"- digest: {block.digest}")
    return 0


def _cmd_show(ctx: CliContext, args: argparse.Namespace) -> int:
    db, chain = _open_chain(ctx)
    try:
        blocks = chain.list_blocks()
    finally:
        db.close()
    if not blocks:
        print("Ledger is empty.")
        return 0
    for b in blocks:
        print(_render_block(b))
    return 0


def _cmd_verify(ctx: CliContext, args: argparse.Namespace) -> int:
    db, chain = _open_chain(ctx)
    try:
        result = chain.verify()
    finally:
        db.close()
    print(result.describe())
    return 0 if result.valid else 1


def _cmd_menu(ctx: CliContext, args: argparse.Namespace) -> int:
    db, chain = _open_chain(ctx)
    try:
        print("\n--- MINICHAIN ---")
        while True:
            print("\n1. Add block")
            print("2. Show chain")
            print("3. Verify integrity")
            print("4. Exit")
            try:
                choice = input("Option: ").strip()
            except EOFError:
                print()
                return 0

            if choice == "1":
                try:
                    payload = input("Block payload: ")
                except EOFError:
                    print()
                    return 0
                block = chain.append(payload)
                print(f"Block {block.sequence} added")
            elif choice == "2":
                blocks = chain.list_blocks()
                if not blocks:
                    print("Ledger is empty.")
                for b in blocks:
                    print(_render_block(b))
            elif choice == "3":
                print(chain.verify().describe())
            elif choice == "4":
                print("Bye.")
                return 0
            else:
                print(f"Invalid option: {choice}")
    finally:
        db.close()


def _cmd_status(ctx: CliContext, args: argparse.Namespace) -> int:
    from minichain.core.database import Database
    from minichain.core.digest import DIGEST_ALGORITHM, is_digest

    config = _load_config(ctx)
    cfg_dir = ctx.repo_root / "config"
    cfg_files = [p.name for p in (cfg_dir / "default.yaml", cfg_dir / "user.yaml") if p.exists()]

    db_path = ctx.repo_root / config.db_path
    print("minichain status")
    print(f"- config: {', '.join(cfg_files) if cfg_files else 'defaults'}")
    print(f"- digest: {DIGEST_ALGORITHM}")

    if not db_path.exists():
        print(f"- db: {db_path} (missing)")
        return 0

    db = Database(db_path)
    try:
        count = db.count()
        tail = db.select_last()
    finally:
        db.close()

    print(f"- db: {db_path} (present)")
    print(f"- blocks: {count}")
    if tail is not None:
        shape = "ok" if is_digest(tail.digest) else "malformed"
        print(f"- tail: #{tail.sequence} {tail.digest} ({shape})")
    return 0


def main(argv: list[str] | None = None) -> int:
    from minichain.core.exceptions import MinichainError

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        _print_version()
        return 0

    if not args.command:
        parser.print_help()
        return 2

    ctx = CliContext(repo_root=_repo_root_from_cwd())

    dispatch: dict[str, Callable[[CliContext, argparse.Namespace], int]] = {
        "init": _cmd_init,
        "add": _cmd_add,
        "show": _cmd_show,
        "verify": _cmd_verify,
        "menu": _cmd_menu,
        "status": _cmd_status,
    }

    fn = dispatch.get(str(args.command))
    if fn is None:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 2

    try:
        return int(fn(ctx, args))
    except MinichainError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
