"""
Command-line interface for sealing reports and opening them in the viewer.

Passwords are always read interactively (never from argv) unless piped via
stdin. Opening never writes decrypted bytes to disk: ``--check`` verifies
the password and integrity, otherwise the secure viewer is launched.
"""

from __future__ import annotations

import argparse
import getpass
import logging
import os
import sys

from .core.ciphers import CIPHER_CHOICES
from .core.codec import ReportCodec
from .core.config import apply_config_defaults, load_config, save_config
from .core.document import extract_pages
from .core.errors import ReportVaultError
from .core.formats import FORMAT_CHOICES, FORMAT_RAW
from .core.kdf import KDF_CHOICES
from .core.validation import (
    MIN_PASSWORD_LENGTH,
    check_password_policy,
    check_password_strength,
    is_container_filename,
    suggest_container_name,
    validate_payload,
)

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reportvault",
        description="reportvault — password-protected report export and secure viewing",
    )
    parser.add_argument(
        "-o", "--operation",
        choices=["seal", "open"],
        help="Operation to perform",
    )
    parser.add_argument(
        "-f", "--file",
        help="Report to seal, or .enc container to open.",
    )
    parser.add_argument(
        "--output",
        help="Explicit container path for seal (default: NAME_report.enc "
             "next to the report).",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite the container if it already exists.",
    )
    parser.add_argument(
        "--format",
        choices=list(FORMAT_CHOICES),
        default=FORMAT_RAW,
        help="Container format (default: raw). The same format must be used to open.",
    )
    parser.add_argument(
        "--kdf",
        choices=list(KDF_CHOICES.keys()),
        default="PBKDF2-SHA256",
        help="Key derivation function, v1 format only (default: PBKDF2-SHA256)",
    )
    parser.add_argument(
        "--cipher",
        choices=list(CIPHER_CHOICES.keys()),
        default="AES-256-GCM",
        help="AEAD cipher, v1 format only (default: AES-256-GCM)",
    )
    parser.add_argument(
        "--min-password-length",
        type=int,
        default=MIN_PASSWORD_LENGTH,
        help=f"Minimum export password length (default: {MIN_PASSWORD_LENGTH})",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Open: verify password and integrity only, do not display.",
    )
    parser.add_argument(
        "--identity",
        default=None,
        help="Viewer identity stamped into the watermark (e.g. your email).",
    )
    parser.add_argument(
        "--organization",
        default=None,
        help="Organization shown in the watermark.",
    )
    parser.add_argument(
        "--save-config",
        action="store_true",
        help="Save the current --format/--kdf/--cipher/--identity settings as defaults.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug output to stderr.",
    )
    # Accepted for scripting, but triggers a warning
    parser.add_argument(
        "-p", "--password",
        help=argparse.SUPPRESS,
    )
    return parser


def _read_password(prompt: str = "Enter password: ", confirm: bool = False) -> tuple[str, str]:
    """Read a password (and its confirmation) from the terminal.

    Falls back to one line of stdin when no TTY is available; the
    confirmation is then taken to match.
    """
    try:
        pwd = getpass.getpass(prompt)
    except OSError:
        pwd = sys.stdin.readline().rstrip("\n")
        if confirm:
            print(
                "Warning: password confirmation skipped (no terminal available).",
                file=sys.stderr,
            )
        return pwd, pwd

    pwd2 = pwd
    if confirm:
        try:
            pwd2 = getpass.getpass("Confirm password: ")
        except OSError:
            _fail("cannot confirm password without a terminal.")
    return pwd, pwd2


def _print_status(msg: str, error: bool = False) -> None:
    stream = sys.stderr if error else sys.stdout
    print(msg, file=stream)


def _fail(msg: str) -> None:
    _print_status(f"Error: {msg}", error=True)
    sys.exit(1)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _get_password(args, confirm: bool) -> tuple[str, str]:
    if args.password:
        print(
            "WARNING: Passing passwords via --password/-p is insecure "
            "(visible in ps, shell history). Use interactive input instead.",
            file=sys.stderr,
        )
        return args.password, args.password
    return _read_password(confirm=confirm)


def run_cli(argv: list[str] | None = None) -> None:
    """Run the CLI interface."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    apply_config_defaults(args, load_config())
    _configure_logging(args.verbose)

    if args.save_config:
        path = save_config({
            "format": args.format,
            "kdf": args.kdf,
            "cipher": args.cipher,
            "identity": args.identity,
            "organization": args.organization,
            "min_password_length": args.min_password_length,
            "force": args.force,
        })
        _print_status(f"Preferences saved to {path}")
        if not args.operation:
            return

    if not args.operation:
        parser.error("an operation is required (-o seal | -o open)")
    if not args.file:
        parser.error("a file is required (-f PATH)")

    try:
        codec = ReportCodec.from_names(args.format, args.kdf, args.cipher)
    except ReportVaultError as exc:
        _fail(str(exc))

    if args.operation == "seal":
        _run_seal(args, codec)
    else:
        _run_open(args, codec)


def _run_seal(args, codec: ReportCodec) -> None:
    if not os.path.isfile(args.file):
        _fail(f"file not found: {args.file}")
    with open(args.file, "rb") as f:
        payload = f.read()
    ok, reason = validate_payload(payload)
    if not ok:
        _fail(reason)

    out_path = args.output or os.path.join(
        os.path.dirname(args.file), suggest_container_name(os.path.basename(args.file))
    )
    if os.path.exists(out_path) and not args.force:
        _fail(
            f"output file already exists: {out_path}\n"
            "  Use --force to overwrite, or --output to choose a different path."
        )

    password, confirm = _get_password(args, confirm=True)
    ok, reason = check_password_policy(password, confirm, args.min_password_length)
    if not ok:
        _fail(reason)
    strength = check_password_strength(password, args.min_password_length)

    try:
        container = codec.seal(payload, password)
    except ReportVaultError as exc:
        logger.debug("Seal failed: %s", exc)
        _fail(exc.user_message)
    finally:
        del password, confirm

    with open(out_path, "wb") as f:
        f.write(container)
    _print_status(
        f"Sealed ({codec.description}): {args.file} -> {out_path} "
        f"({len(payload)} -> {len(container)} bytes, password {strength.label})"
    )


def _run_open(args, codec: ReportCodec) -> None:
    if not is_container_filename(os.path.basename(args.file)):
        _fail("only .enc files are accepted")
    if not os.path.isfile(args.file):
        _fail(f"file not found: {args.file}")
    with open(args.file, "rb") as f:
        container = f.read()

    password, _ = _get_password(args, confirm=False)
    if not password:
        _fail("password cannot be empty")

    if not args.check:
        from .ui.app import run_gui
        from .ui.state import OpenState

        kwargs = {"identity": args.identity or ""}
        if args.organization:
            kwargs["organization"] = args.organization
        run_gui(
            open_state=OpenState(
                container_file=args.file,
                password=password,
                container_format=args.format,
            ),
            **kwargs,
        )
        return

    try:
        payload = codec.open(container, password)
        pages = extract_pages(payload)
    except ReportVaultError as exc:
        logger.debug("Open failed: %s", exc)
        _fail(exc.user_message)
    finally:
        del password

    count = len(pages)
    _print_status(
        f"OK: {args.file} ({len(payload)} bytes, {count} {'page' if count == 1 else 'pages'})"
    )
