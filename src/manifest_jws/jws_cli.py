from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .crypto.digest import sha256_b64
from .errors import ManifestVerificationError
from .jsonscan.reader import JsonReader
from .jsonscan.scanner import find_field
from .jws.arena import SCRATCH_BUFFER_SIZE, Span
from .jws.b64 import decode
from .jws.compact import split_compact
from .settings import settings
from .verify import ALG_FIELD, KID_FIELD, SHA256_FIELD, SJWK_FIELD, verify_manifest


def _read_jws(path: Path) -> bytearray:
    # Files commonly end with a newline; the compact form never contains whitespace
    return bytearray(path.read_bytes().strip())


def cmd_verify(args: argparse.Namespace) -> int:
    manifest = Path(args.manifest).read_bytes()
    jws = _read_jws(Path(args.jws))
    outcome = verify_manifest(manifest, jws, bytearray(SCRATCH_BUFFER_SIZE))
    if outcome.ok:
        print("OK")
        return 0
    print(f"FAIL {outcome.error.value} at {outcome.stage}: {outcome.detail}")
    return 2


def cmd_hash(args: argparse.Namespace) -> int:
    print(sha256_b64(Path(args.manifest).read_bytes()))
    return 0


def _string_field(document: bytes, name: bytes) -> str:
    return find_field(JsonReader(document), name).raw.tobytes().decode(errors="replace")


def cmd_inspect(args: argparse.Namespace) -> int:
    """Print the claims the verifier would act on, without verifying them."""
    jws = _read_jws(Path(args.jws))
    try:
        outer = split_compact(Span.wrap(jws))
        header = decode(outer.header.view())
        payload = decode(outer.payload.view())
        sjwk = find_field(JsonReader(header), SJWK_FIELD).raw.tobytes()
        inner = split_compact(Span.wrap(sjwk))
        inner_header = decode(inner.header.view())
        inner_payload = decode(inner.payload.view())
        print(f"alg: {_string_field(header, ALG_FIELD)}")
        print(f"root kid: {_string_field(inner_header, KID_FIELD)}")
        print(f"signing key alg: {_string_field(inner_payload, ALG_FIELD)}")
        print(f"signing key kid: {_string_field(inner_payload, KID_FIELD)}")
        print(f"sha256: {_string_field(payload, SHA256_FIELD)}")
    except ManifestVerificationError as e:
        print(f"Malformed JWS ({e.kind.value}): {e.detail}", file=sys.stderr)
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="manifest-jws",
        description="Update manifest JWS verification utilities",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    p_verify = sub.add_parser("verify", help="Verify a manifest against its detached JWS")
    p_verify.add_argument("--manifest", required=True, help="Path to the raw manifest JSON")
    p_verify.add_argument("--jws", required=True, help="Path to the compact JWS")
    p_verify.set_defaults(func=cmd_verify)

    p_hash = sub.add_parser("hash", help="Print the base64 SHA-256 of a manifest")
    p_hash.add_argument("--manifest", required=True)
    p_hash.set_defaults(func=cmd_hash)

    p_inspect = sub.add_parser("inspect", help="Show the JWS claims without verifying them")
    p_inspect.add_argument("--jws", required=True)
    p_inspect.set_defaults(func=cmd_inspect)
    return p


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=settings.mjws_log_level)
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
