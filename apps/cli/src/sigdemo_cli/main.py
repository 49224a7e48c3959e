from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import Optional

import typer

from sigdemo import SigDemoError, UnsupportedAlgorithmError, get_scheme, registry
from sigdemo.params import get_params
from .runners.common import _export_json_blob, export_json, run_sig

app = typer.Typer(add_completion=False, help="Signature demonstrator CLI (RSA, ECDSA, toy lattice)")

@app.callback()
def _configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    level = "DEBUG" if verbose else (os.getenv("SIGDEMO_LOG_LEVEL") or "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _resolve(name: str):
    try:
        return get_scheme(name)
    except UnsupportedAlgorithmError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=2)


def _read_blob(value: str) -> str:
    """Accept a blob inline or as `@path` to a file holding it."""
    if value.startswith("@"):
        path = Path(value[1:])
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            typer.echo(f"Error: cannot read {path}: {exc}", err=True)
            raise typer.Exit(code=2)
    return value


def _echo_json(data: dict) -> None:
    typer.echo(json.dumps(data, indent=2))


def _tamper(message: str) -> str:
    """Bump the last code point, wrapping and skipping the surrogate block."""
    if not message:
        return "x"
    code = (ord(message[-1]) + 1) % 0x110000
    if 0xD800 <= code <= 0xDFFF:
        code = 0xE000
    return message[:-1] + chr(code)


@app.command()
def list_algos():
    """List registered signature schemes."""
    for name in sorted(registry.list().keys()):
        hint = get_params(name)
        if hint is None:
            typer.echo(f"- {name}")
        else:
            typer.echo(f"- {name}: {hint.mechanism} [{hint.security_level}]")


@app.command()
def keygen(
    name: str,
    export: Optional[str] = typer.Option(None, "--export", help="Write the key pair JSON to this path."),
):
    """Generate a key pair and print it as JSON."""
    scheme = _resolve(name)
    try:
        keys = scheme.generate_keypair()
    except SigDemoError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    _echo_json(keys.to_dict())
    if export:
        _export_json_blob(keys.to_dict(), export)


@app.command()
def sign(
    name: str,
    private_key: str = typer.Option(..., "--private-key", help="Private key blob, or @file."),
    message: str = typer.Option(..., "--message", "-m"),
):
    """Sign a message with a private key blob."""
    scheme = _resolve(name)
    try:
        sig = scheme.sign(message, _read_blob(private_key))
    except SigDemoError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    _echo_json(sig.to_dict())


@app.command()
def verify(
    name: str,
    public_key: str = typer.Option(..., "--public-key", help="Public key blob, or @file."),
    signature: str = typer.Option(..., "--signature", help="Signature blob, or @file."),
    message: str = typer.Option(..., "--message", "-m"),
):
    """Verify a signature; exits with code 1 when it does not verify."""
    scheme = _resolve(name)
    result = scheme.verify(message, _read_blob(signature), _read_blob(public_key))
    _echo_json(result.to_dict())
    if not result.is_valid:
        raise typer.Exit(code=1)


@app.command()
def demo(
    name: str,
    message: str = typer.Option("hello world", "--message", "-m"),
):
    """Run keygen + sign + verify, then verify a tampered copy of the message."""
    scheme = _resolve(name)
    try:
        keys = scheme.generate_keypair()
        sig = scheme.sign(message, keys.private_key)
    except SigDemoError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    ok = scheme.verify(message, sig.signature, keys.public_key)
    tampered_message = _tamper(message)
    tampered = scheme.verify(tampered_message, sig.signature, keys.public_key)
    typer.echo(f"[SIG] {name} ({keys.algorithm}, {keys.security_level})")
    typer.echo(f"  keygen: {keys.generation_ms:.1f} ms, pk={keys.public_key_size} chars, sk={keys.secret_key_size} chars")
    typer.echo(f"  sign:   {sig.signing_ms:.1f} ms, signature={sig.signature_size} chars")
    typer.echo(f"  verify: {ok.is_valid} ({ok.confidence})")
    typer.echo(f"  verify tampered {tampered_message!r}: {tampered.is_valid} ({tampered.confidence})")


@app.command()
def bench(
    name: str,
    runs: int = typer.Option(3, "--runs", min=1),
    message_size: int = typer.Option(1024, "--message-size", min=0),
    export: Optional[str] = typer.Option(None, "--export", help="Write the summary JSON to this path."),
):
    """Time keygen/sign/verify for one scheme (warm, in-process)."""
    _resolve(name)
    try:
        summary = run_sig(name, runs, message_size)
    except SigDemoError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    export_json(summary, export)
    _echo_json({
        "algo": summary.algo,
        "kind": summary.kind,
        "ops": {k: vars(v) for k, v in summary.ops.items()},
        "meta": summary.meta,
    })


def app_main():
    app()

if __name__ == "__main__":
    app_main()
