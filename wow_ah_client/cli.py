"""
wow-ah - CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Resolve the API key (API commands only).
  4. Call the client and print the result to stdout.

Install and run::

    pip install -e .
    wow-ah --help
    wow-ah validate-config
    wow-ah realms
    wow-ah connected-realms
    wow-ah item 19019
    wow-ah auctions area-52 --cutoff 1475000000000
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="wow-ah",
    help="Battle.net realm, item and auction house client.",
    add_completion=False,
)

_CONFIG_OPTION = typer.Option(
    None,
    "--config",
    help="Path to TOML config file (default: config/default.toml).",
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from wow_ah_client.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from wow_ah_client.utils.logging import configure_logging
    configure_logging(config.logging)


def _build_client(config):
    """Build a BattleNetApiClient, exiting if no API key is configured."""
    from wow_ah_client.client.api_client import BattleNetApiClient
    from wow_ah_client.client.errors import MissingCredentialsError
    from wow_ah_client.config import resolve_api_key

    try:
        api_key = resolve_api_key(config)
    except MissingCredentialsError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    return BattleNetApiClient(api_key, config)


def _setup(config_path: Optional[str]):
    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    return config


def _api_error_exit(exc: Exception) -> None:
    typer.echo(f"[ERROR] {exc}", err=True)
    raise typer.Exit(code=1)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = _CONFIG_OPTION,
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values."""
    config = _load_config_or_exit(config_path)

    max_retries = config.retry.max_retries
    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Region:       {config.api.region}")
    typer.echo(f"  Base URL:     {config.api.base_url}")
    typer.echo(f"  Locale:       {config.api.locale}")
    typer.echo(f"  Rate limit:   {config.rate_limit.capacity} per {config.rate_limit.window_seconds}s")
    typer.echo(f"  Retry:        {config.retry.strategy}, "
               f"max_retries={'unbounded' if max_retries is None else max_retries}")
    typer.echo(f"  Log level:    {config.logging.level}")
    typer.echo(f"  Debug mode:   {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("realms")
def realms(
    config_path: Optional[str] = _CONFIG_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON."),
) -> None:
    """List every realm in the configured region."""
    from wow_ah_client.client.errors import ApiError

    config = _setup(config_path)
    with _build_client(config) as client:
        try:
            realm_list = client.list_realms()
        except ApiError as exc:
            _api_error_exit(exc)

    if as_json:
        typer.echo(json.dumps([r.model_dump() for r in realm_list], indent=2))
        return
    for realm in realm_list:
        typer.echo(f"  {realm.slug:<24} {realm.name}")
    typer.echo(f"[OK] {len(realm_list)} realm(s).")


@app.command("connected-realms")
def connected_realms(
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """List realms grouped by shared auction house."""
    from wow_ah_client.client.errors import ApiError

    config = _setup(config_path)
    with _build_client(config) as client:
        try:
            groups = client.get_connected_realm_groups()
        except ApiError as exc:
            _api_error_exit(exc)

    for group in groups:
        typer.echo(f"  {', '.join(group.slugs)}")
    typer.echo(f"[OK] {len(groups)} auction house(s).")


@app.command("item")
def item(
    item_id: int = typer.Argument(..., help="WoW item ID."),
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Show metadata for one item."""
    from wow_ah_client.client.errors import ApiError

    config = _setup(config_path)
    with _build_client(config) as client:
        try:
            info = client.get_item_info(item_id)
        except ApiError as exc:
            _api_error_exit(exc)

    typer.echo(f"  {info.id}  {info.name}  (icon: {info.icon})")


@app.command("auctions")
def auctions(
    realm_slug: str = typer.Argument(..., help="Realm slug, e.g. area-52."),
    cutoff: int = typer.Option(
        0,
        "--cutoff",
        help="Skip the download if lastModified <= cutoff.",
    ),
    config_path: Optional[str] = _CONFIG_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Print listings as JSON."),
) -> None:
    """Download auction listings for a realm if they changed since --cutoff."""
    from wow_ah_client.client.errors import ApiError

    config = _setup(config_path)
    with _build_client(config) as client:
        try:
            snapshot = client.get_auction_listings(realm_slug, cutoff)
        except ApiError as exc:
            _api_error_exit(exc)

    if snapshot is None:
        typer.echo(f"[SKIP] Auctions for {realm_slug} unchanged since {cutoff}.")
        return
    if as_json:
        typer.echo(snapshot.model_dump_json(indent=2))
        return
    typer.echo(f"  Last modified: {snapshot.last_modified}")
    typer.echo(f"  Listings:      {len(snapshot.listings)}")
    typer.echo("[OK] Auctions downloaded.")


if __name__ == "__main__":
    app()
