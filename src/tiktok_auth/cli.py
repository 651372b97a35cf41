import asyncio
import json
import logging
import secrets

import typer

from tiktok_auth.auth_strategies.constants import TIKTOK
from tiktok_auth.auth_strategies.oauth.factory import get_oauth_strategy
from tiktok_auth.core.config import settings
from tiktok_auth.core.exceptions import TikTokAuthException

app = typer.Typer(help="TikTok OAuth CLI")


@app.callback()
def main(debug: bool = typer.Option(False, "--debug", help="Enable debug logging")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if (debug or settings.DEBUG) else logging.INFO,
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    )
    # Silence noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _fail(exc: TikTokAuthException) -> None:
    typer.echo(f"Error [{exc.error_code or 'ERROR'}]: {exc.message}", err=True)
    raise typer.Exit(code=1)


@app.command("authorize-url")
def authorize_url(state: str | None = typer.Option(None, help="CSRF state to embed")) -> None:
    """
    Print the TikTok authorization URL
    """
    state = state or secrets.token_urlsafe(32)
    try:
        strategy = get_oauth_strategy(TIKTOK)
        typer.echo(asyncio.run(strategy.get_authorization_url(state)))
    except TikTokAuthException as e:
        _fail(e)


@app.command()
def exchange(code: str) -> None:
    """
    Exchange an authorization code and print the login result
    """
    try:
        strategy = get_oauth_strategy(TIKTOK)
        result = asyncio.run(strategy.authenticate({"code": code}))
        typer.echo(result.model_dump_json(indent=2))
    except TikTokAuthException as e:
        _fail(e)


@app.command()
def profile(
    access_token: str,
    scope: list[str] | None = typer.Option(None, help="Granted scope (repeatable)"),
) -> None:
    """
    Fetch and print the normalized profile for an access token
    """
    try:
        strategy = get_oauth_strategy(TIKTOK)
        result = asyncio.run(strategy.user_profile(access_token, scope or None))
        typer.echo(result.model_dump_json(indent=2, exclude={"raw", "raw_json"}))
    except TikTokAuthException as e:
        _fail(e)


@app.command()
def info() -> None:
    """
    Print the configured strategy's metadata
    """
    try:
        strategy = get_oauth_strategy(TIKTOK)
        typer.echo(json.dumps(strategy.get_strategy_metadata(), indent=2))
    except TikTokAuthException as e:
        _fail(e)


if __name__ == "__main__":
    app()
