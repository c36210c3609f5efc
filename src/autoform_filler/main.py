"""
AutoForm Filler - CLI Entry Point.

Configuration Priority:
    1. CLI arguments (--api-key, --api-base, etc.)
    2. Environment variables (AUTOFORM__PROFILE_SERVICE__API_KEY, etc.)
    3. Config file (config.yaml)

Usage:
    autoform fill https://jobs.example.com/apply --api-key ak_123
    autoform detect https://jobs.example.com/apply --visible
"""

import asyncio
from typing import Any, Dict, Optional

import typer
from rich.console import Console
from rich.panel import Panel

from autoform_filler.browsers.playwright_browser import PlaywrightBrowser
from autoform_filler.config import Settings, SettingsConfigProvider, get_settings
from autoform_filler.content_script import ContentScript, MessageType
from autoform_filler.exceptions import BrowserError
from autoform_filler.interfaces.browser import BrowserType
from autoform_filler.utils.logging import setup_logging

app = typer.Typer(
    name="autoform",
    help="Fill web forms from your saved profile",
    add_completion=False,
)

console = Console()


def _effective_settings(
    api_key: Optional[str] = None,
    api_base: Optional[str] = None,
    visible: bool = False,
    timeout_ms: Optional[int] = None,
    settle_ms: Optional[int] = None,
) -> Settings:
    """Global settings with CLI overrides applied."""
    overrides: Dict[str, Any] = {"profile_service": {}, "fill": {}, "browser": {}}
    if api_key:
        overrides["profile_service"]["api_key"] = api_key
    if api_base:
        overrides["profile_service"]["base_url"] = api_base
    if visible:
        overrides["browser"]["headless"] = False
    if timeout_ms:
        overrides["fill"]["timeout_ms"] = timeout_ms
    if settle_ms:
        overrides["fill"]["settle_ms"] = settle_ms
    return get_settings().merge_with(overrides)


def _print_reply(reply: Dict[str, Any]) -> None:
    style = "green" if reply.get("ok") else "red"
    console.print(Panel.fit(reply.get("message", ""), border_style=style))


async def _send_message(
    url: str,
    message_type: MessageType,
    settings: Settings,
    hold_ms: int = 0,
) -> Dict[str, Any]:
    """Open the page, deliver one message, close the browser."""
    browser = PlaywrightBrowser()
    launch_options: Dict[str, Any] = {"slow_mo": settings.browser.slow_mo}
    if settings.browser.channel:
        launch_options["channel"] = settings.browser.channel

    try:
        await browser.launch(
            headless=settings.browser.headless,
            browser_type=BrowserType(settings.browser.browser_type),
            **launch_options,
        )
        page = await browser.new_page()
        await page.goto(url, timeout=settings.browser.timeout_ms, wait_until="domcontentloaded")

        script = ContentScript(
            page,
            SettingsConfigProvider(settings),
            fill_settings=settings.fill,
        )
        reply = await script.handle_message({"type": message_type.value})

        if hold_ms:
            await asyncio.sleep(hold_ms / 1000)
        return reply
    finally:
        await browser.close()


def _run(url: str, message_type: MessageType, settings: Settings, hold_ms: int = 0) -> None:
    try:
        reply = asyncio.run(_send_message(url, message_type, settings, hold_ms=hold_ms))
    except BrowserError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)

    _print_reply(reply)
    if not reply.get("ok"):
        raise typer.Exit(1)


@app.command()
def fill(
    url: str = typer.Argument(..., help="Page with the form to fill"),
    api_key: Optional[str] = typer.Option(None, "--api-key", "-k", help="Profile Service API key (default: from config)"),
    api_base: Optional[str] = typer.Option(None, "--api-base", help="Profile Service base URL (default: from config)"),
    visible: bool = typer.Option(False, "--visible", "-v", help="Run with visible browser"),
    timeout_ms: Optional[int] = typer.Option(None, "--timeout-ms", help="Hard bound on fill duration"),
    settle_ms: Optional[int] = typer.Option(None, "--settle-ms", help="Stop after this long without new fills"),
    hold_ms: int = typer.Option(0, "--hold-ms", help="Keep the browser open this long after filling"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose output"),
):
    """
    Fetch your profile and fill the form on a page.

    Examples:
        autoform fill https://jobs.example.com/apply -k ak_123
        autoform fill https://jobs.example.com/apply --visible --hold-ms 10000
    """
    settings = _effective_settings(api_key, api_base, visible, timeout_ms, settle_ms)
    setup_logging("DEBUG" if verbose else settings.logging.level, settings.logging.file, settings.logging.json_format)
    _run(url, MessageType.FILL, settings, hold_ms=hold_ms)


@app.command()
def detect(
    url: str = typer.Argument(..., help="Page to inspect"),
    visible: bool = typer.Option(False, "--visible", "-v", help="Run with visible browser"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose output"),
):
    """
    Count the fillable fields on a page without writing anything.
    """
    settings = _effective_settings(visible=visible)
    setup_logging("DEBUG" if verbose else settings.logging.level, settings.logging.file, settings.logging.json_format)
    _run(url, MessageType.DETECT, settings)


@app.command()
def ping(
    url: str = typer.Argument(..., help="Page to attach to"),
):
    """
    Check that the engine attaches to a page and answers.
    """
    settings = _effective_settings()
    setup_logging(settings.logging.level, settings.logging.file, settings.logging.json_format)
    _run(url, MessageType.PING, settings)


if __name__ == "__main__":
    app()
