"""CLI implementation for feedfetch."""

import json
import sys
from pathlib import Path
from typing import Optional

import typer

from . import FeedFetcher, FetchOptions, USER_AGENT
from .core.model import FeedFetchError
from .core.util import feed_asdict, parse_datetime
from .io import open_transport
from .logging_conf import configure_logging

app = typer.Typer(add_completion=False, help="Fetch and parse RSS/Atom feeds.")


def iter_sources(urls: list[str]) -> list[str]:
    """Get list of URLs from the argument list or stdin."""
    urls = urls or []
    if "-" in urls:
        return [ln.strip() for ln in sys.stdin if ln.strip()]
    return list(urls)


def _error_payload(url: str, error: Exception) -> dict:
    payload = {"success": False, "url": url, "error": str(error)}
    status = getattr(error, "status", None)
    if status is not None:
        payload["status"] = status
    return payload


def _raw_payload(url: str, body: bytes) -> dict:
    return {"success": True, "url": url, "body": body.decode("utf-8", errors="replace")}


@app.command()
def main(
    urls: list[str] = typer.Argument(None, help="Feed URLs to fetch, or '-' for stdin"),
    raw: bool = typer.Option(False, "--raw", help="Emit the decoded body instead of the parsed feed"),
    fields: Optional[str] = typer.Option(None, "--fields", help="Comma-separated subset of keys to emit"),
    jsonl: bool = typer.Option(False, "--jsonl", help="Force JSON-lines output"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write to PATH instead of stdout"),
    sync: bool = typer.Option(False, "--sync", help="Fetch sequentially with requests"),
    compress: bool = typer.Option(False, "--compress", help="Ask the server for gzip/deflate"),
    user_agent: str = typer.Option(USER_AGENT, "--user-agent", envvar="FEEDFETCH_USER_AGENT"),
    timeout: Optional[float] = typer.Option(None, "--timeout", min=0, envvar="FEEDFETCH_TIMEOUT",
                                            help="Per-request timeout in seconds"),
    etag: Optional[str] = typer.Option(None, "--etag", help="Send If-None-Match"),
    since: Optional[str] = typer.Option(None, "--since", help="Send If-Modified-Since (any date format)"),
    keep_going: bool = typer.Option(False, "--keep-going", help="Report failures per URL instead of aborting"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Debug logging on stderr"),
):
    """Fetch one or many feeds concurrently and print them as JSON."""
    configure_logging(verbose)
    sel_fields = set(fields.split(",")) if fields else None
    sources = iter_sources(urls)

    if not sources:
        typer.echo("No feed URLs given.", err=True)
        raise typer.Exit(code=1)

    if_modified_since = None
    if since:
        if_modified_since = parse_datetime(since)
        if if_modified_since is None:
            typer.echo(f"Unrecognised date for --since: {since}", err=True)
            raise typer.Exit(code=2)

    options = FetchOptions(
        user_agent=user_agent,
        compress=compress,
        timeout=timeout,
        if_none_match=etag,
        if_modified_since=if_modified_since,
    )
    fetcher = FeedFetcher(transport=open_transport(sync=sync), options=options)

    payloads: list[dict] = []
    try:
        if raw:
            results = fetcher.fetch_raw_many(sources, return_exceptions=keep_going)
        else:
            results = fetcher.fetch_and_parse_many(sources, return_exceptions=keep_going)
    except FeedFetchError as e:
        payloads.append(_error_payload(e.url or sources[0], e))
    else:
        for url in sources:
            res = results.get(url)
            if isinstance(res, Exception):
                payloads.append(_error_payload(url, res))
            elif raw:
                payloads.append(_raw_payload(url, res))
            else:
                payloads.append(feed_asdict(res, fields=sel_fields))

    # open output sink
    sink = open(output, "w", encoding="utf-8") if output else sys.stdout
    try:
        if len(payloads) == 1 and len(sources) == 1 and not jsonl:
            json.dump(payloads[0], sink, indent=2)
            sink.write("\n")
        else:
            for obj in payloads:
                sink.write(json.dumps(obj))
                sink.write("\n")
    finally:
        if output:
            sink.close()

    if any(not p["success"] for p in payloads):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
