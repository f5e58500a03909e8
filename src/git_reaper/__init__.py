"""Find dead (merged but undeleted) branches of GitHub repositories."""

import asyncio
import logging
import os

import click
from dotenv import load_dotenv

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


@click.command()
@click.option(
    "--transport",
    type=click.Choice(["stdio", "sse", "streamable-http"]),
    default="stdio",
    help="MCP transport type",
)
@click.option("--port", default=8000, help="Port for HTTP transports")
@click.option("--host", default="127.0.0.1", help="Host for HTTP transports")
@click.option("--github-api-url", envvar="GITHUB_API_URL", help="GitHub REST API base URL")
@click.option("--github-token", envvar="GITHUB_TOKEN", help="GitHub personal access token")
@click.option("-d", "--debug", is_flag=True, help="Activate DEBUG output")
@click.option("-q", "--quiet", is_flag=True, help="Suppress INFO output")
def main(
    transport: str,
    port: int,
    host: str,
    github_api_url: str | None,
    github_token: str | None,
    debug: bool,
    quiet: bool,
) -> None:
    """Run the Git Reaper MCP server."""
    if debug and quiet:
        raise click.UsageError("--debug and --quiet are mutually exclusive")
    load_dotenv()

    if debug:
        logging.basicConfig(level=logging.DEBUG, format=LOG_FORMAT)
    elif quiet:
        logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)
    else:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    if github_api_url:
        os.environ["GITHUB_API_URL"] = github_api_url
    if github_token:
        os.environ["GITHUB_TOKEN"] = github_token

    from .servers.reaper import mcp

    run_kwargs: dict = {"transport": transport}
    if transport != "stdio":
        run_kwargs["host"] = host
        run_kwargs["port"] = port

    asyncio.run(mcp.run_async(show_banner=False, **run_kwargs))


if __name__ == "__main__":
    main()
