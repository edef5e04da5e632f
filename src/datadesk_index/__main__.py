from __future__ import annotations
import logging
from pathlib import Path
import click
from click_loglevel import LogLevel
from .config import DATABASE_FILE, ORGANIZATION, SITE_URL
from .core import refresh
from .errors import IndexRefreshError
from .github import get_token
from .util import configure_logging


@click.command()
@click.option(
    "-o",
    "--org",
    envvar="DATADESK_ORG",
    default=ORGANIZATION,
    help="GitHub organization whose repositories are listed",
    show_default=True,
)
@click.option(
    "-d",
    "--database",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    envvar="DATADESK_DB",
    default=DATABASE_FILE,
    help="DuckDB file in which to replace the projects table",
    show_default=True,
)
@click.option(
    "--site-url",
    envvar="DATADESK_SITE_URL",
    default=SITE_URL,
    help="Base URL of the published notebooks",
    show_default=True,
)
@click.option(
    "--exclude-repo",
    envvar="DATADESK_EXCLUDE_REPO",
    default=None,
    help="Repository to leave out of the index  [default: ORG.github.io]",
)
@click.option(
    "-l",
    "--log-level",
    type=LogLevel(),
    default=logging.INFO,
    help="Set logging level  [default: INFO]",
)
def main(
    org: str,
    database: Path,
    site_url: str,
    exclude_repo: str | None,
    log_level: int,
) -> None:
    """Refresh the projects table from the organization's GitHub repositories"""
    configure_logging(log_level)
    try:
        records = refresh(
            organization=org,
            database=database,
            token=get_token(),
            site_url=site_url,
            excluded_repo=exclude_repo,
        )
    except IndexRefreshError as e:
        raise click.ClickException(str(e))
    click.echo(f"Wrote {len(records)} projects to {database}")


if __name__ == "__main__":
    main()
