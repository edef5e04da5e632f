from __future__ import annotations
import json
import logging
from pathlib import Path
import subprocess
import click
from click_loglevel import LogLevel
from .config import INDEX_REPOSITORY, LAST_UPDATED_FILE
from .errors import AuthenticationError, IndexRefreshError, UpstreamUnavailable
from .github import DataDeskClient, get_token
from .util import configure_logging, log, readcmd


def get_last_updated(repo_fullname: str, repo_dir: str | Path = ".") -> str:
    """
    Return the committer date of the latest commit of ``repo_fullname``
    according to GitHub, falling back to the latest commit of the local clone
    at ``repo_dir`` when GitHub can't be asked.
    """
    try:
        with DataDeskClient(token=get_token()) as client:
            date = client.get_latest_commit_date(repo_fullname)
        if date is not None:
            return date
        log.warning("GitHub reports no commits for %s", repo_fullname)
    except (AuthenticationError, UpstreamUnavailable) as e:
        log.warning("Could not get latest commit date from GitHub: %s", e)
    log.info("Using date of latest local commit instead")
    try:
        date = readcmd("git", "log", "-1", "--format=%cI", cwd=repo_dir)
    except (OSError, subprocess.CalledProcessError) as e:
        raise UpstreamUnavailable(
            f"Could not determine date of latest commit in {repo_dir}"
        ) from e
    if not date:
        raise UpstreamUnavailable(f"No commits found in {repo_dir}")
    return date


def write_last_updated(date: str, path: str | Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fp:
        json.dump({"date": date}, fp)
        fp.write("\n")


@click.command()
@click.option(
    "-R",
    "--repo",
    default=INDEX_REPOSITORY,
    help="GitHub repository whose latest commit date is recorded",
    show_default=True,
)
@click.option(
    "-f",
    "--file",
    "outfile",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    default=LAST_UPDATED_FILE,
    help="JSON file to write",
    show_default=True,
)
@click.option(
    "-l",
    "--log-level",
    type=LogLevel(),
    default=logging.INFO,
    help="Set logging level  [default: INFO]",
)
def main(repo: str, outfile: Path, log_level: int) -> None:
    """Record the date the index site was last updated"""
    configure_logging(log_level)
    try:
        date = get_last_updated(repo)
    except IndexRefreshError as e:
        raise click.ClickException(str(e))
    write_last_updated(date, outfile)
    log.info("Recorded last update of %s as %s", repo, date)


if __name__ == "__main__":
    main()
