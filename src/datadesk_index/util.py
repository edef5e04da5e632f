from __future__ import annotations
from datetime import datetime, timezone
import logging
from pathlib import Path
import platform
import shlex
import subprocess
from typing import Any
import requests

USER_AGENT = "datadesk_index ({}) requests/{} {}/{}".format(
    "https://github.com/data-desk-eco/data-desk-eco.github.io",
    requests.__version__,
    platform.python_implementation(),
    platform.python_version(),
)

log = logging.getLogger(__package__)


def readcmd(*args: str | Path, **kwargs: Any) -> str:
    log.debug("Running: %s", " ".join(shlex.quote(str(a)) for a in args))
    r = subprocess.run(args, stdout=subprocess.PIPE, text=True, check=True, **kwargs)
    return r.stdout.strip()


def as_naive_utc(dt: datetime) -> datetime:
    """
    Convert ``dt`` to a naive datetime in UTC, the representation DuckDB uses
    for ``TIMESTAMP`` columns.  Naive inputs are assumed to already be in UTC.
    """
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def configure_logging(log_level: int) -> None:
    logging.basicConfig(
        format="%(asctime)s [%(levelname)-8s] %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
        level=log_level,
    )
