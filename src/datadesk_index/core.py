from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from .config import SITE_URL
from .github import ProjectCollector, ProjectRecord
from .store import ProjectStore
from .util import log


class RunState(Enum):
    NOT_RUN = "not run"
    COLLECTED = "collected"
    WRITTEN = "written"
    FAILED = "failed"


@dataclass
class RefreshRun:
    """
    A single collect-then-write pass.  Collection is completed in full before
    the store is touched; any error marks the run as failed and is re-raised
    unchanged.  There is no retrying or resumption: a new run starts from
    scratch.
    """

    organization: str
    database: Path
    token: str | None
    site_url: str = SITE_URL
    excluded_repo: str | None = None
    state: RunState = RunState.NOT_RUN
    records: list[ProjectRecord] = field(default_factory=list)

    def run(self) -> list[ProjectRecord]:
        if self.state is not RunState.NOT_RUN:
            raise RuntimeError(f"Refresh run already {self.state.value}")
        try:
            self.records = self.collect()
            self.state = RunState.COLLECTED
            self.write()
            self.state = RunState.WRITTEN
        except Exception:
            log.error(
                "Refresh of %s failed (state: %s)", self.organization, self.state.value
            )
            self.state = RunState.FAILED
            raise
        return self.records

    def collect(self) -> list[ProjectRecord]:
        with ProjectCollector(
            token=self.token,
            site_url=self.site_url,
            excluded_repo=self.excluded_repo,
        ) as collector:
            return collector.collect(self.organization)

    def write(self) -> None:
        with ProjectStore(self.database) as store:
            store.replace_projects(self.records)


def refresh(
    organization: str,
    database: str | Path,
    token: str | None,
    site_url: str = SITE_URL,
    excluded_repo: str | None = None,
) -> list[ProjectRecord]:
    """
    Collect the publishable repositories of ``organization`` and replace the
    projects table in ``database`` with them.  Returns the records written.
    """
    return RefreshRun(
        organization=organization,
        database=Path(database),
        token=token,
        site_url=site_url,
        excluded_repo=excluded_repo,
    ).run()
