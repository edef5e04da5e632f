from __future__ import annotations
from datetime import datetime
from typing import Any
from ghreq import Client, PrettyHTTPError
from ghtoken import GHTokenNotFound, get_ghtoken
from pydantic import BaseModel, ValidationError
import requests
from .config import SITE_URL, index_repo_name
from .errors import AuthenticationError, UpstreamUnavailable
from .util import USER_AGENT, log


class ProjectRecord(BaseModel):
    name: str
    description: str
    url: str
    repo_url: str
    created_at: datetime


class RepoListing(BaseModel):
    """An entry from the ``/orgs/{org}/repos`` listing"""

    name: str
    description: str | None = None
    private: bool
    has_pages: bool = False
    html_url: str
    created_at: datetime

    @classmethod
    def from_data(cls, data: dict[str, Any]) -> RepoListing:
        return cls.model_validate(data)

    @property
    def public(self) -> bool:
        return not self.private

    def is_publishable(self, excluded_repo: str) -> bool:
        return (
            self.public
            and self.name != excluded_repo
            and self.has_pages
            and bool(self.description)
        )

    def to_project(self, site_url: str = SITE_URL) -> ProjectRecord:
        assert self.description
        return ProjectRecord(
            name=self.name,
            description=self.description,
            url=project_url(self.name, site_url),
            repo_url=self.html_url,
            created_at=self.created_at,
        )


class CommitPerson(BaseModel):
    date: str


class CommitDetails(BaseModel):
    committer: CommitPerson


class CommitItem(BaseModel):
    """An entry from the ``/repos/{owner}/{repo}/commits`` listing"""

    sha: str
    commit: CommitDetails


def get_token() -> str:
    try:
        return get_ghtoken()
    except GHTokenNotFound as e:
        raise AuthenticationError(
            "No GitHub token found; set GH_TOKEN or GITHUB_TOKEN, or log in"
            " with `gh auth login`"
        ) from e


def project_url(name: str, site_url: str = SITE_URL) -> str:
    return f"{site_url.rstrip('/')}/{name}/"


class DataDeskClient(Client):
    def __init__(self, token: str | None) -> None:
        super().__init__(token=token, user_agent=USER_AGENT)

    def get_latest_commit_date(self, repo_fullname: str) -> str | None:
        """
        Return the committer date of the most recent commit on the default
        branch of ``repo_fullname``, or `None` if the repository has no
        commits
        """
        try:
            commits = self.get(
                f"/repos/{repo_fullname}/commits", params={"per_page": "1"}
            )
        except PrettyHTTPError as e:
            if e.response is not None and e.response.status_code == 401:
                raise AuthenticationError(
                    f"GitHub rejected the credentials used to query {repo_fullname}"
                ) from e
            raise UpstreamUnavailable(
                f"Could not fetch latest commit of {repo_fullname}"
            ) from e
        except requests.RequestException as e:
            raise UpstreamUnavailable(f"Could not reach GitHub: {e}") from e
        if not isinstance(commits, list):
            raise UpstreamUnavailable(
                f"GitHub returned a malformed commit listing for {repo_fullname}"
            )
        if not commits:
            return None
        try:
            latest = CommitItem.model_validate(commits[0])
        except ValidationError as e:
            raise UpstreamUnavailable(
                f"GitHub returned a malformed commit listing for {repo_fullname}"
            ) from e
        return latest.commit.committer.date


class ProjectCollector(DataDeskClient):
    def __init__(
        self,
        token: str | None,
        site_url: str = SITE_URL,
        excluded_repo: str | None = None,
    ) -> None:
        super().__init__(token=token)
        self.site_url = site_url
        self.excluded_repo = excluded_repo

    def list_org_repositories(self, org: str) -> list[RepoListing]:
        """
        Fetch every repository owned by ``org``, following pagination to the
        end before returning anything.

        Raises:
            AuthenticationError: if GitHub rejects the credentials
            UpstreamUnavailable: if GitHub cannot be reached, responds with
                any other error, or returns a malformed listing
        """
        log.info("Enumerating all repositories in organization %s", org)
        try:
            listing = [
                RepoListing.from_data(datum)
                for datum in self.paginate(
                    f"/orgs/{org}/repos", params={"per_page": "100"}
                )
            ]
        except PrettyHTTPError as e:
            status = e.response.status_code if e.response is not None else None
            if status == 401:
                raise AuthenticationError(
                    f"GitHub rejected the credentials used to list {org}'s"
                    " repositories"
                ) from e
            elif status == 404:
                raise UpstreamUnavailable(
                    f"Organization {org} not found or not accessible"
                ) from e
            else:
                raise UpstreamUnavailable(
                    f"GitHub returned HTTP {status} while listing {org}'s"
                    " repositories"
                ) from e
        except requests.RequestException as e:
            raise UpstreamUnavailable(f"Could not reach GitHub: {e}") from e
        except ValidationError as e:
            raise UpstreamUnavailable(
                f"GitHub returned a malformed repository listing for {org}"
            ) from e
        log.info("Found %d repositories in %s", len(listing), org)
        return listing

    def collect(self, org: str) -> list[ProjectRecord]:
        """
        Return the publishable repositories of ``org`` as `ProjectRecord`\\s,
        in the order the API listed them
        """
        excluded = self.excluded_repo or index_repo_name(org)
        projects: list[ProjectRecord] = []
        for repo in self.list_org_repositories(org):
            if repo.is_publishable(excluded):
                log.debug("Including %s", repo.name)
                projects.append(repo.to_project(self.site_url))
            else:
                log.debug("Skipping %s", repo.name)
        log.info("%d repositories in %s are publishable", len(projects), org)
        return projects
