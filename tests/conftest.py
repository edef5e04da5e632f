from __future__ import annotations
from collections.abc import Callable
from typing import Any
from ghreq import PrettyHTTPError
import pytest
import requests


def make_repo(
    name: str,
    description: str | None = "A notebook",
    private: bool = False,
    has_pages: bool = True,
    **extra: Any,
) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": name,
        "full_name": f"data-desk-eco/{name}",
        "private": private,
        "has_pages": has_pages,
        "html_url": f"https://github.com/data-desk-eco/{name}",
        "created_at": "2024-03-01T12:00:00Z",
        "fork": False,
    }
    if description is not None:
        data["description"] = description
    data.update(extra)
    return data


def make_http_error(status: int, message: str = "error") -> PrettyHTTPError:
    r = requests.Response()
    r.status_code = status
    r._content = ('{"message": "%s"}' % message).encode("utf-8")
    r.url = "https://api.github.com/orgs/data-desk-eco/repos"
    r.request = requests.Request("GET", r.url).prepare()
    return PrettyHTTPError(f"{status} {message}", response=r)


@pytest.fixture
def repo() -> Callable[..., dict[str, Any]]:
    return make_repo


@pytest.fixture
def http_error() -> Callable[..., PrettyHTTPError]:
    return make_http_error


@pytest.fixture
def scenario_repos() -> list[dict[str, Any]]:
    return [
        make_repo("proxy-tool", description="Intercepting proxy"),
        make_repo("data-desk-eco.github.io", description="Index"),
        make_repo("secret", description="x", private=True),
    ]
