"""Fetch contribution calendars from the GitHub GraphQL API."""

from __future__ import annotations

import base64
import binascii
import os
import sys
from datetime import datetime, timedelta, timezone
from typing import Any

import requests

from .model import Contribution

URL = "https://api.github.com/graphql"
TOKEN_VARIABLE = "GITHUB_API_TOKEN"
USER_AGENT = "graphql-rust"
FIRST_YEAR = 2008
MAX_DAYS_PER_WEEK = 7
MAX_WEEKS = 53

_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

ID_QUERY = """
query IdQuery($username: String!) {
  user(login: $username) {
    id
  }
}
"""

CONTRIBUTION_QUERY = """
query ContributionQuery($username: String!, $startDate: DateTime!, $endDate: DateTime!) {
  user(login: $username) {
    contributionsCollection(from: $startDate, to: $endDate) {
      contributionCalendar {
        weeks {
          contributionDays {
            contributionCount
            color
            date
          }
        }
      }
    }
  }
}
"""

CONTRIBUTION_BY_REPO_QUERY = """
query ContributionByRepoQuery(
  $username: String!,
  $owner: String!,
  $repoName: String!,
  $startDate: GitTimestamp!,
  $endDate: GitTimestamp!
) {
  user(login: $username) {
    id
  }
  repository(owner: $owner, name: $repoName) {
    refs(refPrefix: "refs/heads/", first: 100) {
      nodes {
        target {
          __typename
          ... on Commit {
            history(since: $startDate, until: $endDate, first: 100) {
              edges {
                node {
                  committedDate
                }
              }
            }
          }
        }
      }
    }
  }
}
"""


class GithubError(Exception):
    """Raised when contributions cannot be fetched or make no sense."""


def year_to_git_timestamp(year: int, now: datetime | None = None) -> tuple[str, str]:
    """Return the start and end timestamps of ``year``.

    A year of 0 means the 365 days ending today.
    """
    now = now or datetime.now(timezone.utc)
    if year == 0:
        start = now - timedelta(days=365)
        return (
            f"{start.year}-{start.month}-{start.day}T00:00:00Z",
            f"{now.year}-{now.month}-{now.day}T00:00:00Z",
        )
    if year < FIRST_YEAR or year >= now.year:
        raise GithubError("Invalid Year")
    return f"{year}-01-01T00:00:00Z", f"{year}-12-31T11:59:59Z"


def _parse_timestamp(text: str) -> datetime:
    try:
        return datetime.strptime(text, _TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        pass
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError as exc:
        raise GithubError(f"Invalid timestamp {text!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _format_timestamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime(_TIMESTAMP_FORMAT)


def _field(mapping: Any, key: str) -> Any:
    """Return a field that the response must carry, raising if it is absent or null."""
    if not isinstance(mapping, dict) or mapping.get(key) is None:
        raise GithubError(f"Missing field {key!r} in response")
    return mapping[key]


class GithubContributions:
    """Client for the contribution queries of the GitHub GraphQL API."""

    def __init__(self, token: str, session: requests.Session | None = None) -> None:
        self.session = session or requests.Session()
        self.session.headers.update(
            {"User-Agent": USER_AGENT, "Authorization": f"Bearer {token}"}
        )

    @classmethod
    def from_env(cls) -> GithubContributions:
        """Create a client from the token in the environment."""
        token = os.environ.get(TOKEN_VARIABLE)
        if not token:
            raise GithubError(f"Missing {TOKEN_VARIABLE}")
        return cls(token)

    def _post(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        try:
            response = self.session.post(
                URL, json={"query": query, "variables": variables}
            )
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise GithubError(f"GraphQL request failed: {exc}") from exc
        if not isinstance(body, dict):
            raise GithubError("Unexpected GraphQL response")
        return body

    def get_user_id(self, username: str) -> dict[str, Any]:
        """Return the response data of the user id query."""
        body = self._post(ID_QUERY, {"username": username})
        data = body.get("data")
        if data is None:
            raise GithubError("Failed to fetch data")
        return data

    def print_user_id(self, username: str) -> None:
        """Print the decoded node id of a user, if the user exists."""
        user = self.get_user_id(username).get("user")
        if user is None:
            return
        try:
            decoded = base64.b64decode(_field(user, "id"), validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise GithubError("Invalid user id") from exc
        print(decoded)

    def get_contributions(self, user: str, year: int) -> list[Contribution]:
        """Return the contribution calendar of ``user`` for ``year``."""
        start, end = year_to_git_timestamp(year)
        variables = {
            "username": user,
            "startDate": _format_timestamp(_parse_timestamp(start)),
            "endDate": _format_timestamp(_parse_timestamp(end)),
        }
        body = self._post(CONTRIBUTION_QUERY, variables)
        data = body.get("data")
        if data is None:
            raise GithubError("Failed to fetch data")
        found = data.get("user")
        if found is None:
            raise GithubError("No user found")

        calendar = _field(
            _field(found, "contributionsCollection"), "contributionCalendar"
        )
        contributions: list[Contribution] = []
        for week_index, week in enumerate(_field(calendar, "weeks")):
            for day_index, day in enumerate(_field(week, "contributionDays")):
                contributions.append(
                    Contribution(
                        week=week_index,
                        day=day_index,
                        count=int(_field(day, "contributionCount")),
                        data=str(day.get("color", "")),
                    )
                )
                if day_index + 1 > MAX_DAYS_PER_WEEK:
                    raise GithubError(
                        f"Invalid day {day_index + 1} from date {day.get('date')!r}"
                    )
            if week_index + 1 > MAX_WEEKS:
                raise GithubError(f"Invalid week {week_index + 1}")
        return contributions

    def get_contributions_by_repo(
        self, user: str, owner: str, repo: str, year: int
    ) -> list[Contribution]:
        """Return daily commit counts on the branches of ``owner/repo`` for ``year``."""
        start, end = year_to_git_timestamp(year)
        start_date = _parse_timestamp(start)
        end_date = _parse_timestamp(end)
        variables = {
            "username": user,
            "owner": owner,
            "repoName": repo,
            "startDate": _format_timestamp(start_date),
            "endDate": _format_timestamp(end_date),
        }
        body = self._post(CONTRIBUTION_BY_REPO_QUERY, variables)

        errors = body.get("errors")
        if errors is not None:
            for error in errors:
                print(f"Error: {error.get('message', '')}", file=sys.stderr)
            raise GithubError("Graphql query returned errors")

        data = body.get("data")
        if data is None:
            raise GithubError("Failed to fetch data")
        nodes = _field(_field(_field(data, "repository"), "refs"), "nodes")

        num_days = (end_date - start_date).days + 1
        commit_counts = [0] * num_days
        for node in nodes:
            if node is None:
                raise GithubError("Missing ref node in response")
            target = _field(node, "target")
            if target.get("__typename") != "Commit":
                continue
            for edge in _field(_field(target, "history"), "edges"):
                if edge is None:
                    raise GithubError("Missing history edge in response")
                committed = _parse_timestamp(
                    _field(_field(edge, "node"), "committedDate")
                )
                index = num_days - (committed - start_date).days
                if not 0 <= index < num_days:
                    raise GithubError(
                        f"Commit date {_format_timestamp(committed)} is out of range"
                    )
                commit_counts[index] += 1

        return [
            Contribution(week=index // 7, day=index % 7, count=count, data="")
            for index, count in enumerate(commit_counts)
        ]