# skylinegen

Turn a year of GitHub contributions into a 3D-printable skyline.

`skylinegen` fetches a user's contribution calendar through the GitHub GraphQL API
and writes a binary STL model. The model has one column per day, and each column's
height is scaled to that day's contribution count. The busiest day is 25 units tall.
The columns stand on a thin plate, and the plate sits on a trapezoidal plinth.

## Installation

```
pip install .
```

## Authentication

The GitHub GraphQL API needs a personal access token. Put it in the
`GITHUB_API_TOKEN` environment variable:

```
export GITHUB_API_TOKEN=token
```

## Usage

Make a skyline of a user's contributions for a whole year:

```
skylineg --user octocat --year 2020
```

This writes `octocat_2020.stl` to the current directory.

To use the 365 days that end today, pass year `0`. The output file is then
`octocat_0.stl`:

```
skylineg --user octocat --year 0
```

Any other year must be 2008 or later, and earlier than the current year.

To count only the commits in one repository, give its name and owner:

```
skylineg --user octocat --year 2020 --repo hello-world --owner octocat
```

If `--repo` is given, `--owner` is required. In this mode the counts cover the
first 100 branches of the repository and the first 100 commits in each branch's
history within the date range.

Options:

| Option | Meaning |
| --- | --- |
| `-u`, `--user` | GitHub login (required) |
| `-y`, `--year` | year to chart, or `0` for the last 365 days (required) |
| `-r`, `--repo` | count commits in this repository only |
| `-o`, `--owner` | owner of the repository given with `--repo` |
| `-V`, `--version` | print the version and exit |

If the token is missing, the year is invalid, the user does not exist or the API
returns errors, the command prints a message to standard error and exits with
status 1.

## Library use

```python
from skylinegen.github import GithubContributions
from skylinegen.stl import create_3d_model

client = GithubContributions.from_env()
contributions = client.get_contributions("octocat", 2020)
path = create_3d_model("octocat", 2020, contributions)
```

- `skylinegen.model.Contribution` holds one day of the grid: `week`, `day`,
  `count` and `data`, which is the calendar colour.
- `GithubContributions(token, session=None)` makes a client.
  `GithubContributions.from_env()` reads the token from `GITHUB_API_TOKEN`.
  The client has `get_contributions(user, year)` and
  `get_contributions_by_repo(user, owner, repo, year)`. It also has
  `get_user_id(username)`, which returns the raw response data, and
  `print_user_id(username)`, which prints the base64-decoded node id.
- `skylinegen.github.year_to_git_timestamp(year, now=None)` returns the start and
  end timestamps that are used for a year.
- Failures raise `skylinegen.github.GithubError`.
- `skylinegen.stl.build_triangles(contributions)` returns the mesh as a list of
  `Triangle` objects: the columns, then the plate, then the plinth.
- `skylinegen.stl.write_stl(stream, triangles)` writes any triangles as binary
  STL to an open binary stream.
- `create_3d_model(user, year, contributions)` writes `<user>_<year>.stl` to the
  working directory and returns its `Path`.