import json
import struct

import pytest
import responses

from skylinegen.cli import main
from skylinegen.github import URL


def _triangle_count(path):
    data = path.read_bytes()
    (count,) = struct.unpack_from("<I", data, 80)
    assert len(data) == 84 + 50 * count
    return count


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GITHUB_API_TOKEN", "token")
    return tmp_path


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def test_main_writes_calendar_model(workdir, mocked):
    days = [{"contributionCount": n, "color": "#fff", "date": "d"} for n in (1, 2, 3)]
    body = {
        "data": {
            "user": {
                "contributionsCollection": {
                    "contributionCalendar": {"weeks": [{"contributionDays": days}]}
                }
            }
        }
    }
    mocked.post(URL, json=body)
    assert main(["-u", "octo", "-y", "2021"]) == 0
    path = workdir / "octo_2021.stl"
    assert path.exists()
    assert _triangle_count(path) == 12 * (len(days) + 2)


def test_main_writes_repo_model(workdir, mocked):
    body = {
        "data": {
            "user": {"id": "x"},
            "repository": {
                "refs": {
                    "nodes": [
                        {
                            "target": {
                                "__typename": "Commit",
                                "history": {
                                    "edges": [
                                        {"node": {"committedDate": "2021-07-01T00:00:00Z"}}
                                    ]
                                },
                            }
                        }
                    ]
                }
            },
        }
    }
    mocked.post(URL, json=body)
    assert main(["--user", "octo", "--year", "2021", "--repo", "r", "--owner", "o"]) == 0
    sent = json.loads(mocked.calls[0].request.body)["variables"]
    assert sent["owner"] == "o"
    assert sent["repoName"] == "r"
    count = _triangle_count(workdir / "octo_2021.stl")
    assert count % 12 == 0
    assert count > 24


def test_main_repo_without_owner(workdir, capsys):
    assert main(["-u", "octo", "-y", "2021", "-r", "repo"]) == 1
    assert "Missing Owner field" in capsys.readouterr().err
    assert not (workdir / "octo_2021.stl").exists()


def test_main_without_token(workdir, monkeypatch, capsys):
    monkeypatch.delenv("GITHUB_API_TOKEN")
    assert main(["-u", "octo", "-y", "2021"]) == 1
    assert "GITHUB_API_TOKEN" in capsys.readouterr().err


def test_main_invalid_year(workdir, capsys):
    assert main(["-u", "octo", "-y", "2000"]) == 1
    assert "Invalid Year" in capsys.readouterr().err


def test_main_requires_user():
    with pytest.raises(SystemExit) as excinfo:
        main(["-y", "2021"])
    assert excinfo.value.code == 2


def test_main_rejects_negative_year():
    with pytest.raises(SystemExit) as excinfo:
        main(["-u", "octo", "-y", "-5"])
    assert excinfo.value.code == 2


def test_main_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])
    assert excinfo.value.code == 0
    assert "0.0.1" in capsys.readouterr().out