import json

import pytest
import requests

from skytracker.config import settings
from skytracker.data import tle_fetcher
from skytracker.data.tle_fetcher import fetch_group_text, load_element_sets, read_tle_file

from conftest import ISS_2021, STARLINK_1007, as_text


class FakeResponse:
    def __init__(self, text="", status_code=200, content_type="text/plain"):
        self.text = text
        self.status_code = status_code
        self.headers = {"Content-Type": content_type}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}", response=self)


class FakeSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params))
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture(autouse=True)
def no_backoff(monkeypatch):
    monkeypatch.setattr(settings, "HTTP_BACKOFF_S", 0.0)


def test_fetch_success_writes_cache_and_hits_it(tmp_path):
    text = as_text(STARLINK_1007, ISS_2021)
    session = FakeSession([FakeResponse(text)])

    assert fetch_group_text("starlink", session=session, cache_dir=tmp_path) == text
    assert session.calls[0][1] == {"GROUP": "starlink", "FORMAT": "TLE"}

    entry = json.loads((tmp_path / "starlink.json").read_text(encoding="utf-8"))
    assert entry["text"] == text

    # second call served from disk, session untouched
    again = FakeSession([])
    assert fetch_group_text("starlink", session=again, cache_dir=tmp_path) == text
    assert again.calls == []


def test_expired_cache_is_refetched(tmp_path, monkeypatch):
    old = as_text(STARLINK_1007)
    new = as_text(STARLINK_1007, ISS_2021)
    fetch_group_text("starlink", session=FakeSession([FakeResponse(old)]), cache_dir=tmp_path)

    monkeypatch.setattr(settings, "TLE_CACHE_TTL_HOURS", 0.0)
    session = FakeSession([FakeResponse(new)])
    assert fetch_group_text("starlink", session=session, cache_dir=tmp_path) == new
    assert len(session.calls) == 1


def test_corrupt_cache_is_ignored(tmp_path):
    (tmp_path / "starlink.json").write_text("{not json", encoding="utf-8")
    text = as_text(ISS_2021)
    assert fetch_group_text("starlink", session=FakeSession([FakeResponse(text)]), cache_dir=tmp_path) == text


def test_retries_then_succeeds(tmp_path):
    text = as_text(ISS_2021)
    session = FakeSession([
        requests.ConnectionError("boom"),
        FakeResponse("<html>rate limited</html>", content_type="text/html"),
        FakeResponse(text),
    ])
    assert fetch_group_text("stations", session=session, use_cache=False) == text
    assert len(session.calls) == 3


def test_gives_up_after_retries():
    session = FakeSession([FakeResponse("No GP data found")] * settings.HTTP_RETRIES)
    with pytest.raises(RuntimeError, match="after retries"):
        fetch_group_text("nothing", session=session, use_cache=False)


def test_404_fails_fast():
    session = FakeSession([FakeResponse("", status_code=404)])
    with pytest.raises(RuntimeError, match="404"):
        fetch_group_text("nothing", session=session, use_cache=False)
    assert len(session.calls) == 1


def test_load_element_sets(tmp_path):
    text = as_text(STARLINK_1007, ISS_2021) + "DANGLING\n"
    report = load_element_sets("starlink", session=FakeSession([FakeResponse(text)]), use_cache=False)
    assert [s.name for s in report.element_sets] == ["STARLINK-1007", "ISS (ZARYA)"]


def test_read_tle_file(tmp_path):
    path = tmp_path / "sats.tle"
    path.write_text(as_text(ISS_2021), encoding="utf-8")
    assert read_tle_file(path).splitlines()[0] == "ISS (ZARYA)"


def test_html_detection():
    assert tle_fetcher._looks_like_html("<!DOCTYPE html><html></html>")
    assert not tle_fetcher._looks_like_celestrak_error(as_text(ISS_2021))
