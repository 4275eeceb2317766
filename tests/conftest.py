"""Shared pytest fixtures for hn_alert tests."""

from __future__ import annotations

from datetime import timedelta

import pytest

from hn_alert.config import Settings
from hn_alert.errors import NotifyError

# A sampling pulled from a domain-specific HN listing page.
LISTING_HTML = """
        <span class="score" id="score_13877867">2 points</span> by <a href="user?id=mooreds" class="hnuser">mooreds</a> <span class="age"><a href="item?id=13877867">3 days ago</a></span> <span id="unv_13877867"></span> | <a href="flag?id=13877867&amp;auth=6872af1bbe300db8892d0032ac5a516312b40846&amp;goto=from%3Fsite%3Dbrandur.org">flag</a> | <a href="https://hn.algolia.com/?query=AWS%20Islands&sort=byDate&dateRange=all&type=story&storyText=false&prefix&page=0" class="hnpast">past</a> | <a href="item?id=13877867">discuss</a>              </td></tr>
      <tr class="spacer" style="height:5px"></tr>
                <tr class='athing' id='13845842'>
      <td class="title"><a href="https://brandur.org/canonical-log-lines" class="storylink" rel="nofollow">Using Canonical Log Lines for Online Visibility</a><span class="sitebit comhead"> (<a href="from?site=brandur.org"><span class="sitestr">brandur.org</span></a>)</span></td></tr><tr><td colspan="2"></td><td class="subtext">
        <span class="score" id="score_13845842">6 points</span> by <a href="user?id=aurelium" class="hnuser">aurelium</a> <span class="age"><a href="item?id=13845842">7 days ago</a></span> <span id="unv_13845842"></span> | <a href="item?id=13845842">discuss</a>              </td></tr>
"""

FRESH_HTML = '<span class="age"><a href="item?id=424242">5 minutes ago</a></span>'

TWO_FRESH_HTML = (
    '<span class="age"><a href="item?id=500001">5 minutes ago</a></span>'
    '<span class="age"><a href="item?id=500002">12 minutes ago</a></span>'
)

FORTNIGHT_HTML = '<span class="age"><a href="item?id=1">2 fortnight ago</a></span>'


def make_settings(**overrides) -> Settings:
    values = {
        "domains": ("brandur.org",),
        "recipient": "alerts@example.com",
        "smtp_login": "login",
        "smtp_password": "secret",
        "smtp_server": "smtp.example.com",
        "smtp_port": 587,
        "loop": False,
    }
    values.update(overrides)
    return Settings(**values)


class RecordingNotifier:
    """Collects notified domains; raises NotifyError for domains in ``fail_for``."""

    def __init__(self, fail_for: set[str] | None = None, fail_times: int | None = None) -> None:
        self.calls: list[str] = []
        self.fail_for = fail_for or set()
        self.fail_times = fail_times
        self._failures = 0

    def __call__(self, domain: str) -> None:
        self.calls.append(domain)
        if domain in self.fail_for and (self.fail_times is None or self._failures < self.fail_times):
            self._failures += 1
            raise NotifyError(domain, "connection refused")


class FakeFetcher:
    """Serves canned pages by URL and records every request in order."""

    def __init__(self, pages: dict[str, str | Exception]) -> None:
        self.pages = pages
        self.requested: list[str] = []

    def __call__(self, url: str) -> str:
        self.requested.append(url)
        page = self.pages[url]
        if isinstance(page, Exception):
            raise page
        return page


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def twenty_minutes() -> timedelta:
    return timedelta(minutes=20)
