"""
Pytest configuration and shared fixtures.
"""

import os

import pytest

from tab_topics.config import reset_settings
from tab_topics.clustering.models import Tab


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate tests from TAB_TOPICS_* variables and cached settings."""
    for key in list(os.environ):
        if key.upper().startswith("TAB_TOPICS_"):
            monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def rust_tabs():
    """The two Rust documentation tabs and an unrelated weather tab."""
    return [
        Tab(id="1", title="Rust Book", url="https://doc.rust-lang.org"),
        Tab(id="2", title="The Rust Programming Language", url="https://doc.rust-lang.org/book"),
        Tab(id="3", title="Weather Today", url="https://weather.com"),
    ]


@pytest.fixture
def session_tabs():
    """A small browsing session with two topics and one stray tab."""
    return [
        Tab(id="1", title="Neo4j Graph Database Guide", url="https://neo4j.com/docs", group_id=0, tab_index=0),
        Tab(id="2", title="Graph Database Modeling", url="https://neo4j.com/docs/modeling", group_id=0, tab_index=1),
        Tab(id="3", title="React Hooks Tutorial", url="https://react.dev/learn", group_id=1, tab_index=0),
        Tab(id="4", title="React Hooks Reference", url="https://react.dev/reference", group_id=1, tab_index=1),
        Tab(id="5", title="Weather Forecast", url="https://weather.com", group_id=1, tab_index=2),
    ]
