import pytest

from urlbf.config import DEFAULT_CAPACITY, DEFAULT_STATE_PATH, DedupSettings
from urlbf.crawl.links import extract_links, truncate_page


def test_extract_links_only_http_targets():
    page = """
    <a href="http://a.example/x?y=1&z=2">a</a>
    <a href = 'https://b.example/path#frag'>b</a>
    <a href="/relative">c</a>
    <a href="mailto:someone@example.com">d</a>
    """
    assert extract_links(page) == ["http://a.example/x?y=1&z=2", "https://b.example/path#frag"]


def test_truncate_page():
    assert truncate_page("x" * 20, limit=5) == "xxxxx"
    assert len(truncate_page("y" * 20000)) == 10000


def test_settings_defaults():
    settings = DedupSettings.from_env({})
    assert settings.capacity == DEFAULT_CAPACITY
    assert settings.state_path == DEFAULT_STATE_PATH
    assert settings.log_level == "INFO"


def test_settings_from_env():
    settings = DedupSettings.from_env({
        "URLBF_CAPACITY": "500",
        "URLBF_STATE_PATH": "/tmp/x.bf",
        "URLBF_SATURATION_WARNING": "0.3",
        "URLBF_LOG_LEVEL": "debug",
    })
    assert settings == DedupSettings(capacity=500, state_path="/tmp/x.bf", saturation_warning=0.3, log_level="debug")


def test_settings_read_os_environ(monkeypatch):
    monkeypatch.setenv("URLBF_CAPACITY", "77")
    assert DedupSettings.from_env().capacity == 77


@pytest.mark.parametrize(
    "env",
    [
        {"URLBF_CAPACITY": "many"},
        {"URLBF_CAPACITY": "0"},
        {"URLBF_SATURATION_WARNING": "1.5"},
        {"URLBF_LOG_LEVEL": "LOUD"},
    ],
)
def test_settings_invalid(env):
    with pytest.raises(ValueError):
        DedupSettings.from_env(env)
