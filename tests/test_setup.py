from worklog_app.core.identity import TTLCache
from worklog_app.pages.setup import shared_identity_cache


def test_identity_cache_is_shared_per_site():
    first = shared_identity_cache("https://acme.atlassian.net", 300.0)
    again = shared_identity_cache("https://acme.atlassian.net", 300.0)
    other = shared_identity_cache("https://other.atlassian.net", 300.0)
    assert isinstance(first, TTLCache)
    assert first is again
    assert other is not first
    assert first.ttl_seconds == 300.0
