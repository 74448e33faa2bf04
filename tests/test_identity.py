import pytest
from conftest import FakeJiraAPI

from worklog_app.core.errors import JiraRequestError
from worklog_app.core.identity import IdentityResolver, TTLCache


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class FailingAPI(FakeJiraAPI):
    def search_users(self, query, max_results=2):
        self.user_calls.append(query)
        raise JiraRequestError("denied", 403, {"errorMessages": ["denied"]})


def test_cache_expires_after_ttl():
    clock = FakeClock()
    cache = TTLCache(ttl_seconds=300, clock=clock)
    cache.store("a@x.com", "acc-1")
    clock.now += 299
    assert cache.lookup("a@x.com") == (True, "acc-1")
    clock.now += 1
    assert cache.lookup("a@x.com") == (False, None)


def test_cached_none_is_a_hit():
    cache = TTLCache(clock=FakeClock())
    cache.store("ghost@x.com", None)
    assert cache.lookup("ghost@x.com") == (True, None)
    assert cache.lookup("other@x.com") == (False, None)


def test_second_resolution_within_ttl_hits_cache():
    api = FakeJiraAPI(users={"alice@x.com": [{"accountId": "acc-a", "emailAddress": "alice@x.com"}]})
    resolver = IdentityResolver(api, TTLCache(clock=FakeClock()))
    assert resolver.resolve("alice@x.com") == "acc-a"
    assert resolver.resolve("  Alice@X.com ") == "acc-a"
    assert api.user_calls == ["alice@x.com"]


def test_first_match_is_authoritative():
    api = FakeJiraAPI(users={"bob@x.com": [{"accountId": "acc-1"}, {"accountId": "acc-2"}]})
    assert IdentityResolver(api).resolve("bob@x.com") == "acc-1"


def test_not_found_is_cached():
    api = FakeJiraAPI()
    resolver = IdentityResolver(api, TTLCache(clock=FakeClock()))
    identity = resolver.identity("nobody@x.com")
    assert identity.email == "nobody@x.com"
    assert identity.account_id is None
    assert resolver.resolve("nobody@x.com") is None
    assert api.user_calls == ["nobody@x.com"]


def test_refetches_after_expiry():
    clock = FakeClock()
    api = FakeJiraAPI(users={"alice@x.com": [{"accountId": "acc-a"}]})
    resolver = IdentityResolver(api, TTLCache(ttl_seconds=300, clock=clock))
    resolver.resolve("alice@x.com")
    clock.now += 301
    api.users["alice@x.com"] = [{"accountId": "acc-new"}]
    assert resolver.resolve("alice@x.com") == "acc-new"
    assert len(api.user_calls) == 2


def test_lookup_failure_propagates_and_is_not_cached():
    api = FailingAPI()
    cache = TTLCache(clock=FakeClock())
    resolver = IdentityResolver(api, cache)
    with pytest.raises(JiraRequestError):
        resolver.resolve("alice@x.com")
    assert len(cache) == 0


def test_blank_email_skips_lookup():
    api = FakeJiraAPI()
    assert IdentityResolver(api).resolve("   ") is None
    assert api.user_calls == []
