from types import SimpleNamespace

import pytest

from worklog_app.core.errors import JiraRequestError
from worklog_app.core.jira_client import JiraAPI


class FakeResponse:
    def __init__(self, status_code=200, data=None, text=""):
        self.status_code = status_code
        self._data = data
        self.text = text

    def json(self):
        if self._data is None:
            raise ValueError("no json")
        return self._data


class FakeSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        return self.responses.pop(0)


def _api(*responses):
    api = JiraAPI.__new__(JiraAPI)
    api.server = "https://example.atlassian.net"
    api.client = SimpleNamespace(_session=FakeSession(responses))
    return api


def test_search_users_sends_query():
    api = _api(FakeResponse(data=[{"accountId": "acc-1"}]))
    assert api.search_users("a@x.com", max_results=2) == [{"accountId": "acc-1"}]
    method, url, kwargs = api.client._session.calls[0]
    assert method == "GET"
    assert url == "https://example.atlassian.net/rest/api/3/user/search"
    assert kwargs["params"] == {"query": "a@x.com", "maxResults": 2}


def test_search_issues_page_body():
    api = _api(FakeResponse(data={"issues": []}), FakeResponse(data={"issues": []}))
    api.search_issues_page("jql", fields=["summary"], max_results=100)
    api.search_issues_page("jql", fields=["summary"], max_results=100, next_page_token="tok")
    first = api.client._session.calls[0]
    second = api.client._session.calls[1]
    assert first[0] == "POST"
    assert first[1].endswith("/rest/api/3/search/jql")
    assert first[2]["json"] == {"jql": "jql", "maxResults": 100, "fields": ["summary"]}
    assert second[2]["json"]["nextPageToken"] == "tok"


def test_list_worklogs_follows_start_at_paging():
    api = _api(
        FakeResponse(data={"startAt": 0, "total": 3, "worklogs": [{"id": "1"}, {"id": "2"}]}),
        FakeResponse(data={"startAt": 2, "total": 3, "worklogs": [{"id": "3"}]}),
    )
    data = api.list_worklogs("ABC-1", started_after_ms=10, started_before_ms=20, page_size=2)
    assert [w["id"] for w in data["worklogs"]] == ["1", "2", "3"]
    calls = api.client._session.calls
    assert calls[0][1].endswith("/rest/api/3/issue/ABC-1/worklog")
    assert calls[0][2]["params"] == {"maxResults": 2, "startedAfter": 10, "startedBefore": 20, "startAt": 0}
    assert calls[1][2]["params"]["startAt"] == 2


def test_list_worklogs_single_page_without_total():
    api = _api(FakeResponse(data={"worklogs": [{"id": "1"}]}))
    assert api.list_worklogs("ABC-1") == {"worklogs": [{"id": "1"}]}
    assert len(api.client._session.calls) == 1


def test_error_keeps_upstream_status_and_body():
    body = {"errorMessages": ["Issue does not exist"]}
    api = _api(FakeResponse(404, data=body, text='{"errorMessages": ["Issue does not exist"]}'))
    with pytest.raises(JiraRequestError) as info:
        api.list_worklogs("ABC-404")
    assert info.value.status_code == 404
    assert info.value.payload == body


def test_error_with_plain_text_body():
    api = _api(FakeResponse(401, data=None, text="Unauthorized"))
    with pytest.raises(JiraRequestError) as info:
        api.search_users("a@x.com")
    assert info.value.status_code == 401
    assert info.value.payload == "Unauthorized"
