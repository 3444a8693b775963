"""
Tests for the executor, orchestrator and settings, using a fake client.
"""

import pytest
from elasticsearch import Elasticsearch

from es_query.config import EngineSettings
from es_query.core.models import SearchRecord
from es_query.execution.executor import ESSearchExecutor
from es_query.execution.registry import ClassRegistry
from es_query.orchestrator import SearchOrchestrator
from es_query.query.builder import SearchRequestBuilder


class Account(SearchRecord):
    owner: str
    balance: int = 0


class FakeClient:
    """Records search calls and answers with a canned response."""

    def __init__(self, response=None, error=None):
        self.response = response if response is not None else {"hits": {"total": {"value": 0}, "hits": []}}
        self.error = error
        self.calls = []

    def search(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return self.response


class FakeApiResponse:
    def __init__(self, body):
        self.body = body


def account_hit(doc_id, owner, rehydration_class="Account"):
    return {
        "_id": doc_id,
        "_index": "accounts",
        "_type": "_doc",
        "_source": {"owner": owner, "balance": 10, "rehydration_class": rehydration_class},
    }


def test_search_kwargs_spread_body_and_rename_from():
    request = SearchRequestBuilder(
        _indices="accounts", _from=10, _size=5, _sort_by={"balance": "desc"}, owner="ann", _aggs="owner"
    ).search_request()

    assert ESSearchExecutor.search_kwargs(request) == {
        "index": ["accounts"],
        "size": 5,
        "from_": 10,
        "query": {"bool": {"must": [{"match_phrase": {"owner": "ann"}}]}},
        "sort": [{"balance": "desc"}],
        "aggs": {"owner": {"terms": {"field": "owner"}}},
    }


def test_execute_rehydrates_response():
    client = FakeClient(
        {"hits": {"total": {"value": 2}, "hits": [account_hit("1", "ann"), account_hit("2", "bob", "Nope")]}}
    )
    executor = ESSearchExecutor(es_client=client)

    response = executor.execute(SearchRequestBuilder(_indices="accounts").search_request(), ClassRegistry([Account]))

    assert client.calls == [{"index": ["accounts"]}]
    assert [record.owner for record in response.records] == ["ann"]
    assert len(response.errors) == 1
    assert response.total_hits == 2


def test_execute_raw_unwraps_api_response_body():
    body = {"hits": {"hits": []}}
    executor = ESSearchExecutor(es_client=FakeClient(FakeApiResponse(body)))

    assert executor.execute_raw(SearchRequestBuilder().search_request()) is body


def test_transport_errors_propagate():
    executor = ESSearchExecutor(es_client=FakeClient(error=ConnectionError("cluster down")))

    with pytest.raises(ConnectionError, match="cluster down"):
        executor.execute(SearchRequestBuilder(_indices="accounts").search_request(), ClassRegistry())


def test_executor_needs_client_or_host():
    with pytest.raises(ValueError):
        ESSearchExecutor()


def test_executor_builds_client_from_host():
    executor = ESSearchExecutor(es_host="http://localhost:9200")
    assert isinstance(executor.es_client, Elasticsearch)


def test_orchestrator_where_uses_default_index():
    client = FakeClient({"hits": {"hits": [account_hit("1", "ann")]}})
    orchestrator = SearchOrchestrator(
        executor=ESSearchExecutor(es_client=client),
        registry=ClassRegistry([Account]),
        index_name="accounts",
        ignore_unavailable=True,
    )

    response = orchestrator.where(owner="ann")

    assert client.calls == [
        {
            "index": ["accounts"],
            "ignore_unavailable": True,
            "query": {"bool": {"must": [{"match_phrase": {"owner": "ann"}}]}},
        }
    ]
    assert response.records[0].id == "1"


def test_orchestrator_explicit_indices_win():
    orchestrator = SearchOrchestrator(executor=ESSearchExecutor(es_client=FakeClient()), index_name="accounts")

    request = orchestrator.build(_indices=["archive"])

    assert request.indices == ["archive"]
    assert request.ignore_unavailable is None


def test_orchestrator_from_settings():
    settings = EngineSettings(es_host="http://search:9200", index_name="accounts", rehydration_field="kind")

    orchestrator = SearchOrchestrator.from_settings(settings)

    assert orchestrator.index_name == "accounts"
    assert orchestrator.executor.rehydration_field == "kind"
    assert isinstance(orchestrator.executor.es_client, Elasticsearch)


def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("ES_HOST", "http://search:9200")
    monkeypatch.setenv("ES_INDEX", "accounts")
    monkeypatch.setenv("ES_IGNORE_UNAVAILABLE", "true")
    monkeypatch.delenv("ES_REHYDRATION_FIELD", raising=False)

    settings = EngineSettings.from_env(str(tmp_path / "missing.env"))

    assert settings == EngineSettings(
        es_host="http://search:9200",
        index_name="accounts",
        rehydration_field="rehydration_class",
        ignore_unavailable=True,
    )


def test_settings_from_dotenv_file(monkeypatch, tmp_path):
    for name in ("ES_HOST", "ES_INDEX", "ES_IGNORE_UNAVAILABLE"):
        monkeypatch.delenv(name, raising=False)
    # Registered so monkeypatch removes the value load_dotenv sets.
    monkeypatch.setenv("ES_REHYDRATION_FIELD", "placeholder")
    monkeypatch.delenv("ES_REHYDRATION_FIELD")
    dotenv_file = tmp_path / ".env"
    dotenv_file.write_text("ES_REHYDRATION_FIELD=kind\n")

    settings = EngineSettings.from_env(str(dotenv_file))

    assert settings.rehydration_field == "kind"
    assert settings.es_host == "http://localhost:9200"
    assert settings.index_name is None
    assert settings.ignore_unavailable is None
