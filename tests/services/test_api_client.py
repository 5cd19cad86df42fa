# -*- coding: utf-8 -*-
"""
Tests for the registry REST client, remote stores and media store with
`requests` mocked out.
"""
from unittest.mock import MagicMock

import pytest
import requests

from models.remote_records import RemoteArea, RemoteMember
from services.api_client import ApiConfig, RegistryApiClient
from services.exceptions import ApiException, NetworkException
from services.media_store import RestMediaStore
from services.remote_store import RemoteEntityStore, create_remote_stores
from services.sync_types import EntityType


def _response(status=200, payload=None, content=b""):
    response = MagicMock()
    response.status_code = status
    response.text = "" if payload is None else "json"
    response.json.return_value = payload
    response.content = content
    if status >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=response)
    return response


@pytest.fixture
def config():
    return ApiConfig(base_url="https://registry.example.org/", api_key="secret", timeout=5)


@pytest.fixture
def http():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(config, http):
    return RegistryApiClient(config, session=http)


class TestRegistryApiClient:

    def test_select_builds_filters_and_order(self, client, http):
        http.request.return_value = _response(payload=[{"id": "r-1", "code": "W01"}])

        rows = client.select("areas", filters={"code": "W01"}, order="created_at.asc", limit=1)

        assert rows == [{"id": "r-1", "code": "W01"}]
        kwargs = http.request.call_args.kwargs
        assert kwargs["method"] == "GET"
        assert kwargs["url"] == "https://registry.example.org/rest/v1/areas"
        assert kwargs["params"] == {
            "select": "*", "code": "eq.W01", "order": "created_at.asc", "limit": 1
        }
        assert kwargs["headers"]["apikey"] == "secret"
        assert kwargs["headers"]["Authorization"] == "Bearer secret"
        assert kwargs["timeout"] == 5

    def test_insert_asks_for_representation(self, client, http):
        http.request.return_value = _response(payload=[{"id": "r-1", "code": "W01"}])

        stored = client.insert("areas", {"id": "r-1", "code": "W01"})

        assert stored == {"id": "r-1", "code": "W01"}
        kwargs = http.request.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["headers"]["Prefer"] == "return=representation"

    def test_update_filters_by_id(self, client, http):
        http.request.return_value = _response(payload=[])

        client.update("members", "r-9", {"first_name": "Jane"})

        kwargs = http.request.call_args.kwargs
        assert kwargs["method"] == "PATCH"
        assert kwargs["params"] == {"id": "eq.r-9"}
        assert kwargs["json"] == {"first_name": "Jane"}

    def test_http_error_maps_to_api_exception(self, client, http):
        http.request.return_value = _response(status=409, payload={"message": "duplicate key"})

        with pytest.raises(ApiException) as exc_info:
            client.insert("areas", {"code": "W01"})

        assert exc_info.value.status_code == 409
        assert exc_info.value.message == "duplicate key"

    def test_connection_error_maps_to_network_exception(self, client, http):
        http.request.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(NetworkException):
            client.select("areas")

    def test_health_check(self, client, http):
        http.request.return_value = _response(payload=[])
        assert client.health_check() is True

        http.request.side_effect = requests.exceptions.Timeout("slow")
        assert client.health_check() is False


class TestRemoteEntityStore:

    def test_list_oldest_first(self):
        api = MagicMock()
        api.select.return_value = [{"id": "r-1", "code": "W01", "name": "North", "extra": 1}]
        store = RemoteEntityStore(api, "areas", RemoteArea)

        records = store.list()

        api.select.assert_called_once_with("areas", order="created_at.asc")
        assert records == [RemoteArea(id="r-1", code="W01", name="North")]

    def test_member_lookup_uses_member_code(self):
        api = MagicMock()
        api.select.return_value = []
        stores = create_remote_stores(api)

        assert stores.for_type(EntityType.MEMBER).get_by_natural_key("W01-V01-000001") is None
        api.select.assert_called_once_with(
            "members", filters={"member_code": "W01-V01-000001"}, limit=1
        )

    def test_insert_returns_remote_id(self):
        api = MagicMock()
        api.insert.return_value = {"id": "r-1"}
        store = RemoteEntityStore(api, "areas", RemoteArea)

        assert store.insert(RemoteArea(id="r-1", code="W01", name="North")) == "r-1"
        assert api.insert.call_args.args[1]["code"] == "W01"

    def test_update_by_id(self):
        api = MagicMock()
        store = RemoteEntityStore(api, "members", RemoteMember)
        record = RemoteMember(id="r-2", member_code="C", unit_id="u", subarea_id="s",
                              area_id="a", first_name="A", last_name="B", sex="male")

        store.update("r-2", record)

        table, record_id, row = api.update.call_args.args
        assert (table, record_id, row["id"]) == ("members", "r-2", "r-2")


class TestRestMediaStore:

    def test_upload_returns_public_url(self, config, http):
        http.post.return_value = _response()
        store = RestMediaStore(config, session=http)

        locator = store.upload(b"jpeg", "member-photos/W01-V01-000001-1700000000000.jpg")

        assert locator == (
            "https://registry.example.org/storage/v1/object/public/"
            "member-photos/W01-V01-000001-1700000000000.jpg"
        )
        kwargs = http.post.call_args.kwargs
        assert http.post.call_args.args[0] == (
            "https://registry.example.org/storage/v1/object/"
            "member-photos/W01-V01-000001-1700000000000.jpg"
        )
        assert kwargs["headers"]["x-upsert"] == "true"
        assert kwargs["headers"]["Content-Type"] == "image/jpeg"
        assert kwargs["data"] == b"jpeg"

    def test_download_returns_bytes(self, config, http):
        http.get.return_value = _response(content=b"\xff\xd8")
        store = RestMediaStore(config, session=http)

        assert store.download("https://registry.example.org/x.jpg") == b"\xff\xd8"

    def test_upload_errors(self, config, http):
        store = RestMediaStore(config, session=http)

        http.post.return_value = _response(status=413)
        with pytest.raises(ApiException):
            store.upload(b"big", "member-photos/a.jpg")

        http.post.side_effect = requests.exceptions.ConnectionError("down")
        with pytest.raises(NetworkException):
            store.upload(b"x", "member-photos/a.jpg")
