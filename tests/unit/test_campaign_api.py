"""Tests for the campaign CRUD API client."""

from unittest.mock import patch

import pytest
import requests

from mcp_agent.services.campaign_api import (
    CampaignApiClient,
    CampaignApiError,
    CampaignApiNotConfigured,
    CampaignApiRejected,
    CampaignApiUnavailable,
    get_campaign_api,
)
from tests.conftest import make_http_response

API_REQUEST = "mcp_agent.services.campaign_api.requests.request"


class TestRequests:
    def test_create_posts_fields(self):
        api = CampaignApiClient("http://dash.test/api/", timeout=5)
        with patch(API_REQUEST, return_value=make_http_response(201, {"id": "1"})) as mock_req:
            status, record = api.create({"name": "A"})
        assert (status, record) == (201, {"id": "1"})
        mock_req.assert_called_once_with(
            "POST", "http://dash.test/api/campaigns", params=None, json={"name": "A"}, timeout=5,
        )

    def test_update_sends_id_as_query_param(self):
        api = CampaignApiClient("http://dash.test/api")
        with patch(API_REQUEST, return_value=make_http_response(200, {})) as mock_req:
            api.update("abc", {"status": "paused"})
        assert mock_req.call_args[1]["params"] == {"id": "abc"}
        assert mock_req.call_args[1]["json"] == {"status": "paused"}

    def test_list_skips_non_dict_entries(self):
        api = CampaignApiClient("http://dash.test/api")
        with patch(API_REQUEST, return_value=make_http_response(200, [{"name": "A"}, "junk", None])):
            assert api.list(fields=["name"]) == [{"name": "A"}]

    def test_list_without_json_is_empty(self):
        api = CampaignApiClient("http://dash.test/api")
        with patch(API_REQUEST, return_value=make_http_response(200, None)):
            assert api.list() == []


class TestErrors:
    def test_not_configured(self):
        with pytest.raises(CampaignApiNotConfigured):
            CampaignApiClient("").list()

    def test_connection_refused(self):
        api = CampaignApiClient("http://dash.test/api")
        with patch(API_REQUEST, side_effect=requests.ConnectionError("refused")):
            with pytest.raises(CampaignApiUnavailable):
                api.list()

    def test_other_request_errors(self):
        api = CampaignApiClient("http://dash.test/api")
        with patch(API_REQUEST, side_effect=requests.TooManyRedirects("loop")):
            with pytest.raises(CampaignApiError):
                api.list()

    def test_error_status_carries_message(self):
        api = CampaignApiClient("http://dash.test/api")
        with patch(API_REQUEST, return_value=make_http_response(422, {"message": "budget inválido"})):
            with pytest.raises(CampaignApiRejected) as exc_info:
                api.create({})
        assert exc_info.value.status_code == 422
        assert exc_info.value.message == "budget inválido"

    def test_error_status_without_body(self):
        api = CampaignApiClient("http://dash.test/api")
        with patch(API_REQUEST, return_value=make_http_response(502, None)):
            with pytest.raises(CampaignApiRejected) as exc_info:
                api.create({})
        assert exc_info.value.message == "HTTP 502"


class TestGetCampaignApi:
    def test_created_once_from_config(self, app):
        with app.app_context():
            app.extensions.pop("mcp_agent.campaign_api", None)
            first = get_campaign_api()
            assert get_campaign_api() is first
        assert first.base_url == app.config["CAMPAIGNS_API_URL"].rstrip("/")
