"""HTTP client for the dashboard's campaign CRUD API.

Endpoints used:
    POST {base}/campaigns             create, body {name, daily_budget, status}
    PUT  {base}/campaigns?id=<id>     partial update
    GET  {base}/campaigns?fields=...  list
"""

import logging

import requests
from flask import current_app

logger = logging.getLogger(__name__)

_EXTENSION_KEY = "mcp_agent.campaign_api"


class CampaignApiError(Exception):
    """Base error for campaign API calls."""


class CampaignApiNotConfigured(CampaignApiError):
    """No base URL is configured."""


class CampaignApiUnavailable(CampaignApiError):
    """The API could not be reached (connection refused, timeout)."""


class CampaignApiRejected(CampaignApiError):
    """The API answered with an error status."""

    def __init__(self, status_code, message):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _error_message(resp):
    """Pull a readable message out of an error response body."""
    try:
        body = resp.json()
    except ValueError:
        return (resp.text or "").strip()[:200] or "HTTP {}".format(resp.status_code)
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or "HTTP {}".format(resp.status_code))
    return "HTTP {}".format(resp.status_code)


class CampaignApiClient:
    """Thin wrapper over the campaign CRUD endpoints."""

    def __init__(self, base_url, timeout=10):
        self.base_url = (base_url or "").rstrip("/")
        self.timeout = timeout

    def _request(self, method, params=None, json_body=None):
        if not self.base_url:
            raise CampaignApiNotConfigured("CAMPAIGNS_API_URL is not configured")

        url = "{}/campaigns".format(self.base_url)
        try:
            resp = requests.request(method, url, params=params, json=json_body, timeout=self.timeout)
        except (requests.ConnectionError, requests.Timeout) as exc:
            raise CampaignApiUnavailable(str(exc)) from exc
        except requests.RequestException as exc:
            raise CampaignApiError(str(exc)) from exc

        if resp.status_code >= 400:
            raise CampaignApiRejected(resp.status_code, _error_message(resp))
        return resp

    def create(self, fields):
        """Create a campaign. Returns (status_code, record dict)."""
        resp = self._request("POST", json_body=fields)
        return resp.status_code, _json_or_empty(resp)

    def update(self, campaign_id, fields):
        """Apply a partial update. Returns (status_code, record dict)."""
        resp = self._request("PUT", params={"id": campaign_id}, json_body=fields)
        return resp.status_code, _json_or_empty(resp)

    def list(self, fields=None):
        """List campaigns, optionally restricted to ``fields``. Returns a list of dicts."""
        params = {"fields": ",".join(fields)} if fields else None
        resp = self._request("GET", params=params)
        data = _json_or_empty(resp)
        if isinstance(data, dict):
            # Some deployments wrap the list
            data = data.get("campaigns", [])
        return [c for c in data if isinstance(c, dict)] if isinstance(data, list) else []


def _json_or_empty(resp):
    try:
        return resp.json()
    except ValueError:
        return {}


def get_campaign_api():
    """Return the app's campaign API client, creating it on first use."""
    app = current_app._get_current_object()
    client = app.extensions.get(_EXTENSION_KEY)
    if client is None:
        base_url = app.config.get("CAMPAIGNS_API_URL", "")
        if not base_url:
            logger.warning("CAMPAIGNS_API_URL is not set; campaign tools will report a config error")
        client = CampaignApiClient(base_url, timeout=app.config.get("CAMPAIGNS_API_TIMEOUT", 10))
        app.extensions[_EXTENSION_KEY] = client
    return client
