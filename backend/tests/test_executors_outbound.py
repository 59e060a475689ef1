"""Tests for executors that call external endpoints."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from aioffice.services.outbound.http_client import HttpCallResult, OutboundHttpClient
from aioffice.services.workflow.context import ExecutionContext
from aioffice.services.workflow.executors.http_request import (
    HttpRequestExecutor,
    parse_headers,
    render_body,
)
from aioffice.services.workflow.executors.social import (
    MISSING_WEBHOOK_ERROR,
    SocialPostExecutor,
)
from aioffice.services.workflow.executors.webhook import WebhookExecutor
from aioffice.services.workflow.graph import Node


def _client(result: HttpCallResult) -> MagicMock:
    client = MagicMock(spec=OutboundHttpClient)
    client.post_json = AsyncMock(return_value=result)
    client.request = AsyncMock(return_value=result)
    return client


OK = HttpCallResult(success=True, status=200, status_text="OK", data={"id": 1})
NOT_FOUND = HttpCallResult(success=False, status=404, status_text="Not Found", data="missing")
TIMEOUT = HttpCallResult(success=False, error="Request timeout after 30 seconds")


class TestWebhookExecutor:
    """Test webhook node execution."""

    @pytest.mark.asyncio
    async def test_missing_url_returns_failure(self):
        client = _client(OK)
        node = Node(id="hook", kind="webhook")

        outcome = await WebhookExecutor(client).execute(node, ExecutionContext())

        assert outcome.result["success"] is False
        assert outcome.result["error"] == "No URL configured"
        client.post_json.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_posts_run_envelope(self):
        client = _client(OK)
        node = Node(id="hook", kind="webhook", attributes={"url": "https://hooks.example.com/x"})
        context = ExecutionContext(run_id="run-1", workflow_id="wf-1", variables={"a": 1})
        context.record_result("task-1", {"success": True})

        outcome = await WebhookExecutor(client).execute(node, context)

        assert outcome.result == {"success": True, "status": 200, "data": {"id": 1}}
        client.post_json.assert_awaited_once_with(
            "https://hooks.example.com/x",
            {
                "workflowId": "wf-1",
                "runId": "run-1",
                "nodeId": "hook",
                "variables": {"a": 1},
                "results": {"task-1": {"success": True}},
            },
        )

    @pytest.mark.asyncio
    async def test_non_2xx_recorded_not_raised(self):
        node = Node(id="hook", kind="webhook", attributes={"url": "https://hooks.example.com/x"})

        outcome = await WebhookExecutor(_client(NOT_FOUND)).execute(node, ExecutionContext())

        assert outcome.result == {"success": False, "status": 404, "data": "missing"}

    @pytest.mark.asyncio
    async def test_transport_failure_recorded(self):
        node = Node(id="hook", kind="webhook", attributes={"url": "https://hooks.example.com/x"})

        outcome = await WebhookExecutor(_client(TIMEOUT)).execute(node, ExecutionContext())

        assert outcome.result == {"success": False, "error": "Request timeout after 30 seconds"}


class TestHttpRequestExecutor:
    """Test generic HTTP node execution."""

    @pytest.mark.asyncio
    async def test_get_stores_response_variable(self):
        client = _client(OK)
        node = Node(id="fetch-data.1", kind="http", attributes={"url": "https://api.example.com"})
        context = ExecutionContext()

        outcome = await HttpRequestExecutor(client).execute(node, context)

        assert outcome.result == {
            "success": True,
            "status": 200,
            "statusText": "OK",
            "data": {"id": 1},
            "outputVar": "http_fetch_data_1",
        }
        assert context.variables["http_fetch_data_1"] == {"id": 1}
        client.request.assert_awaited_once_with(
            "GET", "https://api.example.com", content=None, headers={}
        )

    @pytest.mark.asyncio
    async def test_post_renders_json_body(self):
        client = _client(OK)
        node = Node(
            id="post",
            kind="http",
            attributes={
                "url": "https://api.example.com",
                "method": "post",
                "headers": '{"X-Token": "abc"}',
                "body": '{"name": "{{name}}"}',
            },
        )
        context = ExecutionContext(variables={"name": 'Ac"me'})

        await HttpRequestExecutor(client).execute(node, context)

        client.request.assert_awaited_once_with(
            "POST",
            "https://api.example.com",
            content='{"name": "Ac\\"me"}',
            headers={"X-Token": "abc"},
        )

    @pytest.mark.asyncio
    async def test_get_ignores_body(self):
        client = _client(OK)
        node = Node(
            id="get",
            kind="http",
            attributes={"url": "https://api.example.com", "body": "ignored"},
        )

        await HttpRequestExecutor(client).execute(node, ExecutionContext())

        assert client.request.await_args.kwargs["content"] is None

    @pytest.mark.asyncio
    async def test_no_response_returns_failure(self):
        node = Node(id="get", kind="http", attributes={"url": "https://api.example.com"})
        context = ExecutionContext()

        outcome = await HttpRequestExecutor(_client(TIMEOUT)).execute(node, context)

        assert outcome.result == {"success": False, "error": "Request timeout after 30 seconds"}
        assert "http_get" not in context.variables

    @pytest.mark.asyncio
    async def test_missing_url(self):
        outcome = await HttpRequestExecutor(_client(OK)).execute(
            Node(id="get", kind="http"), ExecutionContext()
        )

        assert outcome.result["error"] == "No URL configured"

    def test_parse_headers_ignores_invalid_json(self):
        assert parse_headers("{not json") == {}
        assert parse_headers({"A": 1}) == {"A": "1"}
        assert parse_headers('["a"]') == {}

    def test_render_plain_body_unescaped(self):
        assert render_body("Hello {{name}}", {"name": "<b>"}) == "Hello <b>"


class TestSocialPostExecutor:
    """Test social media node execution."""

    @pytest.mark.asyncio
    async def test_missing_webhook(self):
        client = _client(OK)

        outcome = await SocialPostExecutor(client).execute(
            Node(id="tw", kind="twitter", attributes={"content": "hi"}), ExecutionContext()
        )

        assert outcome.result == {"success": False, "error": MISSING_WEBHOOK_ERROR}
        client.post_json.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_posts_rendered_content(self):
        client = _client(OK)
        node = Node(
            id="li-1",
            kind="linkedin",
            attributes={
                "webhookUrl": "https://automation.example.com/post",
                "content": "Launching {{product}}",
                "hashtags": "#launch",
                "label": "Announce",
            },
        )
        context = ExecutionContext(run_id="run-1", variables={"product": "Atlas"})

        outcome = await SocialPostExecutor(client).execute(node, context)

        payload = client.post_json.await_args.args[1]
        assert payload["platform"] == "linkedin"
        assert payload["fullContent"] == "Launching Atlas\n\n#launch"
        assert payload["isScheduled"] is False
        assert payload["nodeLabel"] == "Announce"

        assert outcome.result["success"] is True
        assert outcome.result["characterLimit"] == 3000
        assert outcome.result["contentLength"] == len("Launching Atlas\n\n#launch")
        assert outcome.result["outputVar"] == "social_linkedin_li_1"
        assert context.variables["social_linkedin_li_1"] == {"id": 1}

    @pytest.mark.asyncio
    async def test_over_limit_still_posts(self):
        client = _client(OK)
        node = Node(
            id="tw",
            kind="twitter",
            attributes={"webhookUrl": "https://automation.example.com", "content": "x" * 300},
        )

        outcome = await SocialPostExecutor(client).execute(node, ExecutionContext())

        assert outcome.result["success"] is True
        assert outcome.result["contentLength"] == 300
        assert outcome.result["characterLimit"] == 280

    @pytest.mark.asyncio
    async def test_failure_includes_platform(self):
        node = Node(
            id="fb",
            kind="facebook",
            attributes={"webhookUrl": "https://automation.example.com", "content": "x"},
        )

        outcome = await SocialPostExecutor(_client(TIMEOUT)).execute(node, ExecutionContext())

        assert outcome.result == {
            "success": False,
            "platform": "facebook",
            "error": "Request timeout after 30 seconds",
        }
