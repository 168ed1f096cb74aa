import json

import httpx
import pytest

from app.core.config import settings
from app.domain.interfaces.sms_gateway import SmsResult
from app.notifications.factory import get_sms_provider
from app.notifications.fast2sms import Fast2SMSProvider, format_indian_number
from app.notifications.simulated import SimulatedSmsProvider
from app.services.notification_service import NotificationDispatcher


@pytest.mark.parametrize("raw,expected", [
    ("+91 98765 43210", "9876543210"),
    ("919876543210", "9876543210"),
    ("98765-43210", "9876543210"),
    ("+1234567890", "1234567890"),
    ("12345", "12345"),
])
def test_format_indian_number(raw, expected):
    assert format_indian_number(raw) == expected


async def test_fast2sms_success():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"return": True, "request_id": "req-42"})

    provider = Fast2SMSProvider(api_key="k-1", url="https://sms.test/bulk", transport=httpx.MockTransport(handler))
    result = await provider.send("+91 98765 43210", "hello")

    assert result == SmsResult(success=True, id="req-42")
    assert seen["auth"] == "k-1"
    assert seen["body"] == {"route": "q", "message": "hello", "language": "english", "numbers": "9876543210"}


async def test_fast2sms_provider_error():
    def handler(request):
        return httpx.Response(401, json={"return": False, "message": ["Invalid Authentication"]})

    provider = Fast2SMSProvider(api_key="bad", url="https://sms.test/bulk", transport=httpx.MockTransport(handler))
    result = await provider.send("9876543210", "hello")
    assert not result.success
    assert result.error == "Invalid Authentication"


async def test_fast2sms_rejects_bad_number_without_calling_api():
    def handler(request):
        raise AssertionError("API must not be called")

    provider = Fast2SMSProvider(api_key="k", url="https://sms.test/bulk", transport=httpx.MockTransport(handler))
    result = await provider.send("123", "hello")
    assert not result.success
    assert "10 digits" in result.error


async def test_simulated_provider_succeeds():
    result = await SimulatedSmsProvider().send("+1234567890", "hello")
    assert result.success
    assert len(result.id) == 16


def test_factory_selection(monkeypatch):
    monkeypatch.setattr(settings, "fast2sms_api_key", "")
    assert isinstance(get_sms_provider("auto"), SimulatedSmsProvider)
    monkeypatch.setattr(settings, "fast2sms_api_key", "key")
    assert isinstance(get_sms_provider("auto"), Fast2SMSProvider)
    assert isinstance(get_sms_provider("simulated"), SimulatedSmsProvider)
    with pytest.raises(ValueError):
        get_sms_provider("carrier-pigeon")


async def test_dispatcher_swallows_gateway_exceptions():
    class Exploding:
        async def send(self, phone_number, message):
            raise httpx.ConnectError("no route to host")

    result = await NotificationDispatcher(Exploding()).dispatch("+1234567890", "hello")
    assert not result.success
    assert "no route to host" in result.error


async def test_dispatcher_passes_through_results(sms):
    dispatcher = NotificationDispatcher(sms)
    ok = await dispatcher.dispatch("+1", "a")
    sms.fail = True
    failed = await dispatcher.dispatch("+1", "b")
    assert ok.success and not failed.success
    assert sms.to("+1") == ["a", "b"]


async def test_fast2sms_transport_error_is_attempted_once():
    attempts = []

    def handler(request):
        attempts.append(request)
        raise httpx.ConnectError("connection reset")

    provider = Fast2SMSProvider(api_key="k", url="https://sms.test/bulk", transport=httpx.MockTransport(handler))
    result = await NotificationDispatcher(provider).dispatch("9876543210", "hello")

    assert not result.success
    assert "connection reset" in result.error
    assert len(attempts) == 1
