import asyncio

import pytest

from ..config import Settings
from ..exceptions import PermissionRequestError
from ..services.adb import AdbClient, AdbResult
from ..services.permissions import (
    AdbPermissionProvider,
    PermissionGate,
    PermissionRationale,
    PermissionResult,
    StaticPermissionProvider,
    build_permission_provider,
)


class FakeAdbClient(AdbClient):
    def __init__(self, result=None, error=None):
        super().__init__()
        self.result = result
        self.error = error

    async def run(self, *args):
        if self.error:
            raise self.error
        return self.result


def request(provider):
    return asyncio.run(provider.request("android.permission.READ_SMS", PermissionRationale()))


def test_gate_grants_only_on_granted():
    assert asyncio.run(PermissionGate(StaticPermissionProvider(PermissionResult.GRANTED)).request_permission())
    assert not asyncio.run(PermissionGate(StaticPermissionProvider(PermissionResult.DENIED)).request_permission())


def test_gate_swallows_provider_errors():
    provider = AdbPermissionProvider(FakeAdbClient(error=FileNotFoundError("adb")))

    assert asyncio.run(PermissionGate(provider).request_permission()) is False


def test_adb_authorized_device_is_granted():
    provider = AdbPermissionProvider(FakeAdbClient(AdbResult(0, "device\n", "")))
    assert request(provider) == PermissionResult.GRANTED


def test_adb_unauthorized_device_is_denied():
    provider = AdbPermissionProvider(FakeAdbClient(AdbResult(1, "", "error: device unauthorized.\n")))
    assert request(provider) == PermissionResult.DENIED


def test_adb_without_device_raises():
    provider = AdbPermissionProvider(FakeAdbClient(AdbResult(1, "", "error: no devices/emulators found\n")))
    with pytest.raises(PermissionRequestError):
        request(provider)


def test_rationale_text():
    rationale = PermissionRationale()
    assert rationale.title == "SMS Permission"
    assert rationale.message == "This app needs access to your SMS messages to display expenses"


def test_build_permission_provider():
    assert isinstance(build_permission_provider(Settings(permission="adb")), AdbPermissionProvider)
    assert build_permission_provider(Settings(permission="denied")).result == PermissionResult.DENIED
    assert build_permission_provider(Settings()).result == PermissionResult.GRANTED
