"""Read-SMS permission: providers that answer the request, and the gate
that collapses their answer into granted / not granted."""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from ..config import Settings
from ..exceptions import PermissionRequestError
from .adb import AdbClient


logger = logging.getLogger(__name__)


READ_SMS = "android.permission.READ_SMS"


class PermissionResult(str, Enum):
    GRANTED = "granted"
    DENIED = "denied"
    NEVER_ASK_AGAIN = "never_ask_again"


@dataclass(frozen=True)
class PermissionRationale:
    title: str = "SMS Permission"
    message: str = "This app needs access to your SMS messages to display expenses"
    button_neutral: str = "Ask Me Later"
    button_negative: str = "Cancel"
    button_positive: str = "OK"


class PermissionProvider(ABC):
    @abstractmethod
    async def request(self, permission: str, rationale: PermissionRationale) -> PermissionResult:
        raise NotImplementedError


class StaticPermissionProvider(PermissionProvider):
    """Answers every request with a configured result."""

    def __init__(self, result: PermissionResult):
        self.result = result

    async def request(self, permission: str, rationale: PermissionRationale) -> PermissionResult:
        logger.info("[Permission] %s answered from settings: %s", permission, self.result.value)
        return self.result


class AdbPermissionProvider(PermissionProvider):
    """Access to a device's messages over adb is gated by the USB debugging
    authorization dialog on the phone, so that is the dialog we ask about.

    ``adb get-state`` reports ``device`` once the user accepted it and
    fails with "unauthorized" while the prompt is pending or was refused.
    """

    def __init__(self, client: AdbClient):
        self.client = client

    async def request(self, permission: str, rationale: PermissionRationale) -> PermissionResult:
        logger.info("[Permission] %s: %s", rationale.title, rationale.message)
        try:
            result = await self.client.run("get-state")
        except OSError as exc:
            raise PermissionRequestError(f"Could not run adb: {exc}") from exc

        if result.returncode == 0 and result.stdout.strip() == "device":
            return PermissionResult.GRANTED
        if "unauthorized" in (result.stderr + result.stdout):
            return PermissionResult.DENIED
        raise PermissionRequestError(
            f"adb get-state failed ({result.returncode}): {result.stderr.strip()}"
        )


class PermissionGate:
    def __init__(
        self,
        provider: PermissionProvider,
        permission: str = READ_SMS,
        rationale: PermissionRationale = PermissionRationale(),
    ):
        self.provider = provider
        self.permission = permission
        self.rationale = rationale

    async def request_permission(self) -> bool:
        """Ask for the permission; True only on an explicit grant.

        A provider failure counts as a denial. It is logged, never raised.
        """

        try:
            result = await self.provider.request(self.permission, self.rationale)
        except Exception as exc:
            logger.warning("[Permission] Request for %s failed: %s", self.permission, exc)
            return False
        return result == PermissionResult.GRANTED


def build_permission_provider(settings: Settings) -> PermissionProvider:
    if settings.permission == "adb":
        return AdbPermissionProvider(AdbClient(settings.adb_path, settings.adb_serial))
    if settings.permission == "denied":
        return StaticPermissionProvider(PermissionResult.DENIED)
    return StaticPermissionProvider(PermissionResult.GRANTED)
