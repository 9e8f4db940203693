"""Thin async wrapper around the ``adb`` executable."""
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional


logger = logging.getLogger(__name__)


@dataclass
class AdbResult:
    returncode: int
    stdout: str
    stderr: str


class AdbClient:
    def __init__(self, adb_path: str = "adb", serial: Optional[str] = None):
        self.adb_path = adb_path
        self.serial = serial

    def command(self, *args: str) -> list[str]:
        cmd = [self.adb_path]
        if self.serial:
            cmd += ["-s", self.serial]
        return cmd + list(args)

    async def run(self, *args: str) -> AdbResult:
        """Run one adb command and collect its output.

        Raises:
            OSError: if the adb executable cannot be started
        """

        cmd = self.command(*args)
        logger.debug("[adb] %s", " ".join(cmd))
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()
        return AdbResult(
            returncode=process.returncode,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )
