"""CUPS printer directory driven through ``lpstat`` and ``lp``."""

from __future__ import annotations

from collections.abc import Callable, Sequence
import logging
import shutil
import subprocess
import tempfile

from reportrunner.core.encoders import StreamEncoder
from reportrunner.core.exceptions import EncoderError
from reportrunner.core.model import ReportModel
from reportrunner.core.printing import PrintService


logger = logging.getLogger(__name__)

CommandRunner = Callable[[Sequence[str]], "subprocess.CompletedProcess[str]"]

_DEFAULT_PREFIX = "system default destination:"


def _run(argv: Sequence[str]) -> subprocess.CompletedProcess[str]:
    try:
        return subprocess.run(list(argv), check=False, capture_output=True, text=True)
    except FileNotFoundError as exc:
        raise EncoderError(f"'{argv[0]}' could not be located.") from exc
    except OSError as exc:
        raise EncoderError(f"Failed to invoke '{argv[0]}': {exc}") from exc


class LpPrinterDirectory:
    """Enumerate CUPS destinations and submit rendered reports with ``lp``."""

    def __init__(
        self,
        *,
        encoder: StreamEncoder | None = None,
        runner: CommandRunner | None = None,
    ) -> None:
        self.encoder = encoder
        self.runner = runner or _run

    @staticmethod
    def is_available() -> bool:
        return shutil.which("lp") is not None and shutil.which("lpstat") is not None

    def services(self) -> Sequence[PrintService]:
        result = self.runner(["lpstat", "-e"])
        if result.returncode != 0:
            logger.debug("lpstat -e failed: %s", result.stderr.strip())
            return []
        names = [line.strip() for line in result.stdout.splitlines() if line.strip()]
        return [PrintService(name) for name in names]

    def default_service(self) -> PrintService | None:
        result = self.runner(["lpstat", "-d"])
        if result.returncode != 0:
            return None
        for line in result.stdout.splitlines():
            if line.startswith(_DEFAULT_PREFIX):
                name = line[len(_DEFAULT_PREFIX) :].strip()
                return PrintService(name) if name else None
        return None

    def print_directly(
        self, report: ReportModel, service: PrintService | None, yield_rate: int = 0
    ) -> int | None:
        if self.encoder is None:
            raise EncoderError("No printable encoder is configured for direct printing.")

        with tempfile.NamedTemporaryFile(suffix=".print") as handle:
            if not self.encoder.generate(report, handle, yield_rate):
                raise EncoderError(f"Unable to render report '{report.name}' for printing.")
            handle.flush()
            argv = ["lp"]
            if service is not None:
                argv.extend(["-d", service.name])
            argv.extend(["-t", report.name, handle.name])
            result = self.runner(argv)

        if result.returncode != 0:
            detail = result.stderr.strip() or f"exit code {result.returncode}"
            raise EncoderError(f"Printing failed: {detail}")
        logger.info("Submitted report '%s': %s", report.name, result.stdout.strip())
        return None


__all__ = ["CommandRunner", "LpPrinterDirectory"]
