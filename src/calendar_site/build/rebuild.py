"""Static site rebuild.

Runs the site's build command (by default `npm run build`) in the site
project directory. The command runs through bash by default, so that
version managers sourced there (e.g. nvm) are available:

```
BUILD_COMMAND='. "$HOME/.nvm/nvm.sh" && nvm use 20 && npm run build'
```

A build is a blocking call. Failures are reported through `BuildResult`
together with the captured output; they are never raised.
"""

from __future__ import annotations

import logging
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path

from calendar_site.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Outcome of a site build."""

    success: bool
    returncode: int | None = None
    stdout: str = ""
    stderr: str = ""
    duration_seconds: float = 0.0
    error: str | None = None  # Set when the command could not run to completion


class SiteBuilder:
    """Rebuild capability for the static site.

    Example:
        ```python
        builder = SiteBuilder.from_settings(get_settings())
        result = builder.run()
        if not result.success:
            print(result.stderr)
        ```
    """

    def __init__(
        self,
        command: str,
        cwd: Path | str = ".",
        shell: str | None = "/bin/bash",
        timeout: float | None = None,
    ):
        """Initialize the builder.

        Args:
            command: Shell command that builds the site
            cwd: Site project directory
            shell: Shell executable, None for the system default
            timeout: Seconds before the build is killed, None for no limit
        """
        self.command = command
        self.cwd = Path(cwd)
        self.shell = shell
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> SiteBuilder:
        return cls(
            command=settings.build_command,
            cwd=settings.project_dir,
            shell=settings.build_shell,
            timeout=settings.build_timeout_seconds,
        )

    def run(self) -> BuildResult:
        """Run the build and wait for it to finish."""
        logger.info(f"Starting build: {self.command} (in {self.cwd})")
        started = time.monotonic()

        try:
            completed = subprocess.run(
                self.command,
                shell=True,
                executable=self.shell,
                cwd=self.cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            result = BuildResult(
                success=False,
                stdout=_as_text(e.stdout),
                stderr=_as_text(e.stderr),
                duration_seconds=time.monotonic() - started,
                error=f"Build timed out after {self.timeout} seconds",
            )
            logger.error(f"Build failed: {result.error}")
            return result
        except OSError as e:
            result = BuildResult(
                success=False,
                duration_seconds=time.monotonic() - started,
                error=f"Could not start build: {e}",
            )
            logger.error(f"Build failed: {result.error}")
            return result

        result = BuildResult(
            success=completed.returncode == 0,
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
            duration_seconds=time.monotonic() - started,
        )

        if result.success:
            logger.info(
                f"Build completed successfully in {result.duration_seconds:.1f}s"
            )
        else:
            logger.error(f"Build failed with exit code {result.returncode}")
            if result.stderr:
                logger.error(f"stderr: {result.stderr.strip()}")

        return result


def _as_text(output: str | bytes | None) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode(errors="replace")
    return output
