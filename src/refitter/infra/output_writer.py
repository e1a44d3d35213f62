"""Persist a generated artifact to disk.

The payload is written to a temporary sibling file and moved over the
destination with :func:`os.replace`, so the target is either the complete
new file or left exactly as it was.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

from refitter.core.models import GeneratedArtifact
from refitter.core.result import Err, Ok, Result
from refitter.exceptions import WriteError

logger = logging.getLogger(__name__)


class OutputWriter:
    """Writes :class:`GeneratedArtifact` payloads as UTF-8 text."""

    encoding: str = "utf-8"

    def write(self, artifact: GeneratedArtifact, destination: str | os.PathLike[str]) -> Result[int, WriteError]:
        """Write *artifact* to *destination*, overwriting any existing file.

        Returns
        -------
        Ok[int]
            Number of bytes written.
        Err[WriteError]
            When the directory is missing or the file cannot be written.
        """
        target = Path(destination)
        payload = artifact.code.encode(self.encoding)
        directory = target.parent if str(target.parent) else Path(".")

        tmp_name: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                dir=directory,
                prefix=f".{target.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                handle.write(payload)
            # mkstemp files are 0600; keep the mode of the file being replaced.
            if target.exists():
                shutil.copymode(target, tmp_name)
            else:
                os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, target)
        except OSError as exc:
            if tmp_name is not None:
                _discard(tmp_name)
            error = WriteError(
                f"Could not write output file {target.resolve()}: {exc.strerror or exc}",
                hint="Check that the directory exists and is writable.",
            )
            error.__cause__ = exc
            return Err(error)

        logger.debug("Wrote %d bytes to %s", len(payload), target)
        return Ok(len(payload))


def _discard(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    except OSError:
        logger.debug("Could not remove temporary file %s", path, exc_info=True)
