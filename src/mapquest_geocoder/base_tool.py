"""
MapQuest Geocoder — File Tool Base Class
=========================================
Template-method base for tools that read an input file and write an
output file.  :meth:`GeoTool.run` fixes the pipeline
(validate → process → report); subclasses fill in
:meth:`~GeoTool.validate_inputs` and :meth:`~GeoTool.process`.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path

from mapquest_geocoder.log import configure_logging

logger = logging.getLogger("mapquest_geocoder.tool")


class GeoTool(ABC):
    """Abstract base for file-to-file geocoding tools.

    Attributes:
        input_path: Path to the input file.
        output_path: Path where output will be written.
        verbose: Log DEBUG-level messages in addition to INFO and above.
    """

    def __init__(
        self,
        input_path: Path,
        output_path: Path,
        *,
        verbose: bool = False,
    ) -> None:
        self.input_path: Path = Path(input_path)
        self.output_path: Path = Path(output_path)
        self.verbose: bool = verbose

        configure_logging(verbose)

    @abstractmethod
    def validate_inputs(self) -> None:
        """Check every precondition before any request is sent.

        Raises:
            ValidationError: If an input file, column, or size limit is
                not satisfied.
        """

    @abstractmethod
    def process(self) -> None:
        """Do the work.  Called by :meth:`run` once inputs are valid."""

    def run(self) -> None:
        """Validate, process, and log the elapsed time.

        Exceptions from either step propagate unchanged.
        """
        logger.info("Starting %s", self.__class__.__name__)
        start = time.perf_counter()

        self.validate_inputs()
        self.process()

        elapsed = time.perf_counter() - start
        logger.info(
            "%s completed in %.2fs → %s",
            self.__class__.__name__,
            elapsed,
            self.output_path,
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"input_path={self.input_path!r}, "
            f"output_path={self.output_path!r})"
        )
