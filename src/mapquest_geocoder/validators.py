"""
MapQuest Geocoder — Input Validators
=====================================
Static precondition checks shared by the client and the batch tool.

All methods raise an exception from :mod:`mapquest_geocoder.exceptions`
rather than returning booleans, so ``validate_inputs`` implementations
read as a flat list of assertions::

    class MyTool(GeoTool):
        def validate_inputs(self) -> None:
            Validators.assert_file_exists(self.input_path)
            Validators.assert_supported_extension(self.input_path, [".csv"])
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from mapquest_geocoder.exceptions import (
    ColumnNotFoundError,
    OutputWriteError,
    TooManyLocationsError,
    ValidationError,
)


class Validators:
    """Namespace of static precondition checks.  Never instantiated."""

    # ------------------------------------------------------------------
    # File-system checks
    # ------------------------------------------------------------------

    @staticmethod
    def assert_file_exists(path: Path) -> None:
        """Assert that *path* points to an existing regular file.

        Raises:
            ValidationError: If *path* does not exist or is a directory.
        """
        path = Path(path)
        if not path.exists():
            raise ValidationError(
                f"Input file not found: '{path}'. "
                "Check that the path is correct and the file exists."
            )
        if path.is_dir():
            raise ValidationError(
                f"Expected a file but got a directory: '{path}'."
            )

    @staticmethod
    def assert_output_dir_writable(output_path: Path) -> None:
        """Create the parent directory of *output_path* if it is missing.

        Raises:
            OutputWriteError: If the directory cannot be created.
        """
        parent = Path(output_path).parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OutputWriteError(str(output_path), str(exc)) from exc

    @staticmethod
    def assert_supported_extension(path: Path, extensions: Sequence[str]) -> None:
        """Assert that *path* has one of the allowed file extensions.

        Args:
            path: File path to check.
            extensions: Allowed extensions, each starting with a dot.

        Raises:
            ValidationError: If the extension is not in *extensions*.
        """
        path = Path(path)
        suffix = path.suffix.lower()
        allowed = [ext.lower() for ext in extensions]
        if suffix not in allowed:
            raise ValidationError(
                f"Unsupported file extension '{suffix}' for '{path.name}'. "
                f"Accepted extensions: {', '.join(allowed)}"
            )

    # ------------------------------------------------------------------
    # Tabular data checks
    # ------------------------------------------------------------------

    @staticmethod
    def assert_columns_exist(
        df: object,  # pandas DataFrame
        required_columns: Sequence[str],
    ) -> None:
        """Assert that all *required_columns* are present in *df*.

        Raises:
            ColumnNotFoundError: On the first missing column found.
        """
        available = list(df.columns)  # type: ignore[attr-defined]
        for col in required_columns:
            if col not in available:
                raise ColumnNotFoundError(col, available)

    # ------------------------------------------------------------------
    # Request checks
    # ------------------------------------------------------------------

    @staticmethod
    def assert_batch_size(count: int, limit: int) -> None:
        """Assert that a batch of *count* locations fits in one request.

        Raises:
            TooManyLocationsError: If *count* exceeds *limit*.

        Example::

            Validators.assert_batch_size(len(addresses), 100)
        """
        if count > limit:
            raise TooManyLocationsError(count=count, limit=limit)
