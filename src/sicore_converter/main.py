"""
Main entry point for the SICORE converter.

This module orchestrates the full conversion pipeline (read the
workbook, encode the rows, write the text file) and provides a
programmatic API for it.
"""

import time
from contextlib import nullcontext
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Union

from .config import Config, create_default_config
from .converter import convert_rows
from .exceptions import SicoreError
from .logging_config import get_logger, quiet_logging
from .models import ConversionResult
from .reader import read_workbook
from .warnings_log import WarningsLog
from .writer import write_output

logger = get_logger("pipeline")

# Type alias for progress callbacks: (percentage, message)
OnProgressCallback = Callable[[int, str], None]


@dataclass
class PipelineResult:
    """Result of running the full conversion pipeline."""
    success: bool
    conversion: Optional[ConversionResult] = None
    output_file: Optional[Path] = None
    rows_read: int = 0
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    processing_time: float = 0.0

    @property
    def text(self) -> str:
        """Converted text, empty when the run failed."""
        return self.conversion.text if self.conversion else ""


class ConversionPipeline:
    """
    Orchestrates the spreadsheet to SICORE conversion.

    Usage:
        pipeline = ConversionPipeline(config)
        result = pipeline.run()
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize the pipeline.

        Args:
            config: Configuration object (uses defaults if not provided)
        """
        self.config = config or create_default_config()
        self.warnings_log = WarningsLog()

    def run(self, on_progress: Optional[OnProgressCallback] = None) -> PipelineResult:
        """
        Run the full conversion pipeline.

        Args:
            on_progress: Callback receiving (percentage, message) updates

        Returns:
            PipelineResult with all details
        """
        start_time = time.time()
        result = PipelineResult(success=True)

        def progress(percentage: int, message: str) -> None:
            logger.debug("[%3d%%] %s", percentage, message)
            if on_progress:
                on_progress(percentage, message)

        config_errors = self.config.validate()
        if config_errors:
            result.success = False
            result.errors.extend(config_errors)
            return result

        log_context = quiet_logging() if self.config.quiet else nullcontext()

        try:
            with log_context:
                progress(0, "Reading Excel file...")
                dataset = read_workbook(self.config.input_file, self.config.sheet_name)
                result.rows_read = len(dataset)

                progress(30, "Processing data...")
                self.warnings_log.clear()
                conversion = convert_rows(
                    dataset,
                    mapping=self.config.column_mapping(),
                    start_number=self.config.start_number,
                    warnings_log=self.warnings_log,
                )
                result.conversion = conversion
                result.warnings.extend(conversion.warnings)
                if self.config.warnings_file:
                    self.warnings_log.save(self.config.warnings_file)

                progress(80, "Generating TXT file...")
                if not self.config.dry_run:
                    result.output_file = write_output(
                        conversion.text,
                        self.config.resolved_output_file(),
                        encoding=self.config.encoding,
                        overwrite=self.config.overwrite,
                    )

                progress(100, "Done")
        except SicoreError as e:
            result.success = False
            result.errors.append(str(e))

        result.processing_time = time.time() - start_time
        return result


def convert_file(
    input_file: Union[str, Path],
    output_file: Optional[Union[str, Path]] = None,
    **kwargs,
) -> PipelineResult:
    """
    Convenience function to convert one workbook.

    Args:
        input_file: Excel workbook to convert
        output_file: Destination text file (default: sicore_retenciones.txt)
        **kwargs: Additional configuration options

    Returns:
        PipelineResult with details
    """
    config = Config(input_file=Path(input_file), **kwargs)
    if output_file is not None:
        config.output_file = Path(output_file)
    pipeline = ConversionPipeline(config)
    return pipeline.run()
