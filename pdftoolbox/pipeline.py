"""Shared behaviour of the document pipelines."""

import logging
from typing import Callable, Optional

from .results import ErrorReporter, LoggingErrorReporter, PipelineResult

LOGGER = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int], None]


class Pipeline:
    """
    Base class for one end-to-end tool operation.

    Subclasses set ``operation`` and ``stage`` and build their result inside
    ``_run``. Any exception raised there becomes a failed result; no partial
    artifact is ever returned.
    """

    operation = "pipeline"
    stage = "Processing..."

    def __init__(
        self,
        progress_callback: Optional[ProgressCallback] = None,
        error_reporter: Optional[ErrorReporter] = None,
    ):
        self.progress_callback = progress_callback
        self.error_reporter = error_reporter or LoggingErrorReporter()

    def _report_progress(self, stage: str, percentage: int):
        """Report progress if callback is set."""
        if self.progress_callback:
            self.progress_callback(stage, percentage)

    def _input_size(self) -> int:
        return 0

    def _run(self) -> PipelineResult:
        raise NotImplementedError

    def _execute(
        self,
        operation: str,
        stage: str,
        build: Callable[[], PipelineResult],
    ) -> PipelineResult:
        LOGGER.info("Starting %s", operation)
        self._report_progress(stage, 0)
        try:
            result = build()
        except Exception as e:
            self.error_reporter.report(operation, e)
            return PipelineResult(
                success=False,
                operation=operation,
                original_size=self._input_size(),
                error=str(e),
            )
        self._report_progress(stage, 100)
        LOGGER.info("Finished %s (%d pages)", operation, result.pages_processed)
        return result

    def run(self) -> PipelineResult:
        return self._execute(self.operation, self.stage, self._run)
