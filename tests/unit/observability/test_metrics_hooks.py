import logging

import pytest

from md_segmenter.observability import LoggingMetricsHook, NoOpMetricsHook, names


class TestNoOpMetricsHook:
    def test_accepts_all_calls(self) -> None:
        hook = NoOpMetricsHook()

        hook.record_latency(names.SEGMENTING_DURATION, 12.5)
        hook.increment(names.IMAGES_FAILED_TOTAL, 2, labels={"doc": "a"})


class TestLoggingMetricsHook:
    def test_latency_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        hook = LoggingMetricsHook()

        with caplog.at_level(logging.INFO, logger="md_segmenter.observability.base"):
            hook.record_latency(names.SEGMENTING_DURATION, 12.34)

        assert "metric segmenting_duration=12.3ms" in caplog.text

    def test_counter_with_labels(self, caplog: pytest.LogCaptureFixture) -> None:
        hook = LoggingMetricsHook()

        with caplog.at_level(logging.INFO, logger="md_segmenter.observability.base"):
            hook.increment(
                names.LLM_REQUESTS_TOTAL, labels={"provider": "ollama", "model": "m"}
            )

        assert "metric llm_requests_total+=1 model=m,provider=ollama" in caplog.text

    def test_zero_counter_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        hook = LoggingMetricsHook()

        with caplog.at_level(logging.INFO, logger="md_segmenter.observability.base"):
            hook.increment(names.IMAGES_FAILED_TOTAL, 0)

        assert caplog.text == ""

    def test_custom_logger_and_level(self, caplog: pytest.LogCaptureFixture) -> None:
        log = logging.getLogger("ingest.metrics")
        hook = LoggingMetricsHook(level=logging.DEBUG, log=log)

        with caplog.at_level(logging.DEBUG, logger="ingest.metrics"):
            hook.increment(names.SEGMENTING_PARENTS_CREATED, 3)

        (record,) = caplog.records
        assert record.name == "ingest.metrics"
        assert record.levelno == logging.DEBUG
