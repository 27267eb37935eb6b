"""Tests for main application entrypoint."""

from unittest.mock import AsyncMock, Mock, patch

import pytest

from src.core.units import TimeUnit
from src.main import main, make_report_fn
from src.ports.metrics import MetricSetDto

__all__ = []


def make_config() -> Mock:
    """Create a loaded-settings stand-in."""
    config = Mock()
    config.period_in_sec = 5
    config.api_key = "Th3Ap1K3y"
    config.host = "collector.example.com"
    config.port = 8000
    config.prefix = "app"
    config.rate_unit = TimeUnit.SECONDS
    config.duration_unit = TimeUnit.MILLISECONDS
    return config


@pytest.mark.asyncio
async def test_make_report_fn_reports_and_records_cycle() -> None:
    """One cycle should report the collected set and record its duration."""
    reporter = Mock()
    reporter.report = AsyncMock()
    metrics = Mock()
    metric_set = MetricSetDto(gauges={"g": 1})
    metrics.collect.return_value = metric_set

    await make_report_fn(reporter, metrics)()

    reporter.report.assert_awaited_once_with(metric_set)
    metrics.record_cycle.assert_called_once()
    assert metrics.record_cycle.call_args.args[0] >= 0


@pytest.mark.asyncio
async def test_main_starts_and_runs_successfully() -> None:
    """Main should build the reporter, run the loop and stop the reporter."""
    with (
        patch("src.main.configure_logs"),
        patch("src.main.load_settings") as mock_load_settings,
        patch("src.main.InstrumentalClient") as mock_client_class,
        patch("src.main.InstrumentalReporter") as mock_reporter_class,
        patch("src.main.RuntimeMetrics"),
        patch("src.main.make_stop_on_sigterm"),
        patch("src.main.start_report_loop", new_callable=AsyncMock) as mock_loop,
    ):
        mock_load_settings.return_value = make_config()
        mock_reporter = mock_reporter_class.return_value
        mock_reporter.stop = AsyncMock()

        await main()

        mock_load_settings.assert_called_once()
        mock_client_class.assert_called_once_with("Th3Ap1K3y", "collector.example.com", 8000)
        mock_reporter_class.assert_called_once_with(
            mock_client_class.return_value,
            prefix="app",
            rate_unit=TimeUnit.SECONDS,
            duration_unit=TimeUnit.MILLISECONDS,
        )
        mock_loop.assert_awaited_once()
        mock_reporter.stop.assert_awaited_once()


@pytest.mark.asyncio
async def test_main_aborts_on_configuration_error() -> None:
    """Main should not start the loop when configuration is invalid."""
    with (
        patch("src.main.configure_logs"),
        patch("src.main.load_settings") as mock_load_settings,
        patch("src.main.start_report_loop", new_callable=AsyncMock) as mock_loop,
        patch("src.main.logger") as mock_logger,
    ):
        mock_load_settings.side_effect = RuntimeError("Missing required environment variable")

        await main()

        mock_loop.assert_not_called()
        mock_logger.error.assert_called()


@pytest.mark.asyncio
async def test_main_stops_reporter_on_loop_exception() -> None:
    """A crashing loop should be logged and the reporter still stopped."""
    with (
        patch("src.main.configure_logs"),
        patch("src.main.load_settings") as mock_load_settings,
        patch("src.main.InstrumentalClient"),
        patch("src.main.InstrumentalReporter") as mock_reporter_class,
        patch("src.main.RuntimeMetrics"),
        patch("src.main.make_stop_on_sigterm"),
        patch("src.main.start_report_loop", new_callable=AsyncMock) as mock_loop,
        patch("src.main.logger") as mock_logger,
    ):
        mock_load_settings.return_value = make_config()
        mock_reporter = mock_reporter_class.return_value
        mock_reporter.stop = AsyncMock()
        mock_loop.side_effect = RuntimeError("Test error in loop")

        try:
            await main()
        except RuntimeError:
            pytest.fail("main() should not raise; exceptions are caught internally")

        mock_logger.error.assert_called()
        mock_reporter.stop.assert_awaited_once()
