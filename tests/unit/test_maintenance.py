"""Unit tests for maintenance tasks"""

import threading
import time
from unittest.mock import Mock, patch

import pytest

from pvr.core.maintenance import run_maintenance, schedule_maintenance
from pvr.core.report import OperationReport
from tests.conftest import add_history, create_recorded, create_test_file


@pytest.mark.unit
class TestRunMaintenance:
    """Test run_maintenance"""

    def test_run_maintenance(self, services, temp_dir):
        day_ms = 24 * 60 * 60 * 1000
        add_history(services, 'old', int(time.time() * 1000) - 60 * day_ms)
        create_recorded(services, video_files=[('recorded', 'gone.ts')], create_files=False)
        create_test_file(temp_dir / 'drop_log' / 'stray.log', 16)

        results = run_maintenance(services.recorded_manager, services.file_cleaner)

        assert results['history_deleted'] == 1
        assert results['video_file_cleanup']['counts']['deleted_rows'] == 1
        assert results['drop_log_file_cleanup']['counts']['deleted_files'] == 1

    def test_sweep_errors_do_not_stop_later_tasks(self):
        recorded_manager = Mock()
        recorded_manager.history_cleanup.return_value = 0
        file_cleaner = Mock()
        file_cleaner.video_file_cleanup.side_effect = RuntimeError("boom")
        file_cleaner.drop_log_file_cleanup.return_value = OperationReport('drop_log_file_cleanup')

        results = run_maintenance(recorded_manager, file_cleaner)

        assert results['video_file_cleanup'] is None
        assert results['drop_log_file_cleanup']['operation'] == 'drop_log_file_cleanup'


@pytest.mark.unit
class TestScheduleMaintenance:
    """Test schedule_maintenance"""

    @patch('pvr.core.maintenance.run_maintenance')
    def test_loop_runs_until_stopped(self, mock_run):
        stop_event = threading.Event()
        mock_run.side_effect = lambda *args: stop_event.set()

        thread, returned_event = schedule_maintenance(
            Mock(), Mock(), interval_hours=0, run_on_startup=False, stop_event=stop_event
        )
        thread.join(timeout=5)

        assert returned_event is stop_event
        assert thread.daemon is True
        assert thread.name == "RecordedMaintenance"
        assert not thread.is_alive()
        mock_run.assert_called_once()

    @patch('pvr.core.maintenance.run_maintenance')
    def test_startup_run(self, mock_run):
        stop_event = threading.Event()
        mock_run.side_effect = lambda *args: stop_event.set()

        thread, _ = schedule_maintenance(
            Mock(), Mock(), interval_hours=24, run_on_startup=True, stop_event=stop_event, startup_delay=0
        )
        thread.join(timeout=5)

        assert not thread.is_alive()
        mock_run.assert_called_once()

    @patch('pvr.core.maintenance.run_maintenance')
    def test_stop_before_startup_run(self, mock_run):
        stop_event = threading.Event()
        stop_event.set()

        thread, _ = schedule_maintenance(Mock(), Mock(), run_on_startup=True, stop_event=stop_event)
        thread.join(timeout=5)

        assert not thread.is_alive()
        mock_run.assert_not_called()

    @patch('pvr.core.maintenance.run_maintenance')
    def test_errors_do_not_end_the_loop(self, mock_run):
        stop_event = threading.Event()
        calls = []

        def fail_then_stop(*args):
            calls.append(args)
            if len(calls) == 1:
                raise RuntimeError("disk busy")
            stop_event.set()

        mock_run.side_effect = fail_then_stop

        thread, _ = schedule_maintenance(Mock(), Mock(), interval_hours=0, run_on_startup=False, stop_event=stop_event)
        thread.join(timeout=5)

        assert not thread.is_alive()
        assert len(calls) == 2
