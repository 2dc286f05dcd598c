"""Periodic maintenance tasks for recorded content"""

import logging
import threading

logger = logging.getLogger(__name__)


def run_maintenance(recorded_manager, file_cleaner):
    """
    Run all maintenance tasks

    Args:
        recorded_manager: RecordedManager instance
        file_cleaner: RecordedFileCleaner instance

    Returns:
        Dict with maintenance results
    """
    results = {
        'history_deleted': 0,
        'video_file_cleanup': None,
        'drop_log_file_cleanup': None
    }

    logger.info("Starting recorded maintenance...")

    # 1. Drop recorded history past its retention period
    results['history_deleted'] = recorded_manager.history_cleanup()

    # 2. Reconcile video files with the recording roots
    try:
        results['video_file_cleanup'] = file_cleaner.video_file_cleanup().to_dict()
    except Exception as e:
        logger.error(f"Error in video file cleanup: {e}")

    # 3. Reconcile drop log files with the drop log directory
    try:
        results['drop_log_file_cleanup'] = file_cleaner.drop_log_file_cleanup().to_dict()
    except Exception as e:
        logger.error(f"Error in drop log file cleanup: {e}")

    logger.info(f"Recorded maintenance completed: {results}")
    return results


def schedule_maintenance(recorded_manager, file_cleaner, interval_hours: float = 24, run_on_startup: bool = True,
                         stop_event: threading.Event = None, startup_delay: float = 30):
    """
    Schedule periodic maintenance

    Args:
        recorded_manager: RecordedManager instance
        file_cleaner: RecordedFileCleaner instance
        interval_hours: How often to run maintenance (default: 24 hours)
        run_on_startup: Whether to run maintenance shortly after startup
        stop_event: Set to end the loop; a new one is created if omitted
        startup_delay: Seconds to wait before the startup run

    Returns:
        (thread, stop_event)
    """
    if stop_event is None:
        stop_event = threading.Event()

    def maintenance_loop():
        if run_on_startup:
            # Wait for the system to stabilize
            if stop_event.wait(startup_delay):
                return
            try:
                logger.info("Running startup maintenance...")
                run_maintenance(recorded_manager, file_cleaner)
            except Exception as e:
                logger.error(f"Error in startup maintenance: {e}")

        while not stop_event.wait(interval_hours * 3600):
            try:
                run_maintenance(recorded_manager, file_cleaner)
            except Exception as e:
                logger.error(f"Error in maintenance loop: {e}")

        logger.info("Recorded maintenance stopped")

    thread = threading.Thread(target=maintenance_loop, daemon=True, name="RecordedMaintenance")
    thread.start()
    logger.info(f"Recorded maintenance scheduled every {interval_hours} hours (startup run enabled: {run_on_startup})")
    return thread, stop_event
