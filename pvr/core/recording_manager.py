"""Registry of reservations that are currently being recorded"""

import logging
from typing import Callable, Dict, Optional

from pvr.core.exceptions import ReserveNotFoundError

logger = logging.getLogger(__name__)

# Called with is_plan_to_delete when a recording is cancelled
StopCallback = Callable[[bool], None]


class RecordingManager:
    """Tracks active recordings by reserve id and cancels them on request"""

    def __init__(self):
        self.recordings: Dict[int, StopCallback] = {}

    def add_recording(self, reserve_id: int, stop: StopCallback) -> None:
        """Register an active recording"""
        if reserve_id in self.recordings:
            logger.warning(f"Recording for reserve {reserve_id} already exists")
            return

        self.recordings[reserve_id] = stop
        logger.info(f"Recording started: reserve {reserve_id}")

    def has_reserve(self, reserve_id: Optional[int]) -> bool:
        return reserve_id is not None and reserve_id in self.recordings

    def cancel(self, reserve_id: int, is_plan_to_delete: bool = False) -> None:
        """Stop an active recording

        Args:
            reserve_id: Reservation being recorded
            is_plan_to_delete: True when the recorded program is about to be deleted
        """
        stop = self.recordings.pop(reserve_id, None)
        if stop is None:
            raise ReserveNotFoundError(
                f"reserve {reserve_id} is not recording", operation="cancel", details={'reserve_id': reserve_id}
            )

        logger.info(f"Cancel recording: reserve {reserve_id} (plan to delete: {is_plan_to_delete})")
        stop(is_plan_to_delete)

    def stop_all(self) -> None:
        """Cancel every active recording"""
        for reserve_id in list(self.recordings):
            try:
                self.cancel(reserve_id)
            except Exception as e:
                logger.error(f"Failed to stop recording for reserve {reserve_id}: {e}")
