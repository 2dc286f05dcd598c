"""Lifecycle of recorded programs and their files

Deletion is best-effort: physical files go first, then store rows, and every
failure after the initial lookup is logged and collected instead of raised.
Anything left behind is picked up by the file cleaner on its next sweep.
"""

import os
import time
import logging
from typing import Optional

from pvr.core import file_util
from pvr.core.config import Config
from pvr.core.exceptions import (
    ParentDirectoryUnresolvedError,
    RecordedNotFoundError,
    RowNotFoundError,
    VideoFileNotFoundError,
)
from pvr.core.models import AddVideoFileOption, DropLogFile, Thumbnail, VideoFile
from pvr.core.recorded_db import (
    DropLogFileStore,
    RecordedHistoryStore,
    RecordedStore,
    ThumbnailStore,
    VideoFileStore,
)
from pvr.core.recorded_event import RecordedEvent
from pvr.core.recording_manager import RecordingManager
from pvr.core.report import OperationReport
from pvr.core.video_util import VideoUtil

logger = logging.getLogger(__name__)

DAY_MS = 24 * 60 * 60 * 1000


class RecordedManager:
    """Deletes, protects and attaches files to recorded programs"""

    def __init__(
        self,
        config: Config,
        recorded_store: RecordedStore,
        video_file_store: VideoFileStore,
        thumbnail_store: ThumbnailStore,
        drop_log_file_store: DropLogFileStore,
        recorded_history_store: RecordedHistoryStore,
        recording_manager: RecordingManager,
        recorded_event: RecordedEvent,
        video_util: VideoUtil
    ):
        self.config = config
        self.recorded_store = recorded_store
        self.video_file_store = video_file_store
        self.thumbnail_store = thumbnail_store
        self.drop_log_file_store = drop_log_file_store
        self.recorded_history_store = recorded_history_store
        self.recording_manager = recording_manager
        self.recorded_event = recorded_event
        self.video_util = video_util

    def delete(self, recorded_id: int) -> OperationReport:
        """
        Delete a recorded program, its files and its child rows

        Args:
            recorded_id: Recorded to delete

        Returns:
            OperationReport with the failures that were logged and skipped

        Raises:
            RecordedNotFoundError: recorded_id does not exist
        """
        logger.info(f"delete recorded: {recorded_id}")
        recorded = self.recorded_store.find_id(recorded_id)
        if recorded is None:
            logger.warning(f"recorded {recorded_id} is not found")
            raise RecordedNotFoundError(
                f"recorded {recorded_id} is not found", operation="delete", details={'recorded_id': recorded_id}
            )

        report = OperationReport('delete_recorded')

        # Stop the recording first if it is still running
        if recorded.is_recording and self.recording_manager.has_reserve(recorded.reserve_id):
            try:
                self.recording_manager.cancel(recorded.reserve_id, True)
            except Exception as e:
                logger.error(f"failed to cancel recording: reserve {recorded.reserve_id}: {e}")
                report.add_failure(f"reserve:{recorded.reserve_id}", e)

        for thumbnail in recorded.thumbnails:
            self._unlink(self.get_thumbnail_path(thumbnail), report)

        for video_file in recorded.video_files:
            try:
                file_path = self.video_util.get_full_file_path_from_id(video_file.id)
                if file_path is None:
                    raise VideoFileNotFoundError(f"cannot resolve path of video file {video_file.id}")
            except Exception as e:
                logger.error(f"get video file path error: {video_file.id} {video_file}: {e}")
                report.add_failure(f"video_file:{video_file.id}", e)
                continue

            self._unlink(file_path, report)

        if recorded.drop_log_file is not None:
            self._unlink(self.get_drop_log_file_path(recorded.drop_log_file), report)

        if recorded.thumbnails:
            try:
                report.increment('deleted_rows', self.thumbnail_store.delete_recorded_id(recorded_id))
            except Exception as e:
                logger.error(f"failed to delete thumbnail data: {recorded_id}: {e}")
                report.add_failure(f"thumbnail_rows:{recorded_id}", e)

        if recorded.video_files:
            try:
                report.increment('deleted_rows', self.video_file_store.delete_recorded_id(recorded_id))
            except Exception as e:
                logger.error(f"failed to delete video data: {recorded_id}: {e}")
                report.add_failure(f"video_file_rows:{recorded_id}", e)

        try:
            self.recorded_store.delete_once(recorded_id)
            report.increment('deleted_rows')
        except Exception as e:
            logger.error(f"failed to delete recorded data: {recorded_id}: {e}")
            report.add_failure(f"recorded:{recorded_id}", e)

        if recorded.drop_log_file is not None:
            try:
                self.drop_log_file_store.delete_once(recorded.drop_log_file.id)
                report.increment('deleted_rows')
            except Exception as e:
                logger.error(f"failed to delete drop log data: {recorded.drop_log_file.id}: {e}")
                report.add_failure(f"drop_log_file:{recorded.drop_log_file.id}", e)

        logger.info(f"successful delete recorded: {recorded_id}")

        self.recorded_event.emit_delete_recorded(recorded)

        return report

    def get_thumbnail_path(self, thumbnail: Thumbnail) -> str:
        return os.path.normpath(os.path.join(self.config.thumbnail, thumbnail.file_path))

    def get_drop_log_file_path(self, drop_log_file: DropLogFile) -> str:
        return os.path.normpath(os.path.join(self.config.drop_log, drop_log_file.file_path))

    def update_video_file_size(self, video_file_id: int) -> int:
        """
        Refresh the stored size of a video file from disk

        Returns:
            The new size in bytes

        Raises:
            VideoFileNotFoundError: the video file cannot be located
            OSError: the file cannot be read
        """
        logger.info(f"update video file size: {video_file_id}")

        file_path = self.video_util.get_full_file_path_from_id(video_file_id)
        if file_path is None:
            logger.error(f"video file is not found: {video_file_id}")
            raise VideoFileNotFoundError(
                f"video file {video_file_id} is not found",
                operation="update_video_file_size",
                details={'video_file_id': video_file_id}
            )

        file_size = file_util.get_file_size(file_path)

        try:
            self.video_file_store.update_size(video_file_id, file_size)
        except RowNotFoundError as e:
            raise VideoFileNotFoundError(
                str(e), operation="update_video_file_size", details={'video_file_id': video_file_id}
            ) from e

        self.recorded_event.emit_update_video_file_size(video_file_id)

        return file_size

    def add_video_file(self, option: AddVideoFileOption) -> int:
        """
        Register a video file that already exists on disk

        Returns:
            New video file id

        Raises:
            ParentDirectoryUnresolvedError: parent directory alias is not configured
            OSError: the file cannot be read
            sqlite3.Error: the row could not be inserted
        """
        logger.info(f"add video file: {option.recorded_id} {option.file_path}")

        parent_dir_path = self.video_util.get_parent_dir_path(option.parent_directory_name)
        if parent_dir_path is None:
            logger.error(f"parent directory is not found: {option.parent_directory_name}")
            raise ParentDirectoryUnresolvedError(
                f"parent directory {option.parent_directory_name} is not configured",
                operation="add_video_file",
                details={'parent_directory_name': option.parent_directory_name}
            )

        file_size = file_util.get_file_size(os.path.join(parent_dir_path, option.file_path))

        video_file = VideoFile(
            id=0,
            recorded_id=option.recorded_id,
            parent_directory_name=option.parent_directory_name,
            file_path=option.file_path,
            type=option.type,
            name=option.name,
            size=file_size
        )

        try:
            new_video_file_id = self.video_file_store.insert_once(video_file)
        except Exception as e:
            logger.error(f"failed to add video: {option.parent_directory_name}/{option.file_path}: {e}")
            raise

        self.recorded_event.emit_add_video_file(new_video_file_id)

        return new_video_file_id

    def delete_video_file(self, video_file_id: int) -> Optional[OperationReport]:
        """
        Delete one video file; deletes the owning recorded program when it was the last one

        Returns:
            The cascade's OperationReport when the owner was deleted, otherwise None

        Raises:
            VideoFileNotFoundError: video_file_id does not exist
        """
        logger.info(f"delete video file: {video_file_id}")

        video = self.video_file_store.find_id(video_file_id)
        if video is None:
            logger.info(f"video file is not found: {video_file_id}")
            raise VideoFileNotFoundError(
                f"video file {video_file_id} is not found",
                operation="delete_video_file",
                details={'video_file_id': video_file_id}
            )

        try:
            file_path = self.video_util.get_full_file_path_from_video_file(video)
        except Exception as e:
            logger.error(f"get video file path error: {video_file_id}: {e}")
            file_path = None

        if file_path is not None:
            self._unlink(file_path)

        try:
            self.video_file_store.delete_once(video_file_id)
        except RowNotFoundError:
            logger.warning(f"video file row already deleted: {video_file_id}")

        # The recorded program must not outlive its last video file
        recorded = self.recorded_store.find_id(video.recorded_id)
        if recorded is not None and len(recorded.video_files) == 0:
            logger.info(f"empty video files: {video.recorded_id}")
            try:
                return self.delete(video.recorded_id)
            except Exception as e:
                logger.error(f"failed to delete recorded {video.recorded_id} after last video file: {e}")
                return None

        self.recorded_event.emit_delete_video_file(video_file_id)
        return None

    def change_protect(self, recorded_id: int, is_protect: bool) -> None:
        """
        Set or clear the protect flag

        Raises:
            RecordedNotFoundError: recorded_id does not exist
        """
        logger.info(('set protect' if is_protect else 'remove protect') + f": {recorded_id}")

        try:
            self.recorded_store.change_protect(recorded_id, is_protect)
        except RowNotFoundError as e:
            raise RecordedNotFoundError(
                str(e), operation="change_protect", details={'recorded_id': recorded_id}
            ) from e

        self.recorded_event.emit_change_protect(recorded_id, is_protect)

    def history_cleanup(self) -> int:
        """Delete history rows older than the retention period; never raises"""
        cutoff = int(time.time() * 1000) - self.config.recorded_history_retention_days * DAY_MS
        try:
            deleted = self.recorded_history_store.delete(cutoff)
        except Exception as e:
            logger.error(f"failed to history cleanup: {e}")
            return 0

        if deleted > 0:
            logger.info(f"Deleted {deleted} recorded history entries")
        return deleted

    def _unlink(self, file_path: str, report: Optional[OperationReport] = None) -> bool:
        logger.info(f"delete: {file_path}")
        try:
            file_util.unlink(file_path)
        except OSError as e:
            logger.error(f"failed to delete {file_path}: {e}")
            if report is not None:
                report.add_failure(file_path, e)
            return False

        if report is not None:
            report.increment('deleted_files')
        return True
