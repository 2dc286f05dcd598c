"""Reconcile the recorded stores with the files actually on disk"""

import os
import logging
from typing import Dict

from pvr.core import file_util
from pvr.core.config import Config
from pvr.core.recorded_db import DropLogFileStore, RecordedStore, VideoFileStore
from pvr.core.recorded_manager import RecordedManager
from pvr.core.report import OperationReport
from pvr.core.video_util import VideoUtil

logger = logging.getLogger(__name__)


def _normalize_dir(dir_path: str) -> str:
    """Strip the trailing separator so listings and indexes compare equal"""
    stripped = dir_path.rstrip(os.sep)
    return stripped or os.sep


class RecordedFileCleaner:
    """
    Two independent sweeps that repair drift between store rows and files

    Both sweeps first build an index of files that are known to the store and
    still exist, dropping rows whose file is gone, then delete whatever the
    disk holds that the index does not know about. They never raise and are
    safe to run repeatedly or alongside individual deletes.
    """

    def __init__(
        self,
        config: Config,
        recorded_manager: RecordedManager,
        recorded_store: RecordedStore,
        video_file_store: VideoFileStore,
        drop_log_file_store: DropLogFileStore,
        video_util: VideoUtil
    ):
        self.config = config
        self.recorded_manager = recorded_manager
        self.recorded_store = recorded_store
        self.video_file_store = video_file_store
        self.drop_log_file_store = drop_log_file_store
        self.video_util = video_util

    def video_file_cleanup(self) -> OperationReport:
        """
        Delete video rows without files, files without rows, and empty untracked directories

        Returns:
            OperationReport with deleted_rows, deleted_files, deleted_directories
            and skipped_directories counts
        """
        logger.info("start video files cleanup")
        report = OperationReport('video_file_cleanup')

        try:
            video_files = self.video_file_store.find_all()
        except Exception as e:
            logger.error(f"failed to load video files: {e}")
            report.add_failure('video_file', e)
            return report

        file_index: Dict[str, bool] = {}
        dir_index: Dict[str, bool] = {}

        for video in video_files:
            video_file_path = self.video_util.get_full_file_path_from_video_file(video)
            if video_file_path is None:
                continue

            if file_util.exists(video_file_path):
                file_index[video_file_path] = True
                dir_index[_normalize_dir(os.path.dirname(video_file_path))] = True
            else:
                logger.warning(f"video file is not exist: {video_file_path}")
                try:
                    self.recorded_manager.delete_video_file(video.id)
                    report.increment('deleted_rows')
                except Exception as e:
                    logger.debug(f"failed to delete video file {video.id}: {e}")

        files = []
        directories = []
        for recorded_dir in self.config.recorded:
            root = recorded_dir['path']
            file_list = file_util.get_file_list(root)
            files.extend(file_list.files)
            directories.extend(file_list.directories)
            # Roots are never pruned even if empty
            dir_index[_normalize_dir(root)] = True

        # Deepest directories first so children are gone before their parents are checked
        directories.sort(key=len, reverse=True)

        for file_path in files:
            if file_path in file_index:
                continue

            logger.info(f"delete file: {file_path}")
            try:
                file_util.unlink(file_path)
                report.increment('deleted_files')
            except OSError as e:
                logger.error(f"failed to delete file: {file_path}: {e}")
                report.add_failure(file_path, e)

        for dir_path in directories:
            if _normalize_dir(dir_path) in dir_index:
                continue

            try:
                if file_util.is_empty_directory(dir_path):
                    logger.info(f"delete directory: {dir_path}")
                    file_util.rmdir(dir_path)
                    report.increment('deleted_directories')
                else:
                    logger.warning(f"directory is not empty: {dir_path}")
                    report.increment('skipped_directories')
            except OSError as e:
                logger.error(f"failed to delete directory: {dir_path}: {e}")
                report.add_failure(dir_path, e)

        logger.info(f"video files cleanup completed: {report.counts}")
        return report

    def drop_log_file_cleanup(self) -> OperationReport:
        """
        Delete drop log rows without files and drop log files without rows

        Returns:
            OperationReport with deleted_rows and deleted_files counts
        """
        logger.info("start drop log files cleanup")
        report = OperationReport('drop_log_file_cleanup')

        try:
            drop_logs = self.drop_log_file_store.find_all()
        except Exception as e:
            logger.error(f"failed to load drop log files: {e}")
            report.add_failure('drop_log_file', e)
            return report

        file_index: Dict[str, bool] = {}

        for drop_log in drop_logs:
            file_path = self.recorded_manager.get_drop_log_file_path(drop_log)

            if file_util.exists(file_path):
                file_index[file_path] = True
                continue

            logger.warning(f"drop log file is not exist: {file_path}")
            try:
                self.recorded_store.remove_drop_log_file_id(drop_log.id)
                self.drop_log_file_store.delete_once(drop_log.id)
                report.increment('deleted_rows')
            except Exception as e:
                logger.error(f"failed to delete drop log data: {drop_log.id}: {e}")
                report.add_failure(f"drop_log_file:{drop_log.id}", e)

        file_list = file_util.get_file_list(self.config.drop_log)
        for file_path in file_list.files:
            if file_path in file_index:
                continue

            logger.info(f"delete drop log file: {file_path}")
            try:
                file_util.unlink(file_path)
                report.increment('deleted_files')
            except OSError as e:
                logger.error(f"failed to delete drop log file: {file_path}: {e}")
                report.add_failure(file_path, e)

        logger.info(f"drop log files cleanup completed: {report.counts}")
        return report
