"""Resolve video file rows to absolute paths"""

import os
import logging
from typing import Optional

from pvr.core.config import Config
from pvr.core.models import VideoFile
from pvr.core.recorded_db import VideoFileStore

logger = logging.getLogger(__name__)


class VideoUtil:
    """Maps parent directory aliases and video file rows onto the filesystem"""

    def __init__(self, config: Config, video_file_store: VideoFileStore):
        self.config = config
        self.video_file_store = video_file_store

    def get_parent_dir_path(self, parent_directory_name: str) -> Optional[str]:
        """Absolute path of a recording root, or None for an unknown alias"""
        return self.config.get_recorded_path(parent_directory_name)

    def get_full_file_path_from_video_file(self, video_file: VideoFile) -> Optional[str]:
        parent_dir = self.get_parent_dir_path(video_file.parent_directory_name)
        if parent_dir is None:
            logger.debug(f"Unknown parent directory {video_file.parent_directory_name} for video file {video_file.id}")
            return None

        return os.path.normpath(os.path.join(parent_dir, video_file.file_path))

    def get_full_file_path_from_id(self, video_file_id: int) -> Optional[str]:
        video_file = self.video_file_store.find_id(video_file_id)
        if video_file is None:
            return None

        return self.get_full_file_path_from_video_file(video_file)
