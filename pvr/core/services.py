"""Construct the recorded content services from configuration"""

import logging
from dataclasses import dataclass

from pvr.core.config import Config
from pvr.core.file_cleaner import RecordedFileCleaner
from pvr.core.recorded_db import (
    DropLogFileStore,
    RecordedDatabase,
    RecordedHistoryStore,
    RecordedStore,
    ThumbnailStore,
    VideoFileStore,
)
from pvr.core.recorded_event import RecordedEvent
from pvr.core.recorded_manager import RecordedManager
from pvr.core.recording_manager import RecordingManager
from pvr.core.video_util import VideoUtil

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Everything the API and maintenance tasks need"""
    config: Config
    database: RecordedDatabase
    recorded_store: RecordedStore
    video_file_store: VideoFileStore
    thumbnail_store: ThumbnailStore
    drop_log_file_store: DropLogFileStore
    recorded_history_store: RecordedHistoryStore
    recording_manager: RecordingManager
    recorded_event: RecordedEvent
    video_util: VideoUtil
    recorded_manager: RecordedManager
    file_cleaner: RecordedFileCleaner


def create_services(config: Config, recording_manager: RecordingManager = None,
                    recorded_event: RecordedEvent = None) -> Services:
    """Open the database and wire the manager and cleaner together"""
    database = RecordedDatabase(config.database_path)
    recorded_store = RecordedStore(database)
    video_file_store = VideoFileStore(database)
    thumbnail_store = ThumbnailStore(database)
    drop_log_file_store = DropLogFileStore(database)
    recorded_history_store = RecordedHistoryStore(database)
    recording_manager = recording_manager or RecordingManager()
    recorded_event = recorded_event or RecordedEvent()
    video_util = VideoUtil(config, video_file_store)

    recorded_manager = RecordedManager(
        config=config,
        recorded_store=recorded_store,
        video_file_store=video_file_store,
        thumbnail_store=thumbnail_store,
        drop_log_file_store=drop_log_file_store,
        recorded_history_store=recorded_history_store,
        recording_manager=recording_manager,
        recorded_event=recorded_event,
        video_util=video_util
    )

    file_cleaner = RecordedFileCleaner(
        config=config,
        recorded_manager=recorded_manager,
        recorded_store=recorded_store,
        video_file_store=video_file_store,
        drop_log_file_store=drop_log_file_store,
        video_util=video_util
    )

    logger.info(f"Recorded services ready ({len(config.recorded)} recorded roots)")

    return Services(
        config=config,
        database=database,
        recorded_store=recorded_store,
        video_file_store=video_file_store,
        thumbnail_store=thumbnail_store,
        drop_log_file_store=drop_log_file_store,
        recorded_history_store=recorded_history_store,
        recording_manager=recording_manager,
        recorded_event=recorded_event,
        video_util=video_util,
        recorded_manager=recorded_manager,
        file_cleaner=file_cleaner
    )
