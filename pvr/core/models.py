"""Recorded content entities"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional


@dataclass
class Thumbnail:
    """Thumbnail image belonging to a recorded program"""
    id: int
    recorded_id: int
    file_path: str

    @classmethod
    def from_row(cls, row) -> 'Thumbnail':
        return cls(id=row['id'], recorded_id=row['recorded_id'], file_path=row['file_path'])


@dataclass
class VideoFile:
    """Encoded media file belonging to a recorded program

    file_path is relative to the recording root named by parent_directory_name.
    """
    id: int
    recorded_id: int
    parent_directory_name: str
    file_path: str
    type: str
    name: str
    size: int = 0

    @classmethod
    def from_row(cls, row) -> 'VideoFile':
        return cls(
            id=row['id'],
            recorded_id=row['recorded_id'],
            parent_directory_name=row['parent_directory_name'],
            file_path=row['file_path'],
            type=row['type'],
            name=row['name'],
            size=row['size'] or 0
        )


@dataclass
class DropLogFile:
    """Dropped/scrambled packet log written while recording"""
    id: int
    file_path: str
    error_cnt: int = 0
    drop_cnt: int = 0
    scrambling_cnt: int = 0

    @classmethod
    def from_row(cls, row) -> 'DropLogFile':
        return cls(
            id=row['id'],
            file_path=row['file_path'],
            error_cnt=row['error_cnt'] or 0,
            drop_cnt=row['drop_cnt'] or 0,
            scrambling_cnt=row['scrambling_cnt'] or 0
        )


@dataclass
class Recorded:
    """One captured program and its derived artifacts"""
    id: int
    name: str = ''
    is_recording: bool = False
    reserve_id: Optional[int] = None
    is_protected: bool = False
    start_at: Optional[int] = None
    end_at: Optional[int] = None
    drop_log_file_id: Optional[int] = None
    thumbnails: List[Thumbnail] = field(default_factory=list)
    video_files: List[VideoFile] = field(default_factory=list)
    drop_log_file: Optional[DropLogFile] = None

    @classmethod
    def from_row(cls, row) -> 'Recorded':
        return cls(
            id=row['id'],
            name=row['name'] or '',
            is_recording=bool(row['is_recording']),
            reserve_id=row['reserve_id'],
            is_protected=bool(row['is_protected']),
            start_at=row['start_at'],
            end_at=row['end_at'],
            drop_log_file_id=row['drop_log_file_id']
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class RecordedHistory:
    """Finished-program history entry kept for duplicate detection"""
    id: int
    name: str
    channel_id: Optional[int]
    end_at: int


@dataclass
class AddVideoFileOption:
    """Arguments for registering a new video file"""
    recorded_id: int
    parent_directory_name: str
    file_path: str
    type: str
    name: str
