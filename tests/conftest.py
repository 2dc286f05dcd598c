"""Pytest configuration and shared fixtures for PVR tests"""

import pytest
import shutil
from pathlib import Path
from typing import Dict, Any, List, Optional, Tuple
import yaml

# Add project root to Python path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from pvr.core.config import Config
from pvr.core.models import DropLogFile, Recorded, RecordedHistory, Thumbnail, VideoFile
from pvr.core.recorded_db import RecordedDatabase
from pvr.core.services import Services, create_services


@pytest.fixture
def temp_dir(tmp_path):
    """Create a temporary directory for test files"""
    test_dir = tmp_path / "test_pvr"
    test_dir.mkdir()
    yield test_dir
    # Cleanup
    if test_dir.exists():
        shutil.rmtree(test_dir)


@pytest.fixture
def test_config_data(temp_dir) -> Dict[str, Any]:
    """Generate test configuration"""
    config_data = {
        'recorded': [
            {'name': 'recorded', 'path': str(temp_dir / 'recorded')},
            {'name': 'sub', 'path': str(temp_dir / 'sub')}
        ],
        'thumbnail': str(temp_dir / 'thumbnail'),
        'drop_log': str(temp_dir / 'drop_log'),
        'recorded_history_retention_days': 30,
        'database': {
            'path': str(temp_dir / 'data' / 'recorded.db')
        },
        'maintenance': {
            'interval_hours': 24,
            'run_on_startup': False
        }
    }

    for name in ('recorded', 'sub', 'thumbnail', 'drop_log'):
        (temp_dir / name).mkdir(exist_ok=True)

    return config_data


@pytest.fixture
def test_config(temp_dir, test_config_data, monkeypatch) -> Config:
    """Write the test configuration and load it"""
    monkeypatch.delenv('PVR_DATABASE_PATH', raising=False)

    config_path = temp_dir / 'config.yaml'
    with open(config_path, 'w') as f:
        yaml.dump(test_config_data, f)

    return Config(str(config_path))


@pytest.fixture
def recorded_db(temp_dir):
    """Create temporary recorded database"""
    db_path = temp_dir / "test_recorded.db"
    db = RecordedDatabase(db_path)
    yield db
    if db_path.exists():
        db_path.unlink()


@pytest.fixture
def services(test_config) -> Services:
    """Fully wired services backed by a temporary database"""
    return create_services(test_config)


@pytest.fixture
def recorded_manager(services):
    return services.recorded_manager


@pytest.fixture
def file_cleaner(services):
    return services.file_cleaner


# Helper functions for tests

def create_test_file(file_path: Path, size_bytes: int = 1024) -> Path:
    """Create a dummy file of the given size, creating parent directories"""
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_bytes(b'\x00' * size_bytes)
    return file_path


def create_recorded(
    services: Services,
    video_files: List[Tuple[str, str]] = (),
    thumbnails: List[str] = (),
    drop_log: Optional[str] = None,
    is_recording: bool = False,
    reserve_id: Optional[int] = None,
    name: str = 'Test Program',
    create_files: bool = True,
    size_bytes: int = 1024
) -> Dict[str, Any]:
    """
    Insert a recorded program with children, writing the backing files

    Args:
        video_files: (parent_directory_name, relative file path) pairs

    Returns:
        Dict with recorded_id, video_file_ids, thumbnail_ids, drop_log_file_id and paths
    """
    config = services.config

    drop_log_file_id = None
    drop_log_path = None
    if drop_log is not None:
        drop_log_file_id = services.drop_log_file_store.insert_once(DropLogFile(id=0, file_path=drop_log))
        drop_log_path = Path(config.drop_log) / drop_log
        if create_files:
            create_test_file(drop_log_path, 128)

    recorded_id = services.recorded_store.insert_once(Recorded(
        id=0,
        name=name,
        is_recording=is_recording,
        reserve_id=reserve_id,
        drop_log_file_id=drop_log_file_id
    ))

    thumbnail_ids = []
    thumbnail_paths = []
    for rel_path in thumbnails:
        thumbnail_ids.append(services.thumbnail_store.insert_once(
            Thumbnail(id=0, recorded_id=recorded_id, file_path=rel_path)
        ))
        path = Path(config.thumbnail) / rel_path
        thumbnail_paths.append(path)
        if create_files:
            create_test_file(path, 256)

    video_file_ids = []
    video_paths = []
    for alias, rel_path in video_files:
        video_file_ids.append(services.video_file_store.insert_once(VideoFile(
            id=0,
            recorded_id=recorded_id,
            parent_directory_name=alias,
            file_path=rel_path,
            type='ts',
            name=Path(rel_path).name,
            size=size_bytes
        )))
        root = config.get_recorded_path(alias)
        path = Path(root) / rel_path if root is not None else None
        video_paths.append(path)
        if create_files and path is not None:
            create_test_file(path, size_bytes)

    return {
        'recorded_id': recorded_id,
        'video_file_ids': video_file_ids,
        'video_paths': video_paths,
        'thumbnail_ids': thumbnail_ids,
        'thumbnail_paths': thumbnail_paths,
        'drop_log_file_id': drop_log_file_id,
        'drop_log_path': drop_log_path
    }


def add_history(services: Services, name: str, end_at: int, channel_id: int = 1) -> int:
    return services.recorded_history_store.insert_once(
        RecordedHistory(id=0, name=name, channel_id=channel_id, end_at=end_at)
    )


def history_names(services: Services) -> List[str]:
    """Names of the remaining history rows, oldest first"""
    with services.database._get_connection() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT name FROM recorded_history ORDER BY end_at ASC")
        return [row['name'] for row in cursor.fetchall()]


def count_rows(services: Services, table: str, recorded_id: int) -> int:
    """Number of child rows in table that still point at recorded_id"""
    with services.database._get_connection() as conn:
        cursor = conn.cursor()
        cursor.execute(f"SELECT COUNT(*) FROM {table} WHERE recorded_id = ?", (recorded_id,))
        return cursor.fetchone()[0]
