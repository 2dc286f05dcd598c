"""Unit tests for configuration loading"""

import os
from pathlib import Path

import pytest
import yaml

from pvr.core.config import Config, get_config, set_config


def _write(path, data):
    with open(path, 'w') as f:
        yaml.dump(data, f)
    return str(path)


@pytest.mark.unit
class TestConfig:
    """Test Config"""

    def test_recorded_roots_are_absolute(self, test_config, temp_dir):
        roots = test_config.recorded

        assert [r['name'] for r in roots] == ['recorded', 'sub']
        assert roots[0]['path'] == os.path.abspath(str(temp_dir / 'recorded'))

    def test_get_recorded_path(self, test_config, temp_dir):
        assert test_config.get_recorded_path('sub') == os.path.abspath(str(temp_dir / 'sub'))
        assert test_config.get_recorded_path('unknown') is None

    def test_dot_notation(self, test_config):
        assert test_config.get('maintenance.interval_hours') == 24
        assert test_config.get('maintenance.missing', 'fallback') == 'fallback'
        assert test_config.get('thumbnail.nested', 'x') == 'x'

    def test_set_and_save(self, test_config):
        test_config.set('maintenance.interval_hours', 6)
        test_config.save()

        assert Config(str(test_config.config_path)).get('maintenance.interval_hours') == 6

    def test_defaults(self, temp_dir, monkeypatch):
        monkeypatch.delenv('PVR_DATABASE_PATH', raising=False)
        config = Config(_write(temp_dir / 'empty.yaml', {}))

        assert config.recorded == []
        assert config.recorded_history_retention_days == 90
        assert config.database_path == Path('data/recorded.db')

    def test_database_path_env_override(self, test_config, temp_dir, monkeypatch):
        monkeypatch.setenv('PVR_DATABASE_PATH', str(temp_dir / 'env.db'))

        assert test_config.database_path == temp_dir / 'env.db'

    def test_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            Config(str(temp_dir / 'nope.yaml'))

    def test_duplicate_recorded_name(self, temp_dir):
        path = _write(temp_dir / 'dup.yaml', {'recorded': [
            {'name': 'a', 'path': '/tmp/a'},
            {'name': 'a', 'path': '/tmp/b'}
        ]})

        with pytest.raises(ValueError):
            Config(path)

    def test_recorded_entry_without_path(self, temp_dir):
        path = _write(temp_dir / 'bad.yaml', {'recorded': [{'name': 'a'}]})

        with pytest.raises(ValueError):
            Config(path)

    def test_global_config(self, test_config):
        set_config(test_config)
        try:
            assert get_config() is test_config
        finally:
            set_config(None)
