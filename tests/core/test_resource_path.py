"""Tests for resource path resolution."""

import sys
from pathlib import Path
from unittest.mock import patch

from vortrainer.core.resource_path import (
    get_config_path,
    get_data_path,
    get_project_root,
    is_bundled,
)


class TestResourcePath:
    """Test locating config and data files."""

    def test_not_bundled_in_checkout(self) -> None:
        assert is_bundled() is False

    def test_project_root_holds_config_and_data(self) -> None:
        root = get_project_root()
        assert (root / "config").is_dir()
        assert (root / "data").is_dir()

    def test_bundled_files_exist(self) -> None:
        assert get_config_path("trainer.yaml").is_file()
        assert get_config_path("logging.yaml").is_file()
        assert get_data_path("navigation/vor_stations.csv").is_file()
        assert get_data_path("scenarios/training_scenarios.yaml").is_file()

    def test_bundle_root(self, tmp_path: Path) -> None:
        with patch.object(sys, "_MEIPASS", str(tmp_path), create=True):
            assert is_bundled() is True
            assert get_config_path("trainer.yaml") == tmp_path / "config" / "trainer.yaml"
