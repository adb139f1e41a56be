"""Tests for config module."""

import unittest
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import patch

from forge.config import (
    ConfigError,
    ForgeConfig,
    find_project_config,
    get_machine_config_path,
    get_user_config_path,
    load_config,
    parse_config_file,
)
from forge.logging import LogLevel


class TestConfigPaths(unittest.TestCase):
    @patch("platformdirs.user_config_dir")
    def test_user_config_path_from_platformdirs(self, mock_user_config_dir):
        """
        Test that get_user_config_path uses platformdirs.user_config_dir.
        """
        mock_user_config_dir.return_value = "/home/user/.config/forge"
        result = get_user_config_path()
        mock_user_config_dir.assert_called_once_with("forge")
        self.assertEqual(result, Path("/home/user/.config/forge/config.yml"))

    @patch("platformdirs.site_config_dir")
    def test_machine_config_path_from_platformdirs(self, mock_site_config_dir):
        """
        Test that get_machine_config_path uses platformdirs.site_config_dir.
        """
        mock_site_config_dir.return_value = "/etc/xdg/forge"
        result = get_machine_config_path()
        mock_site_config_dir.assert_called_once_with("forge")
        self.assertEqual(result, Path("/etc/xdg/forge/config.yml"))


class TestFindProjectConfig(unittest.TestCase):
    def test_finds_config_in_parent(self):
        """Test the search walks up from a nested directory."""
        with TemporaryDirectory() as tmpdir:
            root = Path(tmpdir).resolve()
            (root / ".forge-config.yml").write_text("shell: /bin/bash\n")
            nested = root / "a" / "b"
            nested.mkdir(parents=True)

            self.assertEqual(find_project_config(nested), root / ".forge-config.yml")

    def test_no_config(self):
        """Test None is returned when no config exists up to the root."""
        with TemporaryDirectory() as tmpdir:
            with patch("forge.config.PROJECT_CONFIG_FILE", ".forge-config-that-does-not-exist.yml"):
                self.assertIsNone(find_project_config(Path(tmpdir)))


class TestParseConfigFile(unittest.TestCase):
    def test_missing_and_empty_files(self):
        """Test missing and empty files give no settings."""
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yml"
            self.assertEqual(parse_config_file(path), {})
            path.write_text("")
            self.assertEqual(parse_config_file(path), {})

    def test_valid_settings(self):
        """Test forgefile and shell are read."""
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yml"
            path.write_text("forgefile: build.forge\nshell: /bin/bash\n")
            self.assertEqual(
                parse_config_file(path), {"forgefile": "build.forge", "shell": "/bin/bash"}
            )

    def test_invalid_files(self):
        """Test malformed config files raise ConfigError."""
        invalid = {
            "bad yaml": "shell: [\n",
            "not a mapping": "- shell\n",
            "unknown field": "dryrun: true\n",
            "not a string": "shell: 3\n",
            "empty string": "forgefile: ''\n",
        }
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yml"
            for case, content in invalid.items():
                with self.subTest(case=case):
                    path.write_text(content)
                    with self.assertRaises(ConfigError):
                        parse_config_file(path)


class TestLoadConfig(unittest.TestCase):
    def test_later_files_win(self):
        """Test machine < user < project precedence."""
        with TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            machine = root / "machine.yml"
            user = root / "user.yml"
            project_dir = root / "project"
            project_dir.mkdir()
            machine.write_text("forgefile: machine.forge\nshell: /bin/zsh\n")
            user.write_text("shell: /bin/bash\n")
            (project_dir / ".forge-config.yml").write_text("forgefile: project.forge\n")

            with patch("forge.config.get_machine_config_path", return_value=machine), patch(
                "forge.config.get_user_config_path", return_value=user
            ):
                config = load_config(project_dir)

            self.assertEqual(config.forgefile, "project.forge")
            self.assertEqual(config.shell, "/bin/bash")
            self.assertFalse(config.dry_run)

    def test_defaults(self):
        """Test defaults when no config file exists."""
        with TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            with patch("forge.config.get_machine_config_path", return_value=root / "m.yml"), patch(
                "forge.config.get_user_config_path", return_value=root / "u.yml"
            ), patch("forge.config.find_project_config", return_value=None):
                config = load_config(root)

        self.assertEqual(config, ForgeConfig())
        self.assertEqual(config.forgefile, "./forgefile")
        self.assertEqual(config.shell, "/bin/sh")

    def test_with_overrides_skips_none(self):
        """Test None overrides keep the current value."""
        config = ForgeConfig(shell="/bin/bash").with_overrides(
            shell=None, dry_run=True, log_level=LogLevel.DEBUG
        )
        self.assertEqual(config.shell, "/bin/bash")
        self.assertTrue(config.dry_run)
        self.assertEqual(config.log_level, LogLevel.DEBUG)


if __name__ == "__main__":
    unittest.main()
