import tempfile
import unittest
from pathlib import Path

from pydantic import ValidationError

from artist_geo.config import ProviderSettings, Settings, find_config


class TestSettings(unittest.TestCase):
    def test_defaults_without_config_file(self) -> None:
        settings = Settings.load(None)
        self.assertEqual(settings.providers.search_limit, 3)
        self.assertEqual(settings.providers.network_retries, 1)

    def test_load_yaml_and_expand_paths(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            tmp = Path(tmpdir)
            config = tmp / "config.yaml"
            config.write_text(
                "\n".join(
                    [
                        "store:",
                        f"  path: {tmp / 'db' / 'artists.sqlite3'}",
                        "providers:",
                        "  musicbrainz_useragent: ops@example.org",
                        "  search_limit: 5",
                        "export:",
                        f"  path: {tmp / 'out.json'}",
                    ]
                ),
                encoding="utf-8",
            )
            settings = Settings.load(config)
            self.assertEqual(settings.store.path, (tmp / "db" / "artists.sqlite3").resolve())
            self.assertEqual(settings.export.path, (tmp / "out.json").resolve())
            self.assertEqual(settings.providers.musicbrainz_useragent, "ops@example.org")
            self.assertEqual(settings.providers.search_limit, 5)

    def test_empty_yaml_gives_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config = Path(tmpdir) / "config.yaml"
            config.write_text("", encoding="utf-8")
            self.assertEqual(Settings.load(config).providers.request_delay_seconds, 1.1)

    def test_search_limit_is_bounded(self) -> None:
        with self.assertRaises(ValidationError):
            ProviderSettings(search_limit=0)

    def test_find_config_explicit_missing_path(self) -> None:
        with self.assertRaises(FileNotFoundError):
            find_config(Path("/this/path/does/not/exist/config.yaml"))

    def test_find_config_explicit_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config = Path(tmpdir) / "custom.yaml"
            config.write_text("{}", encoding="utf-8")
            self.assertEqual(find_config(config), config)


if __name__ == "__main__":
    unittest.main()
