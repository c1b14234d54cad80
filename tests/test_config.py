import os
import unittest
from pathlib import Path
from unittest import mock

from classcal.config import (
    DATA_ENV_VAR,
    LOCALE_ENV_VAR,
    default_data_path,
    resolve_data_path,
    resolve_locale,
)


class TestResolveDataPath(unittest.TestCase):
    def test_explicit_path_wins(self) -> None:
        with mock.patch.dict(os.environ, {DATA_ENV_VAR: "/tmp/env.json"}):
            self.assertEqual(resolve_data_path("/tmp/flag.json"), Path("/tmp/flag.json"))

    def test_env_var(self) -> None:
        with mock.patch.dict(os.environ, {DATA_ENV_VAR: "/tmp/env.json"}):
            self.assertEqual(resolve_data_path(None), Path("/tmp/env.json"))
            self.assertEqual(resolve_data_path("  "), Path("/tmp/env.json"))

    def test_default_lives_in_package(self) -> None:
        with mock.patch.dict(os.environ, {DATA_ENV_VAR: ""}):
            path = resolve_data_path()
        self.assertEqual(path, default_data_path())
        self.assertEqual(path.name, "classcal.json")
        self.assertEqual(path.parent.parent.name, "classcal")


class TestResolveLocale(unittest.TestCase):
    def test_flag_then_env_then_default(self) -> None:
        with mock.patch.dict(os.environ, {LOCALE_ENV_VAR: "en_US"}):
            self.assertEqual(resolve_locale("id"), "id")
            self.assertEqual(resolve_locale(None), "en")
        with mock.patch.dict(os.environ, {LOCALE_ENV_VAR: ""}):
            self.assertEqual(resolve_locale(None), "id")

    def test_region_suffix_and_unknown(self) -> None:
        with mock.patch.dict(os.environ, {LOCALE_ENV_VAR: ""}):
            self.assertEqual(resolve_locale("EN-gb"), "en")
            self.assertEqual(resolve_locale("fr"), "id")


if __name__ == "__main__":
    unittest.main()
