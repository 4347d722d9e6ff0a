"""Tests for navmirror.theme — template directory fallback."""

from pathlib import Path

from navmirror.config import MirrorConfig
from navmirror.theme import get_template_dirs


class TestTemplateDirs:
    def test_bundled_only(self) -> None:
        dirs = get_template_dirs(MirrorConfig())
        assert len(dirs) == 1
        assert dirs[0].name == "templates"
        for name in ("nav.html", "nav_dir.html", "nav_file.html", "diagnostic.html", "page.html"):
            assert (dirs[0] / name).is_file()

    def test_user_dir_first(self, tmp_path: Path) -> None:
        dirs = get_template_dirs(MirrorConfig(templates_dir=tmp_path))
        assert dirs[0] == tmp_path
        assert len(dirs) == 2
