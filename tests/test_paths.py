from pathlib import Path

from codex.data import paths


def test_get_stories_path_base_path(tmp_path: Path) -> None:
    assert paths.get_stories_path(tmp_path) == tmp_path


def test_get_stories_path_source_repo_exists() -> None:
    stories_path = paths.get_stories_path()
    assert stories_path.name == "stories"
    assert (stories_path / "cave.yaml").exists()


def test_resolve_story_path_bare_name(tmp_path: Path) -> None:
    assert paths.resolve_story_path("forest", tmp_path) == tmp_path / "forest.yaml"


def test_resolve_story_path_passes_files_through(tmp_path: Path) -> None:
    story_file = tmp_path / "mine.yml"
    assert paths.resolve_story_path(str(story_file)) == story_file

    plain = tmp_path / "story_without_suffix"
    plain.write_text("title: x", encoding="utf-8")
    assert paths.resolve_story_path(str(plain)) == plain
