"""Tests for workspace config loading."""

from git_graph.config import GitGraphConfig, load_config


def _write(tmp_path, text):
    config_dir = tmp_path / ".git-graph"
    config_dir.mkdir()
    (config_dir / "config.yaml").write_text(text)


def test_defaults_without_file(tmp_path):
    config = load_config(tmp_path)
    assert config.open_to_the_repo_of_the_active_text_editor_document is False
    assert config.code_review_expiry_days == 90
    assert config.workspace_folders == [str(tmp_path.resolve())]


def test_empty_file(tmp_path):
    _write(tmp_path, "")
    assert load_config(tmp_path).code_review_expiry_days == GitGraphConfig().code_review_expiry_days


def test_values(tmp_path):
    _write(
        tmp_path,
        "open_to_the_repo_of_the_active_text_editor_document: true\n"
        "code_review_expiry_days: 7\n"
        "git_path: /opt/git/bin/git\n",
    )
    config = load_config(tmp_path)
    assert config.open_to_the_repo_of_the_active_text_editor_document is True
    assert config.code_review_expiry_days == 7
    assert config.git_path == "/opt/git/bin/git"


def test_relative_workspace_folders(tmp_path):
    _write(tmp_path, "workspace_folders:\n  - projects\n  - /abs/folder\n")
    config = load_config(tmp_path)
    assert config.workspace_folders == [str((tmp_path / "projects").resolve()), "/abs/folder"]
