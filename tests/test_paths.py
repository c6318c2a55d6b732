"""Tests for output path management."""

from room_packing.utils.paths import PathManager


def test_default_directories(tmp_path):
    paths = PathManager(tmp_path, {})

    for name in ("results", "diagrams", "renders", "logs"):
        assert (tmp_path / name).is_dir()

    assert paths.get_result_path("vault") == tmp_path / "results" / "vault.json"
    assert paths.get_diagram_path("vault") == tmp_path / "diagrams" / "vault.txt"
    assert paths.get_render_path("vault") == tmp_path / "renders" / "vault.png"
    assert paths.get_log_path("batch_planning") == tmp_path / "logs" / "batch_planning.log"


def test_configured_log_directory(tmp_path):
    paths = PathManager(tmp_path, {"logs": "run_logs"})
    assert paths.get_log_path("vault") == tmp_path / "run_logs" / "vault.log"
    assert paths.get_log_path("vault").parent.is_dir()
