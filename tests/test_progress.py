import json

from neurobreak.progress import LevelProgress


def test_first_level_is_always_unlocked(tmp_path):
    progress = LevelProgress(tmp_path / "missing.json")
    assert progress.unlocked == [1]
    assert progress.highest == 1
    assert not progress.is_unlocked(2)


def test_unlock_persists(tmp_path):
    path = tmp_path / "nested" / "progress.json"
    progress = LevelProgress(path)
    assert progress.unlock(2)
    assert not progress.unlock(2)
    assert json.loads(path.read_text()) == [1, 2]
    assert LevelProgress(path).unlocked == [1, 2]


def test_unlock_rejects_out_of_range(tmp_path):
    progress = LevelProgress(tmp_path / "p.json", level_count=3)
    assert not progress.unlock(0)
    assert not progress.unlock(4)
    assert progress.unlock(3)
    assert progress.highest == 3


def test_corrupt_file_is_ignored(tmp_path, caplog):
    path = tmp_path / "p.json"
    path.write_text("{not json")
    progress = LevelProgress(path)
    assert progress.unlocked == [1]
    assert "unreadable progress file" in caplog.text


def test_malformed_entries_are_filtered(tmp_path):
    path = tmp_path / "p.json"
    path.write_text(json.dumps([2, "3", True, 99, -1, 4.0, 5]))
    assert LevelProgress(path, level_count=30).unlocked == [1, 2, 5]


def test_non_list_file_is_ignored(tmp_path):
    path = tmp_path / "p.json"
    path.write_text(json.dumps({"levels": [2]}))
    assert LevelProgress(path).unlocked == [1]


def test_in_memory_progress_never_writes(tmp_path):
    progress = LevelProgress()
    assert progress.unlock(2)
    assert progress.is_unlocked(2)
    assert list(tmp_path.iterdir()) == []
