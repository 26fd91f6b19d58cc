import importlib
import json
import os
import time

from progress import (
    log_attempt_detail,
    reset,
    set_box,
    set_done,
    set_failed_count,
    set_placed_count,
    set_progress_pct,
    set_result_url,
    set_status,
    snapshot,
)


def test_set_done_no_args_defaults_to_solved():
    reset()
    set_done()
    snap = snapshot()
    assert snap["status"] == "Solved"
    assert snap["percent"] == 100.0
    assert snap["done"] is True
    assert snap["ok"] is True
    assert snap["result_url"] == ""


def test_set_done_failure_with_reason():
    reset()
    set_status("Solving")
    set_done(False, reason="boom")
    snap = snapshot()
    assert snap["status"] == "Error"
    assert snap["percent"] == 100.0
    assert snap["message"] == "boom"
    assert snap["done"] is True
    assert snap["ok"] is False


def test_set_result_url_tracks_navigation_target():
    reset()
    set_result_url("/result/latest")
    snap = snapshot()
    assert snap["result_url"] == "/result/latest"
    assert snap["done"] is False


def test_reset_increments_run_identifier():
    reset()
    first = snapshot()["run_id"]
    reset()
    second = snapshot()["run_id"]
    assert isinstance(first, int)
    assert isinstance(second, int)
    assert second == first + 1


def test_counters_are_tolerant():
    reset()
    set_box("bed-a", 2, 3)
    set_placed_count("7")
    set_failed_count(-4)
    set_progress_pct(250)
    snap = snapshot()
    assert (snap["box"], snap["box_index"], snap["box_total"]) == ("bed-a", 2, 3)
    assert snap["placed_count"] == 7
    assert snap["failed_count"] == 0
    assert snap["percent"] == 100.0
    assert "elapsed_start" not in snap


def test_log_attempt_detail_never_raises():
    log_attempt_detail("Unit test event", value=1, empty="", missing=None)
    log_attempt_detail("Bare event")


def test_snapshot_reads_state_written_by_other_process(tmp_path, monkeypatch):
    import progress as progress_module

    state_path = tmp_path / "state.json"
    monkeypatch.setenv("PROGRESS_STATE_FILE", str(state_path))
    progress = importlib.reload(progress_module)

    progress.reset()
    progress.set_phase("allocate")
    first = progress.snapshot()
    assert first["phase"] == "allocate"

    data = dict(first)
    data["phase"] = "gaps"
    data["placed_count"] = 9
    state_path.write_text(json.dumps(data))
    os.utime(state_path, None)

    with progress.PROGRESS_LOCK:
        progress.PROGRESS["phase"] = ""
        progress.PROGRESS["placed_count"] = 0
        progress._LAST_STATE_MTIME = 0.0

    time.sleep(0.01)
    updated = progress.snapshot()
    assert updated["phase"] == "gaps"
    assert updated["placed_count"] == 9

    monkeypatch.delenv("PROGRESS_STATE_FILE", raising=False)
    importlib.reload(progress_module)
