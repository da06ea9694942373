"""Tests for the StatusBoard busy flag."""

import threading

from secscan.security.models import RunState, ScanResult
from secscan.security.status import StatusBoard


def test_initial_snapshot_is_idle():
    board = StatusBoard()
    assert board.snapshot().state == RunState.IDLE
    assert board.is_running is False


def test_try_begin_is_exclusive():
    board = StatusBoard()
    assert board.try_begin("Scan started...") is True
    assert board.try_begin("Starting XML file download...") is False
    assert board.snapshot().message == "Scan started..."


def test_complete_replaces_whole_status():
    board = StatusBoard()
    board.try_begin("Scan started...")
    running = board.snapshot()
    result = ScanResult(tool_name="yara", stdout="hit", return_code=0)

    board.complete(result=result)

    done = board.snapshot()
    assert running.state == RunState.RUNNING
    assert done.state == RunState.COMPLETED
    assert done.result is result
    assert done.message == ""
    assert board.try_begin("again") is True


def test_publish_only_when_idle():
    board = StatusBoard()
    assert board.publish("Selected XML file: /a.xml") is True
    assert board.snapshot().output == "Selected XML file: /a.xml"

    board.try_begin("Scan started...")
    assert board.publish("Selected XML file: /b.xml") is False
    assert board.snapshot().output == "Scan started..."


def test_concurrent_begin_single_winner():
    board = StatusBoard()
    barrier = threading.Barrier(8)
    wins = []

    def contender():
        barrier.wait()
        wins.append(board.try_begin("go"))

    threads = [threading.Thread(target=contender) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert wins.count(True) == 1
