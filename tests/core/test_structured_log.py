"""
Tests for core/structured_log.py - JSONL event logging.
"""

from core.structured_log import get_log_file, jlog, read_recent_logs


class TestJlog:
    def test_writes_to_configured_dir(self, tmp_path):
        jlog("unit_event", answer=42)

        assert get_log_file() == tmp_path / "logs" / "events.jsonl"
        (entry,) = read_recent_logs()
        assert entry["event"] == "unit_event"
        assert entry["level"] == "INFO"
        assert entry["answer"] == 42
        assert entry["ts"].endswith("+00:00")

    def test_level_filter_and_count(self):
        for i in range(5):
            jlog("tick", i=i)
        jlog("boom", level="ERROR")

        assert [e["i"] for e in read_recent_logs(count=2, level="INFO")] == [3, 4]
        assert [e["event"] for e in read_recent_logs(level="ERROR")] == ["boom"]

    def test_non_json_values_are_stringified(self):
        jlog("big", value=object())
        assert read_recent_logs()[-1]["value"].startswith("<object")

    def test_missing_file(self):
        assert read_recent_logs() == []

    def test_skips_corrupt_lines(self):
        jlog("first")
        with get_log_file().open("a", encoding="utf-8") as f:
            f.write("{not json\n")
        jlog("second")
        assert [e["event"] for e in read_recent_logs()] == ["first", "second"]
