"""
Tests for the stage debug logger.
"""

import numpy as np
from pyxlaw.common import debug_logger
from pyxlaw.common.debug_logger import XlawDebugLogger
from pyxlaw.core import mulaw
from pyxlaw.core.loudness import calculate_lufs


class TestXlawDebugLogger:
    """Test cases for XlawDebugLogger."""

    def test_disabled_logger_writes_nothing(self, tmp_path):
        log_file = tmp_path / "debug.log"
        logger = XlawDebugLogger(str(log_file), enabled=False)
        logger.log_stage("STAGE", "samples", [1, 2, 3])
        assert not log_file.exists()

    def test_log_stage_records_statistics(self, tmp_path):
        log_file = tmp_path / "debug.log"
        logger = XlawDebugLogger(str(log_file))
        logger.log_stage("REQUANT_OUTPUT", "samples", np.array([1, -2, 3]), block=4, law="MULAW", note="x")

        lines = log_file.read_text().splitlines()
        assert lines[0].startswith("# pyxlaw Debug Log")
        entry = lines[-1]
        assert "[BLK004][LAW_MULAW] REQUANT_OUTPUT" in entry
        assert "size=3" in entry
        assert "range=[-2.000000,3.000000]" in entry
        assert "note=x" in entry
        assert "test_debug_logger.py" in entry

    def test_log_stage_ignores_infinities_in_statistics(self, tmp_path):
        log_file = tmp_path / "debug.log"
        logger = XlawDebugLogger(str(log_file))
        logger.log_stage("BLOCK_LOUDNESS", "db", [float("-inf"), -3.0])
        assert "range=[-3.000000,-3.000000]" in log_file.read_text()

    def test_log_bytes_hex(self, tmp_path):
        log_file = tmp_path / "debug.log"
        logger = XlawDebugLogger(str(log_file))
        logger.log_bytes("ALAW_ENCODE", b"\xd5\x2a", law="ALAW")
        assert "hex=d52a" in log_file.read_text()

    def test_global_logging_enable_disable(self, tmp_path):
        log_file = tmp_path / "global.log"
        debug_logger.enable_debug_logging(str(log_file))
        try:
            mulaw.encode([0, 1000, -1000])
        finally:
            debug_logger.disable_debug_logging()
        assert "MULAW_ENCODE" in log_file.read_text()

        size = log_file.stat().st_size
        mulaw.encode([0])
        assert log_file.stat().st_size == size

    def test_log_bytes_accepts_arrays(self, tmp_path):
        log_file = tmp_path / "debug.log"
        logger = XlawDebugLogger(str(log_file))
        logger.log_bytes("MULAW_ENCODE", np.array([0xFF, 0x80], dtype=np.uint8), law="MULAW")
        text = log_file.read_text()
        assert "hex=ff80" in text
        assert "size=2 bytes" in text

    def test_loudness_logs_each_block(self, tmp_path):
        log_file = tmp_path / "blocks.log"
        debug_logger.enable_debug_logging(str(log_file))
        try:
            calculate_lufs(np.full(8000, 1000, dtype=np.int64), 16, 8000)
        finally:
            debug_logger.disable_debug_logging()
        entries = [line for line in log_file.read_text().splitlines() if "BLOCK_LOUDNESS" in line]
        assert len(entries) == 2
        assert "[BLK000]" in entries[0]
        assert "[BLK001]" in entries[1]
        assert "start=3200" in entries[1]
