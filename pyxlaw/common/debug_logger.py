"""
Debug logging for pyxlaw sample transforms.
Writes one line per processing stage with source location, data statistics and context,
so a conversion can be traced sample block by sample block.
"""

import time
import inspect
import numpy as np
from typing import List, Union, Any
import os


class XlawDebugLogger:
    """
    Stage logger for the companding codecs, the requantizer and the loudness meter.
    Logs with full metadata including source location, data statistics, and context.
    """

    def __init__(self, log_file: str = "pyxlaw_debug.log", enabled: bool = True):
        self.log_file = log_file
        self.enabled = enabled
        if enabled:
            # Clear log file and write header
            with open(log_file, 'w') as f:
                f.write(f"# pyxlaw Debug Log - {time.strftime('%Y-%m-%d %H:%M:%S')}\n")
                f.write("# Format: [TIMESTAMP][XLAW][FILE:LINE][FUNC][BLK{nnn}][LAW_{name}] STAGE: data_type=values |META: ... |SRC: ...\n")
                f.write("#\n")

    def _source(self) -> str:
        # First frame outside this module
        frame_info = inspect.currentframe().f_back
        while frame_info.f_back is not None and frame_info.f_code.co_filename == __file__:
            frame_info = frame_info.f_back
        filename = os.path.basename(frame_info.f_code.co_filename)
        return f"[{filename}:{frame_info.f_lineno}][{frame_info.f_code.co_name}]"

    @staticmethod
    def _timestamp() -> str:
        return time.strftime('%Y-%m-%dT%H:%M:%S.') + f"{int(time.time() * 1000000) % 1000000:06d}"

    @staticmethod
    def _context(context: dict) -> str:
        return " ".join(f"{key}={value}" for key, value in context.items())

    def log_stage(self, stage: str, data_type: str, values: Union[List, np.ndarray, float, int],
                  block: int = 0, law: str = "", **context) -> None:
        """
        Log a processing stage with comprehensive metadata.

        Args:
            stage: Processing stage name (e.g., 'MULAW_ENCODE', 'REQUANT_OUTPUT')
            data_type: Type of data being logged (e.g., 'samples', 'errors', 'db')
            values: The actual data values
            block: Loudness block index, 0 when not blocked
            law: Companding law name ('MULAW', 'ALAW', '')
            **context: Additional context (bit depths, sample rate, gate, etc.)
        """
        if not self.enabled:
            return

        source = self._source()

        if isinstance(values, (int, float)):
            values_array = np.array([values], dtype=np.float64)
            is_scalar = True
        else:
            values_array = np.asarray(values, dtype=np.float64)
            is_scalar = False

        size = int(values_array.size)
        finite = values_array[np.isfinite(values_array)]
        if finite.size > 0:
            min_val = float(np.min(finite))
            max_val = float(np.max(finite))
            sum_val = float(np.sum(finite))
            mean_val = float(np.mean(finite))
        else:
            min_val = max_val = sum_val = mean_val = 0.0
        nonzero_count = int(np.count_nonzero(values_array))

        # Truncate long arrays to the first and last five values
        if is_scalar:
            values_str = f"{values:.6f}"
        elif size <= 10:
            values_str = f"[{','.join(f'{v:.6f}' for v in values_array)}]"
        else:
            first_5 = ','.join(f'{v:.6f}' for v in values_array[:5])
            last_5 = ','.join(f'{v:.6f}' for v in values_array[-5:])
            values_str = f"[{first_5}...{last_5}]"

        law_str = f"[LAW_{law}]" if law else ""

        log_entry = (
            f"[{self._timestamp()}][XLAW]{source}"
            f"[BLK{block:03d}]{law_str} {stage}: "
            f"{data_type}={values_str} "
            f"|META: size={size} range=[{min_val:.6f},{max_val:.6f}] "
            f"sum={sum_val:.6f} mean={mean_val:.6f} nonzero={nonzero_count} "
            f"|SRC: {self._context(context)}\n"
        )

        with open(self.log_file, 'a') as f:
            f.write(log_entry)

    def log_bytes(self, stage: str, data: Union[bytes, np.ndarray], law: str = "", **context) -> None:
        """
        Special logging for companded byte data in hex format.
        Arrays are converted to bytes only when logging is enabled.
        """
        if not self.enabled:
            return

        if isinstance(data, np.ndarray):
            data = data.astype(np.uint8).tobytes()

        hex_str = bytes(data[:32]).hex()
        if len(data) > 32:
            hex_str += "..."
        law_str = f"[LAW_{law}]" if law else ""

        log_entry = (
            f"[{self._timestamp()}][XLAW]{self._source()}"
            f"[BLK000]{law_str} {stage}: "
            f"hex={hex_str} "
            f"|META: size={len(data)} bytes "
            f"|SRC: {self._context(context)}\n"
        )

        with open(self.log_file, 'a') as f:
            f.write(log_entry)

    def enable(self):
        """Enable logging."""
        self.enabled = True

    def disable(self):
        """Disable logging."""
        self.enabled = False


# Global logger instance, silent until enable_debug_logging() is called
debug_logger = XlawDebugLogger(enabled=False)


def log_debug(stage: str, data_type: str, values: Any, **kwargs) -> None:
    """
    Convenience function for logging with global logger instance.

    Usage:
        log_debug("REQUANT_OUTPUT", "samples", out,
                  input_bit_depth=16, target_bit_depth=8)
    """
    debug_logger.log_stage(stage, data_type, values, **kwargs)


def log_bytes(stage: str, data: Union[bytes, np.ndarray], **kwargs) -> None:
    """
    Convenience function for companded byte logging.
    """
    debug_logger.log_bytes(stage, data, **kwargs)


def enable_debug_logging(log_file: str = "pyxlaw_debug.log") -> None:
    """
    Enable debug logging with specified log file.
    """
    global debug_logger
    debug_logger = XlawDebugLogger(log_file, enabled=True)


def disable_debug_logging() -> None:
    """
    Disable debug logging.
    """
    debug_logger.disable()
