import argparse
import os
import sys
import wave
from typing import List, Optional, Tuple

import numpy as np

from pyxlaw.core import alaw, mulaw
from pyxlaw.core.loudness import calculate_lufs, calculate_rms
from pyxlaw.core.pcm import pack_samples, unpack_samples
from pyxlaw.common.errors import XlawError
from pyxlaw.common.debug_logger import enable_debug_logging

CODECS = {"mulaw": mulaw, "alaw": alaw}

LAW_EXTENSIONS = {
    ".ulaw": "mulaw",
    ".mulaw": "mulaw",
    ".ul": "mulaw",
    ".alaw": "alaw",
    ".al": "alaw",
}


def law_for_path(path: str, requested: Optional[str]) -> str:
    """Picks the companding law from --law, falling back to the file extension."""
    if requested:
        return requested
    ext = os.path.splitext(path)[1].lower()
    if ext not in LAW_EXTENSIONS:
        raise ValueError(
            f"Cannot infer companding law from '{path}', pass --law mulaw or --law alaw"
        )
    return LAW_EXTENSIONS[ext]


def deinterleave(samples: np.ndarray, n_channels: int) -> List[np.ndarray]:
    usable = len(samples) - (len(samples) % n_channels)
    return [samples[ch:usable:n_channels] for ch in range(n_channels)]


def interleave(channels: List[np.ndarray]) -> np.ndarray:
    length = min(len(ch) for ch in channels)
    out = np.empty(length * len(channels), dtype=channels[0].dtype)
    for ch, data in enumerate(channels):
        out[ch :: len(channels)] = data[:length]
    return out


def read_wav(path: str) -> Tuple[List[np.ndarray], int, int]:
    """
    Reads a PCM WAV file.

    Returns:
        (per-channel sample arrays, bit depth, frame rate)
    """
    with wave.open(path, "rb") as wav_in:
        n_channels = wav_in.getnchannels()
        samp_width = wav_in.getsampwidth()
        frame_rate = wav_in.getframerate()
        audio_bytes = wav_in.readframes(wav_in.getnframes())

    bit_depth = samp_width * 8
    if samp_width == 1:
        # 8-bit WAV data is unsigned
        samples = np.frombuffer(audio_bytes, dtype=np.uint8).astype(np.int16) - 128
    else:
        samples = unpack_samples(audio_bytes, bit_depth)
    return deinterleave(samples, n_channels), bit_depth, frame_rate


def write_wav(path: str, channels: List[np.ndarray], bit_depth: int, frame_rate: int):
    samples = interleave(channels)
    if bit_depth == 8:
        audio_bytes = (samples.astype(np.int16) + 128).astype(np.uint8).tobytes()
    else:
        audio_bytes = pack_samples(samples, bit_depth)

    with wave.open(path, "wb") as wav_out:
        wav_out.setnchannels(len(channels))
        wav_out.setsampwidth(bit_depth // 8)
        wav_out.setframerate(frame_rate)
        wav_out.writeframes(audio_bytes)


def run_encode(args: argparse.Namespace) -> int:
    law = law_for_path(args.output, args.law)
    codec = CODECS[law]
    channels, bit_depth, frame_rate = read_wav(args.input)
    rng = np.random.default_rng(args.seed)

    print(
        f"Input WAV: {len(channels)} channels, {bit_depth}-bit, {frame_rate} Hz, "
        f"{len(channels[0])} frames. Encoding to {law}."
    )
    encoded = [codec.encode(ch, bit_depth=bit_depth, rng=rng) for ch in channels]
    with open(args.output, "wb") as f_out:
        f_out.write(interleave(encoded).tobytes())
    print(f"Wrote {args.output}")
    return 0


def run_decode(args: argparse.Namespace) -> int:
    law = law_for_path(args.input, args.law)
    codec = CODECS[law]
    n_channels = args.raw_channels
    rng = np.random.default_rng(args.seed)

    with open(args.input, "rb") as f_in:
        data = np.frombuffer(f_in.read(), dtype=np.uint8)
    if len(data) % n_channels != 0:
        print(f"Warning: {len(data) % n_channels} trailing bytes ignored")

    print(
        f"Raw {law} input: '{args.input}', Channels: {n_channels}, "
        f"Sample Rate: {args.raw_samplerate} Hz, output {args.bit_depth}-bit"
    )
    decoded = [
        codec.decode(ch, bit_depth=args.bit_depth, rng=rng)
        for ch in deinterleave(data, n_channels)
    ]
    write_wav(args.output, decoded, args.bit_depth, args.raw_samplerate)
    print("Decoding complete.")
    return 0


def run_loudness(args: argparse.Namespace) -> int:
    channels, bit_depth, frame_rate = read_wav(args.input)
    for ch, samples in enumerate(channels):
        lufs = calculate_lufs(samples, bit_depth, frame_rate, gated=not args.ungated)
        rms = calculate_rms(samples, bit_depth)
        print(f"Channel {ch}: loudness {lufs:.2f} dB, RMS {rms:.2f} dB")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="G.711 companding and loudness CLI Tool")
    parser.add_argument(
        "-i",
        "--input",
        type=str,
        required=True,
        help="Path to the input file (.wav for encode/loudness; raw .ulaw or .alaw for decode)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        help="Path to the output file (raw .ulaw or .alaw for encode; .wav for decode)",
    )
    parser.add_argument(
        "-m",
        "--mode",
        type=str,
        choices=["encode", "decode", "loudness"],
        required=True,
        help="Operation mode",
    )
    parser.add_argument(
        "--law",
        type=str,
        choices=sorted(CODECS),
        help="Companding law (default: inferred from the raw file extension)",
    )
    parser.add_argument(
        "--bit-depth",
        type=int,
        choices=[8, 16, 24, 32],
        default=16,
        help="Bit depth of the decoded WAV (default: 16)",
    )
    parser.add_argument(
        "--raw-channels",
        type=int,
        default=1,
        help="Number of interleaved channels in raw companded input (default: 1)",
    )
    parser.add_argument(
        "--raw-samplerate",
        type=int,
        default=8000,
        help="Sample rate written to the decoded WAV (default: 8000 Hz)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the dither random source, for reproducible output",
    )
    parser.add_argument(
        "--ungated",
        action="store_true",
        help="Use single-pass loudness instead of block gating",
    )
    parser.add_argument(
        "--debug-log",
        type=str,
        help="Enable debug logging to specified file (e.g., --debug-log pyxlaw_debug.log)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.debug_log:
        enable_debug_logging(args.debug_log)
        print(f"Debug logging enabled to: {args.debug_log}")

    if not os.path.exists(args.input):
        print(f"Error: input file '{args.input}' does not exist")
        return 1
    if args.mode in ("encode", "decode") and not args.output:
        print(f"Error: --output is required in {args.mode} mode")
        return 1
    if args.raw_channels < 1:
        print("Error: --raw-channels must be at least 1")
        return 1

    try:
        if args.mode == "encode":
            return run_encode(args)
        if args.mode == "decode":
            return run_decode(args)
        return run_loudness(args)
    except wave.Error as e:
        print(f"Error reading WAV file: {e}")
    except XlawError as e:
        print(f"Error: {e}")
    except ValueError as e:
        print(f"Error: {e}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
