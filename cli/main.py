"""CLI entry point for generator demo runs."""

from __future__ import annotations

import argparse
from datetime import datetime, timezone
from pathlib import Path
import platform
import shutil
import tempfile
import time

import numpy as np
from biski64.bench import GeneratorBenchmark, bench_stream_bank
from biski64.config import (
    DEFAULT_BITMAP_WIDTH,
    DEFAULT_COUNT,
    DEFAULT_STREAMS,
    BitmapConfig,
    QualityConfig,
    RunConfig,
)
from biski64.core import seed
from biski64.derive import bits_bitmap_u8
from biski64.distributions import random_hex_string, random_u64_array
from biski64.io import (
    move_tree_contents,
    resolve_output_dir,
    safe_clean_output_dir,
    write_json,
    write_outputs_npy,
    write_png_u8,
)
from biski64.metrics import quality_report
from biski64.seed import SeedParseError, parse_seed
from biski64.streams import StreamFamily


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="biski64 generator demo and quality report")
    parser.add_argument("--seed", required=True, help="Seed as decimal, 0x-hex, or a phrase (e.g. misty-forge)")
    parser.add_argument("--out", default="out", help="Output root directory")
    parser.add_argument("--count", type=int, default=DEFAULT_COUNT, help="Single-stream outputs to draw")
    parser.add_argument("--streams", type=int, default=DEFAULT_STREAMS, help="Number of partitioned streams")
    parser.add_argument("--stream-steps", type=int, default=16, help="Outputs to draw from every stream")
    parser.add_argument("--bitmap-width", type=int, default=DEFAULT_BITMAP_WIDTH, help="Bitmap row width in bits")
    parser.add_argument(
        "--quality-samples",
        type=int,
        default=QualityConfig().sample_count,
        help="Samples per uniformity check in the quality report",
    )
    parser.add_argument("--overwrite", action="store_true", help="Overwrite files in existing output directory")
    parser.add_argument(
        "--json",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Write metadata JSON files",
    )
    parser.add_argument(
        "--bench",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Time next_u64 and the stream bank",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        parsed_seed = parse_seed(args.seed)
    except SeedParseError as exc:
        parser.error(str(exc))

    if args.count < 1:
        parser.error("--count must be >= 1")
    if args.streams < 1:
        parser.error("--streams must be >= 1")
    if args.stream_steps < 1:
        parser.error("--stream-steps must be >= 1")
    if args.bitmap_width < 1 or args.count * 64 < args.bitmap_width:
        parser.error("--bitmap-width must be positive and at most 64 * --count")
    if args.quality_samples < 2:
        parser.error("--quality-samples must be >= 2")

    config = RunConfig(
        count=args.count,
        streams=args.streams,
        stream_steps=args.stream_steps,
        quality=QualityConfig(
            sample_count=args.quality_samples,
            gaussian_samples=max(2, args.quality_samples // 5),
        ),
        bitmap=BitmapConfig(width_bits=args.bitmap_width),
    )
    family = StreamFamily(parsed_seed.value, config.streams)

    generation_start = time.perf_counter()
    state = seed(parsed_seed.value)
    outputs = random_u64_array(state, config.count)
    stream_outputs = family.bank().take(config.stream_steps)
    hex_sample = random_hex_string(family.fork("hex").state(0), 32)
    generation_seconds = time.perf_counter() - generation_start

    quality_start = time.perf_counter()
    report = quality_report(family.fork("quality").state(0), config.quality)
    quality_seconds = time.perf_counter() - quality_start

    bench_results = []
    if args.bench:
        bench_results.append(GeneratorBenchmark(seed(parsed_seed.value), config.bench).run())
        bench_results.append(bench_stream_bank(family.bank(), config.bench))

    bitmap = bits_bitmap_u8(outputs, width_bits=config.bitmap.width_bits, max_rows=config.bitmap.max_rows)

    out_dir = resolve_output_dir(
        args.out,
        parsed_seed.canonical,
        config.count,
        config.streams,
        overwrite=args.overwrite,
    )

    stage_dir = Path(tempfile.mkdtemp(prefix=".staging-", dir=str(out_dir.parent)))
    try:
        write_outputs_npy(stage_dir / "outputs.npy", outputs)
        write_outputs_npy(stage_dir / "streams.npy", stream_outputs)
        write_png_u8(stage_dir / "bits.png", bitmap)
        if args.json:
            timestamp = datetime.now(timezone.utc).isoformat()
            deterministic_meta = {
                "canonical_seed": parsed_seed.canonical,
                "seed_kind": parsed_seed.kind,
                "seed_value": parsed_seed.value,
                "count": config.count,
                "streams": config.streams,
                "config": config.to_dict(),
                "first_outputs": [int(v) for v in outputs[:5]],
                "stream_first_outputs": [int(v) for v in stream_outputs[0]],
                "hex_sample": hex_sample,
                "quality": {
                    "passed": report.passed,
                    "bounded_chi_square": report.bounded.chi_square,
                    "bounded_p_value": report.bounded.p_value,
                    "double_chi_square": report.doubles.chi_square,
                    "double_p_value": report.doubles.p_value,
                    "bit_max_deviation": report.bits.max_deviation,
                    "gaussian_mean": report.gaussian.mean,
                    "gaussian_std": report.gaussian.std,
                },
            }
            meta = {
                **deterministic_meta,
                "generated_at_utc": timestamp,
                "original_seed": parsed_seed.original,
                "generation_seconds": generation_seconds,
                "quality_seconds": quality_seconds,
                "bench": [result.to_dict() for result in bench_results],
                "python_version": platform.python_version(),
                "numpy_version": np.__version__,
            }
            write_json(stage_dir / "deterministic_meta.json", deterministic_meta)
            write_json(stage_dir / "meta.json", meta)

        safe_clean_output_dir(
            out_dir,
            out_root=Path(args.out),
            project_root=Path.cwd(),
        )
        move_tree_contents(stage_dir, out_dir)
    finally:
        shutil.rmtree(stage_dir, ignore_errors=True)

    print(f"Generated outputs: {out_dir}")
    print(f"Seed {parsed_seed.canonical} ({parsed_seed.kind}) -> {parsed_seed.value}")
    print("First outputs: " + ", ".join(str(int(v)) for v in outputs[:5]))
    for index, value in enumerate(stream_outputs[0]):
        print(f"  Stream {index}: {int(value)}")
    print(
        "Quality: "
        f"bounded p={report.bounded.p_value:.4f}, "
        f"double p={report.doubles.p_value:.4f}, "
        f"bit deviation={report.bits.max_deviation:.4f}, "
        f"gaussian mean={report.gaussian.mean:.4f} std={report.gaussian.std:.4f}, "
        f"{'PASS' if report.passed else 'FAIL'}"
    )
    for result in bench_results:
        print(f"Throughput {result.name}: {result.calls_per_second / 1e6:.2f} M outputs/s")
    print(f"Generation time: {generation_seconds:.3f} s")
    file_count = sum(1 for child in out_dir.iterdir() if child.is_file())
    print(f"Output files: {file_count}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
