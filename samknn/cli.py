"""Command line: classify a dataset directory and write predictions and runtime."""

from __future__ import annotations

import sys
import time
from collections.abc import Iterable, Sequence
from pathlib import Path

from .config import Config
from .model import SAMkNN

USAGE = "Usage: samknn <IN_DIR> <OUT_DIR> <N_BITS>"
_WORD_MASK = 0xFFFFFFFF


def _read_count(path: Path) -> int:
    tokens = path.read_text().split()
    if not tokens:
        raise ValueError(f"{path} is empty")
    return int(tokens[0])


def load_dataset(
    in_dir: str | Path, n_bits: int
) -> tuple[list[tuple[int, ...]], list[int]]:
    """Read ``.DIMS``, ``.SAMPLES``, ``data`` and ``labels`` from ``in_dir``.

    Each data value is scaled by ``2 ** n_bits`` and truncated to an integer.
    """
    if n_bits < 0:
        raise ValueError("n_bits must not be negative")
    base = Path(in_dir)
    n_dims = _read_count(base / ".DIMS")
    n_samples = _read_count(base / ".SAMPLES")
    if n_dims < 1 or n_samples < 0:
        raise ValueError("invalid dataset dimensions")

    values = (base / "data").read_text().split()
    label_tokens = (base / "labels").read_text().split()
    if len(values) < n_samples * n_dims:
        raise ValueError(
            f"data holds {len(values)} values, expected {n_samples * n_dims}"
        )
    if len(label_tokens) < n_samples:
        raise ValueError(f"labels holds {len(label_tokens)} values, expected {n_samples}")

    scale = 1 << n_bits
    scaled = [int(float(v) * scale) & _WORD_MASK for v in values[: n_samples * n_dims]]
    points = [
        tuple(scaled[start : start + n_dims])
        for start in range(0, n_samples * n_dims, n_dims)
    ]
    labels = [int(token) & _WORD_MASK for token in label_tokens[:n_samples]]
    return points, labels


def write_results(
    out_dir: str | Path, predictions: Iterable[int], runtime_ms: int
) -> None:
    """Write one prediction per line to ``predictions`` and the runtime to ``runtime``."""
    base = Path(out_dir)
    with (base / "predictions").open("w") as out:
        out.writelines(f"{p}\n" for p in predictions)
    (base / "runtime").write_text(f"{runtime_ms}\n")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the classifier over a dataset directory; return the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 3:
        print(USAGE)
        return -1
    in_dir, out_dir, n_bits_text = args

    try:
        n_bits = int(n_bits_text)
        points, labels = load_dataset(in_dir, n_bits)
        if points:
            config = Config(datapoint_bits=n_bits, n_datapoint_dimensions=len(points[0]))
        else:
            config = Config(datapoint_bits=n_bits)
        model = SAMkNN(config)

        time_begin = time.perf_counter()
        predictions = model.run(points, labels)
        time_end = time.perf_counter()

        print("Writing Results...")
        write_results(out_dir, predictions, int((time_end - time_begin) * 1000))
    except (OSError, ValueError) as exc:
        print(f"Exception: {exc}", file=sys.stderr)
        return -1
    return 0


if __name__ == "__main__":
    sys.exit(main())