# experiments.py

"""
Static Huffman coding over text: demo + experiments

Demo mode encodes one string, prints the bitstring, the code table
and the decoded text

Experiment mode runs the codec over synthetic text datasets, with repeated runs

Outputs (in --outdir):
  - metrics.csv     (raw row per run)
  - summary.csv     (grouped mean/stdev)
  - *.png           (charts)

How to run:
  python experiments.py --demo
  python experiments.py --demo --text "abracadabra"
  python experiments.py --outdir results --runs 5
  python experiments.py --outdir results --runs 3 --exp1_generators english_like,zipf_letters --no_exp2

Notes:
  Bitstrings are kept as '0'/'1' text, so "compressed_bits" is the bitstring
  length and the ratio is against 8 bits per character
"""

from __future__ import annotations

import argparse
import csv
import random
import statistics
import string
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple, Optional, Callable

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

import huffman as huff

DEMO_TEXT = "Huffman coding is a data compression algorithm."


# Utilities

def now_ns() -> int:
    return time.perf_counter_ns()

def ns_to_ms(ns: int) -> float:
    return ns / 1_000_000.0

def safe_mkdir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)

def sample_cdf(rng: random.Random, cdf: List[float]) -> int:
    r = rng.random()
    lo, hi = 0, len(cdf) - 1
    while lo < hi:
        mid = (lo + hi) // 2
        if r <= cdf[mid]:
            hi = mid
        else:
            lo = mid + 1
    return lo

def weights_to_cdf(weights: List[float]) -> List[float]:
    total = sum(weights)
    cdf = []
    acc = 0.0
    for w in weights:
        acc += w / total
        cdf.append(acc)
    return cdf


# Synthetic text generators

PRINTABLE = string.ascii_letters + string.digits + string.punctuation + " "

def gen_uniform_printable(size: int, seed: int = 0) -> str:
    rng = random.Random(seed)
    return "".join(rng.choice(PRINTABLE) for _ in range(size))

def gen_repetitive(size: int, dominant: str = "A", dom_frac: float = 0.90, seed: int = 0) -> str:
    rng = random.Random(seed)
    others = [c for c in string.ascii_letters if c != dominant]
    out = []
    for _ in range(size):
        if rng.random() < dom_frac:
            out.append(dominant)
        else:
            out.append(rng.choice(others))
    return "".join(out)

def gen_zipf_letters(size: int, s: float = 1.2, seed: int = 0) -> str:
    rng = random.Random(seed)
    letters = string.ascii_lowercase
    cdf = weights_to_cdf([1.0 / ((i + 1) ** s) for i in range(len(letters))])
    return "".join(letters[sample_cdf(rng, cdf)] for _ in range(size))

def gen_english_like(size: int, seed: int = 0) -> str:
    rng = random.Random(seed)
    chars = (
        " etaoinshrdlcumwfgypbvkjxq"
        "ETAOINSHRDLCUMWFGYPBVKJXQ"
        "\n"
    )
    weights = []
    for ch in chars:
        if ch == ' ':
            weights.append(13.0)
        elif ch == '\n':
            weights.append(1.5)
        elif ch.lower() in "etaoinshrdlu":
            weights.append(6.0)
        elif ch.lower() in "cmfwgypbvk":
            weights.append(2.5)
        else:
            weights.append(1.2)

    cdf = weights_to_cdf(weights)
    return "".join(chars[sample_cdf(rng, cdf)] for _ in range(size))

def gen_single_symbol(size: int, seed: int = 0) -> str:
    return "a" * size

GENERATOR_REGISTRY: Dict[str, Callable[[int, int], str]] = {
    "uniform_printable": lambda size, seed: gen_uniform_printable(size, seed=seed),
    "zipf_letters": lambda size, seed: gen_zipf_letters(size, s=1.2, seed=seed),
    "repetitive90": lambda size, seed: gen_repetitive(size, dominant="A", dom_frac=0.90, seed=seed),
    "repetitive99": lambda size, seed: gen_repetitive(size, dominant="A", dom_frac=0.99, seed=seed),
    "english_like": lambda size, seed: gen_english_like(size, seed=seed),
    "single_symbol": lambda size, seed: gen_single_symbol(size, seed=seed),
}

def generate_dataset(name: str, size: int, seed: int) -> Tuple[str, str]:
    """
    Helper: if a dataset name is not recognized, we fall back to uniform_printable
    so the run does not fail completely
    """
    fn = GENERATOR_REGISTRY.get(name)
    if fn is None:
        return f"{name}_fallback_uniform_printable", gen_uniform_printable(size, seed=seed)
    return name, fn(size, seed)


# Experiment runner

@dataclass
class MetricRow:
    exp_name: str
    dataset_name: str
    text_chars: int
    run_id: int
    unique_symbols: int

    build_ms: float
    encode_ms: float
    decode_ms: float
    total_ms: float

    compressed_bits: int
    compression_ratio: float
    avg_code_length: float
    entropy_bits: float

    correctness_ok: int  # 1 or 0


def run_one(text: str, max_count: Optional[int] = None) -> MetricRow:
    # Build: count + tree + code table
    t0 = now_ns()
    ft = huff.frequency_table(text, max_count=max_count)
    root = huff.build_huffman_tree(ft)
    code_map = huff.generate_huffman_codes(root)
    t1 = now_ns()
    build_ms = ns_to_ms(t1 - t0)

    # encode
    t2 = now_ns()
    bits = huff.encode_with_codes(text, code_map)
    t3 = now_ns()
    encode_ms = ns_to_ms(t3 - t2)

    # decode with the tree only
    t4 = now_ns()
    decoded = huff.huffman_decode(bits, root)
    t5 = now_ns()
    decode_ms = ns_to_ms(t5 - t4)

    return MetricRow(
        exp_name="",
        dataset_name="",
        text_chars=len(text),
        run_id=0,
        unique_symbols=len(ft),
        build_ms=build_ms,
        encode_ms=encode_ms,
        decode_ms=decode_ms,
        total_ms=build_ms + encode_ms + decode_ms,
        compressed_bits=len(bits),
        compression_ratio=len(bits) / max(1, 8 * len(text)),
        avg_code_length=huff.average_code_length(code_map, ft),
        entropy_bits=huff.entropy(ft),
        correctness_ok=1 if decoded == text else 0,
    )


def write_csv(path: Path, rows: List[MetricRow]) -> None:
    fields = list(MetricRow.__dataclass_fields__.keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fields)
        w.writeheader()
        for r in rows:
            w.writerow({k: getattr(r, k) for k in fields})


def mean_stdev(vals: List[float]) -> Tuple[float, float]:
    if len(vals) == 1:
        return vals[0], 0.0
    return statistics.mean(vals), statistics.stdev(vals)

def group_summary(rows: List[MetricRow], out_path: Path) -> None:
    """
    Group by exp_name, dataset_name, text_chars and compute mean/stdev
    """
    key_to: Dict[Tuple[str, str, int], List[MetricRow]] = {}
    for r in rows:
        key = (r.exp_name, r.dataset_name, r.text_chars)
        key_to.setdefault(key, []).append(r)

    summary_fields = [
        "exp_name","dataset_name","text_chars","n_runs",
        "compression_ratio_mean","compression_ratio_stdev",
        "avg_code_length_mean","entropy_bits_mean",
        "build_ms_mean","build_ms_stdev",
        "encode_ms_mean","encode_ms_stdev",
        "decode_ms_mean","decode_ms_stdev",
        "total_ms_mean","total_ms_stdev",
        "correctness_ok_rate"
    ]
    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=summary_fields)
        w.writeheader()
        for key, items in sorted(key_to.items()):
            exp_name, dataset_name, chars = key

            cr_m, cr_s = mean_stdev([x.compression_ratio for x in items])
            bd_m, bd_s = mean_stdev([x.build_ms for x in items])
            en_m, en_s = mean_stdev([x.encode_ms for x in items])
            de_m, de_s = mean_stdev([x.decode_ms for x in items])
            tt_m, tt_s = mean_stdev([x.total_ms for x in items])
            ok_rate = sum(x.correctness_ok for x in items) / len(items)

            w.writerow({
                "exp_name": exp_name,
                "dataset_name": dataset_name,
                "text_chars": chars,
                "n_runs": len(items),
                "compression_ratio_mean": cr_m,
                "compression_ratio_stdev": cr_s,
                "avg_code_length_mean": statistics.mean(x.avg_code_length for x in items),
                "entropy_bits_mean": statistics.mean(x.entropy_bits for x in items),
                "build_ms_mean": bd_m,
                "build_ms_stdev": bd_s,
                "encode_ms_mean": en_m,
                "encode_ms_stdev": en_s,
                "decode_ms_mean": de_m,
                "decode_ms_stdev": de_s,
                "total_ms_mean": tt_m,
                "total_ms_stdev": tt_s,
                "correctness_ok_rate": ok_rate,
            })


# Plotting

def plot_experiment_1(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp1_distribution"]
    if not exp_rows:
        return

    datasets = sorted(set(r.dataset_name for r in exp_rows))

    def mean_for(dataset: str, field: str) -> float:
        vals = [getattr(r, field) for r in exp_rows if r.dataset_name == dataset]
        return statistics.mean(vals) if vals else float("nan")

    x = list(range(len(datasets)))

    plt.figure()
    plt.plot(x, [mean_for(d, "compression_ratio") for d in datasets], marker="o")
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Huffman Bits / (8 * Characters)")
    plt.title("Experiment 1: Compression Ratio by Distribution")
    plt.tight_layout()
    plt.savefig(outdir / "exp1_compression_ratio.png", dpi=200)
    plt.close()

    plt.figure()
    plt.plot(x, [mean_for(d, "avg_code_length") for d in datasets], marker="o", label="avg code length")
    plt.plot(x, [mean_for(d, "entropy_bits") for d in datasets], marker="s", label="entropy")
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Bits per Symbol")
    plt.title("Experiment 1: Code Length vs Entropy")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "exp1_code_length.png", dpi=200)
    plt.close()


def plot_experiment_2(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp2_size_scaling"]
    if not exp_rows:
        return

    distributions = sorted(set(r.dataset_name for r in exp_rows))

    for dist in distributions:
        dist_rows = [r for r in exp_rows if r.dataset_name == dist]
        sizes = sorted(set(r.text_chars for r in dist_rows))

        def mean_size(size: int, field: str) -> float:
            vals = [getattr(r, field) for r in dist_rows if r.text_chars == size]
            return statistics.mean(vals) if vals else float("nan")

        plt.figure()
        plt.plot(sizes, [mean_size(s, "encode_ms") for s in sizes], marker="o", label="encode")
        plt.plot(sizes, [mean_size(s, "decode_ms") for s in sizes], marker="s", label="decode")
        plt.xlabel("Text Size (characters)")
        plt.ylabel("Time (ms)")
        plt.title(f"Experiment 2: Encode/Decode Time vs Size ({dist})")
        plt.legend()
        plt.tight_layout()
        plt.savefig(outdir / f"exp2_time_{dist}.png", dpi=200)
        plt.close()


# Demo

def run_demo(text: str, max_count: Optional[int] = None) -> int:
    try:
        bits, root = huff.huffman_encode(text, max_count=max_count)
        decoded = huff.huffman_decode(bits, root)
    except huff.HuffmanError as exc:
        print(f"[error] {type(exc).__name__}: {exc}")
        return 1

    print(f"compressed string: {bits!r}\n")
    for symbol, code in sorted(huff.generate_huffman_codes(root).items(), key=lambda kv: (len(kv[1]), kv[1])):
        print(f"  {symbol!r:>6} -> {code}")
    print(f"\n{len(text)} chars -> {len(bits)} bits ({len(bits) / (8 * len(text)):.3f} of 8-bit)")
    print(f"decoded: {decoded}")
    return 0


# Main

def parse_csv_list(s: str) -> List[str]:
    return [x.strip() for x in s.split(",") if x.strip()]

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Static Huffman coding demo and experiments")
    ap.add_argument("--demo", action="store_true", help="Encode/decode one string and print the result")
    ap.add_argument("--text", type=str, default=None, help="Text for demo mode (implies --demo)")
    ap.add_argument("--max_count", type=int, default=None,
                    help="Per-symbol counter bound (255 = 8-bit counter); default unbounded")

    ap.add_argument("--outdir", type=str, default="results", help="Output directory for CSV and plots")
    ap.add_argument("--runs", type=int, default=5, help="Repetitions per configuration (>=3 recommended for timing)")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")

    # Experiment toggles
    ap.add_argument("--no_exp1", action="store_true", help="Disable experiment 1 (distribution)")
    ap.add_argument("--no_exp2", action="store_true", help="Disable experiment 2 (size scaling)")

    # Experiment 1 controls
    ap.add_argument("--exp1_size_kb", type=int, default=64, help="Experiment 1 fixed text size in K characters")
    ap.add_argument("--exp1_generators", type=str,
                    default="uniform_printable,zipf_letters,repetitive90,english_like,single_symbol",
                    help="Comma-separated dataset generator names for experiment 1")

    # Experiment 2 controls
    ap.add_argument("--exp2_min_kb", type=int, default=1, help="Experiment 2 min size in K characters (power-of-two growth)")
    ap.add_argument("--exp2_max_kb", type=int, default=256, help="Experiment 2 max size in K characters (power-of-two growth)")
    ap.add_argument("--exp2_generators", type=str, default="uniform_printable,english_like",
                    help="Comma-separated dataset generator names for experiment 2")
    return ap

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.demo or args.text is not None:
        return run_demo(DEMO_TEXT if args.text is None else args.text, max_count=args.max_count)

    outdir = Path(args.outdir)
    safe_mkdir(outdir)

    rows: List[MetricRow] = []

    def collect(exp_name: str, gen_name: str, size: int, run_id: int, seed: int) -> None:
        dataset_name, text = generate_dataset(gen_name, size, seed)
        try:
            row = run_one(text, max_count=args.max_count)
        except huff.HuffmanError as exc:
            print(f"[warn] {dataset_name} ({size} chars) failed: {exc}")
            return
        row.exp_name = exp_name
        row.dataset_name = dataset_name
        row.run_id = run_id
        rows.append(row)

    # Experiment 1: distributions (fixed size)
    if not args.no_exp1:
        fixed_size = max(1, args.exp1_size_kb) * 1024
        for gen_name in parse_csv_list(args.exp1_generators):
            for run_id in range(1, args.runs + 1):
                collect("exp1_distribution", gen_name, fixed_size, run_id, args.seed + run_id)

    # Experiment 2: size scaling (multiple sizes, powers of 2)
    if not args.no_exp2:
        min_chars = max(1, args.exp2_min_kb) * 1024
        max_chars = max(1, args.exp2_max_kb) * 1024

        sizes: List[int] = []
        s = min_chars
        while s <= max_chars:
            sizes.append(s)
            s *= 2

        for gen_name in parse_csv_list(args.exp2_generators):
            for size in sizes:
                for run_id in range(1, args.runs + 1):
                    collect("exp2_size_scaling", gen_name, size, run_id, args.seed + 10_000 + size + run_id)

    if not rows:
        print("No runs completed.")
        return 1

    # Write raw and summary
    metrics_csv = outdir / "metrics.csv"
    summary_csv = outdir / "summary.csv"
    write_csv(metrics_csv, rows)
    group_summary(rows, summary_csv)

    # Plots
    plot_experiment_1(rows, outdir)
    plot_experiment_2(rows, outdir)

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    print(f"Wrote {len(rows)} rows to {metrics_csv}")
    print(f"Wrote grouped summary to {summary_csv}")
    print(f"Correctness rate across all runs: {ok_rate:.3f}")
    print("Charts saved in:", outdir.resolve())
    return 0 if ok_rate == 1.0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
