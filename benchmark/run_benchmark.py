"""
False positive benchmark for the urlbf seen-URL filter.

- Each capacity n gets a filter sized by BloomFilter.from_capacity(n)
  (target error rate 1/n)
- Insert n distinct URLs, then query 10n URLs that were never inserted
- Multiple runs, reported as mean ± std for FPR, throughput and memory (psutil RSS)
- Optional real URL list from CSV/Parquet via pandas instead of synthetic URLs
- Table via tabulate, chart via matplotlib
"""

import os
import random
import string
import time
from glob import glob
from typing import List, Optional, Set

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import psutil

from urlbf.bloom.bloom_filter import BloomFilter

CAPACITIES = [1_000, 10_000, 100_000]
QUERY_FACTOR = 10


def generate_random_url(rng: random.Random) -> str:
    path = "".join(rng.choices(string.ascii_lowercase + string.digits, k=12))
    host = "".join(rng.choices(string.ascii_lowercase, k=8))
    return f"https://{host}.example/{path}"


def load_urls(file_paths: List[str], sample_size: int, url_column: str = "url") -> Set[str]:
    """Load unique URLs from CSV or Parquet files, up to sample_size."""
    urls: Set[str] = set()
    for path in file_paths:
        print(f"  Processing {os.path.basename(path)}...")
        if path.endswith(".parquet"):
            df = pd.read_parquet(path, columns=[url_column])
        else:
            df = pd.read_csv(path, usecols=[url_column], low_memory=False)

        for url in df[url_column].dropna().astype(str).unique().tolist():
            urls.add(url)
            if len(urls) >= sample_size:
                return urls
    return urls


def prepare_sets(
    capacity: int, rng: random.Random, real_urls: Optional[Set[str]] = None
) -> tuple[List[str], List[str]]:
    """Return (inserted, absent) with len(absent) == QUERY_FACTOR * len(inserted)."""
    if real_urls and len(real_urls) >= capacity:
        inserted = rng.sample(sorted(real_urls), capacity)
    else:
        inserted_set: Set[str] = set()
        while len(inserted_set) < capacity:
            inserted_set.add(generate_random_url(rng))
        inserted = list(inserted_set)

    known = set(inserted)
    absent: List[str] = []
    while len(absent) < capacity * QUERY_FACTOR:
        url = generate_random_url(rng)
        if url not in known:
            known.add(url)
            absent.append(url)
    return inserted, absent


def benchmark_capacity(capacity: int, inserted: List[str], absent: List[str]) -> dict:
    process = psutil.Process()
    rss_before = process.memory_info().rss
    bf = BloomFilter.from_capacity(capacity)

    start_insert = time.perf_counter()
    bf.add_many(inserted)
    insert_duration = time.perf_counter() - start_insert

    start_query = time.perf_counter()
    false_positives = sum(1 for url in absent if bf.contains(url))
    query_duration = time.perf_counter() - start_query

    return {
        "fpr": false_positives / len(absent),
        "throughput_qps": len(absent) / max(query_duration, 1e-9),
        "insert_time_s": insert_duration,
        "memory_kb": (process.memory_info().rss - rss_before) / 1024,
        "filter_kb": bf.size_bytes / 1024,
        "m_bits": bf.bit_count,
        "k_hash": bf.hash_count,
        "truthiness": bf.truthiness,
    }


def run_full_benchmark(
    capacities: List[int] = CAPACITIES,
    num_runs: int = 3,
    data_paths: Optional[List[str]] = None,
    seed: int = 42,
) -> dict:
    rng = random.Random(seed)
    real_urls = None
    if data_paths:
        real_urls = load_urls(data_paths, sample_size=max(capacities))
        print(f"Loaded {len(real_urls):,} real URLs")

    summary = {}
    for capacity in capacities:
        runs = []
        for run in range(1, num_runs + 1):
            print(f"[n={capacity:,}] run {run}/{num_runs}")
            inserted, absent = prepare_sets(capacity, rng, real_urls)
            runs.append(benchmark_capacity(capacity, inserted, absent))

        fprs = [r["fpr"] for r in runs]
        throughputs = [r["throughput_qps"] for r in runs]
        memories = [r["memory_kb"] for r in runs]
        summary[capacity] = {
            "target_fpr": 1.0 / capacity,
            "m_bits": runs[0]["m_bits"],
            "k_hash": runs[0]["k_hash"],
            "filter_kb": runs[0]["filter_kb"],
            "fpr_mean": np.mean(fprs),
            "fpr_std": np.std(fprs),
            "throughput_mean": np.mean(throughputs),
            "throughput_std": np.std(throughputs),
            "memory_mean": np.mean(memories),
            "memory_std": np.std(memories),
        }

    print_results(summary, num_runs)
    plot_results(summary)
    return summary


def print_results(summary: dict, num_runs: int):
    from tabulate import tabulate

    table = []
    for capacity, s in summary.items():
        table.append([
            f"{capacity:,}",
            f"{s['m_bits']:,} / {s['k_hash']}",
            f"{s['filter_kb']:,.1f} KB",
            f"{s['target_fpr']:.4%}",
            f"{s['fpr_mean']:.4%} ± {s['fpr_std']:.4%}",
            f"{s['throughput_mean']:,.0f} ± {s['throughput_std']:,.0f} qps",
            f"{s['memory_mean']:,.0f} ± {s['memory_std']:,.0f} KB",
        ])

    print(f"\n=== RESULTS (avg ± std over {num_runs} runs) ===")
    print(tabulate(
        table,
        headers=["Capacity", "m / k", "Filter size", "Target FPR", "Observed FPR", "Throughput", "RSS delta"],
        tablefmt="github",
    ))


def plot_results(summary: dict, plot_path: str = "plots/fpr_by_capacity.png"):
    labels = [f"{c:,}" for c in summary]
    target = [summary[c]["target_fpr"] * 100 for c in summary]
    observed = [summary[c]["fpr_mean"] * 100 for c in summary]
    observed_std = [summary[c]["fpr_std"] * 100 for c in summary]
    throughput = [summary[c]["throughput_mean"] / 1000 for c in summary]
    throughput_std = [summary[c]["throughput_std"] / 1000 for c in summary]

    x = np.arange(len(labels))
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 6))

    ax1.bar(x - 0.2, target, 0.4, label="Target (1/n)", color="orange", alpha=0.8)
    ax1.bar(x + 0.2, observed, 0.4, yerr=observed_std, capsize=5, label="Observed", color="green", alpha=0.8)
    ax1.set_xticks(x, labels)
    ax1.set_xlabel("Capacity (n)")
    ax1.set_ylabel("False Positive Rate (%)")
    ax1.set_title("False Positive Rate")
    ax1.legend()

    ax2.bar(labels, throughput, yerr=throughput_std, capsize=5, color="steelblue", alpha=0.8)
    ax2.set_xlabel("Capacity (n)")
    ax2.set_ylabel("Throughput (K queries/s)")
    ax2.set_title("Query Throughput")

    plt.suptitle("Seen-URL Bloom filter: target vs observed FPR")
    plt.tight_layout()

    os.makedirs(os.path.dirname(plot_path), exist_ok=True)
    plt.savefig(plot_path, dpi=200)
    plt.close(fig)
    print(f"\nChart saved to: {plot_path}")


if __name__ == "__main__":
    # Optional: put CSV/Parquet files with a 'url' column under data/
    data_files = glob("data/*.csv") + glob("data/*.parquet")
    run_full_benchmark(data_paths=data_files or None)
