"""CLI demo: deduplicate a URL list with a persistent Bloom filter.

- Step 1: open the seen-URL filter (reload from disk, or fresh from capacity).
- Step 2: stream a URL file (one URL per line, or CSV with a url column)
  through SeenUrlManager and print a summary.
- The console menu also saves the filter state and resets it.
"""

from __future__ import annotations

import csv
import os
import time
from typing import Dict, Iterable, List, Optional

import psutil

from urlbf.config import DedupSettings, configure_logging
from urlbf.manager.dedup_manager import CheckResult, SeenUrlManager
from urlbf.storage.filter_store import FilterStore

SAMPLE_URLS_TXT = "data/urls.txt"
PROGRESS_EVERY = 50_000


def _current_memory_bytes() -> int:
    """Process RSS in bytes."""
    return psutil.Process(os.getpid()).memory_info().rss


def load_urls(path: str, column: str = "url") -> List[str]:
    """Read URLs from a .csv (given column) or a plain text file, skipping blanks."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"URL list not found: {path}")

    urls: list[str] = []
    with open(path, newline="", encoding="utf-8") as f:
        if path.endswith(".csv"):
            reader = csv.DictReader(f)
            if reader.fieldnames is None or column not in reader.fieldnames:
                raise ValueError(f"column '{column}' not found in {path}")
            rows: Iterable[str] = (row.get(column) or "" for row in reader)
        else:
            rows = f
        for raw in rows:
            url = raw.strip()
            if url:
                urls.append(url)
    return urls


def open_manager(settings: DedupSettings) -> SeenUrlManager:
    store = FilterStore(settings.state_path)
    manager = SeenUrlManager.open(
        store, settings.capacity, saturation_warning=settings.saturation_warning
    )
    bloom = manager.bloom
    print(
        "[Init] filter ready: source={} m_bits={} k_hash={} truthiness={:.4f} fpr_est={:.6f}".format(
            "disk" if store.exists() else "fresh",
            bloom.bit_count, bloom.hash_count, bloom.truthiness, bloom.estimate_fpr(),
        )
    )
    return manager


def run_url_dataset(
    manager: SeenUrlManager,
    urls: Iterable[str],
    verbose: bool = False,
    max_rows: Optional[int] = None,
) -> Dict[str, int | float]:
    """Stream URLs through check_and_add and return summary counters."""

    stats: Dict[str, int | float] = {
        "total_urls": 0,
        "new_urls": 0,
        "seen_urls": 0,
    }

    start_time = time.time()
    start_mem = _current_memory_bytes()

    for idx, url in enumerate(urls, start=1):
        stats["total_urls"] += 1
        result = manager.check_and_add(url)
        if result is CheckResult.NEW:
            stats["new_urls"] += 1
        else:
            stats["seen_urls"] += 1

        if verbose:
            print(f"[Row {idx}] {url} -> {result.name}")

        if max_rows is not None and stats["total_urls"] >= max_rows:
            break

        if idx % PROGRESS_EVERY == 0:
            elapsed = max(1e-9, time.time() - start_time)
            print(
                f"[Progress] processed={idx} new={stats['new_urls']} seen={stats['seen_urls']} "
                f"throughput={idx / elapsed:,.0f} url/s truthiness={manager.bloom.truthiness:.4f}"
            )

    manager.maybe_warn_saturation()
    stats["duration_sec"] = time.time() - start_time
    stats["start_mem_bytes"] = start_mem
    stats["end_mem_bytes"] = _current_memory_bytes()
    stats["truthiness"] = manager.bloom.truthiness
    stats["estimated_fpr"] = manager.bloom.estimate_fpr()
    return stats


def print_stats(stats: Dict[str, int | float]) -> None:
    total = stats.get("total_urls", 0)
    new = stats.get("new_urls", 0)
    seen = stats.get("seen_urls", 0)
    duration = stats.get("duration_sec") or 0.0
    end_mem = stats.get("end_mem_bytes")
    start_mem = stats.get("start_mem_bytes")

    print("\n=== Summary ===")
    print(f"URLs processed: {total}")
    print(f" ├─ new (enqueued): {new}")
    print(f" └─ already seen (skipped): {seen}")

    if duration > 0 and total > 0:
        print(f"Run time: {duration:.1f}s (~{total / duration:,.0f} url/s)")
    if end_mem is not None:
        delta_txt = f" (Δ={end_mem - start_mem:+,} bytes)" if start_mem is not None else ""
        print(f"Process memory (end): {end_mem:,} bytes{delta_txt}")

    if total > 0:
        print(f"- Duplicate share ≈ {seen}/{total} ≈ {seen / total:.2%}")
    if "truthiness" in stats:
        print(f"- Filter truthiness ≈ {stats['truthiness']:.4f}")
        print(f"- Expected FPR at this load ≈ {stats['estimated_fpr']:.4%}")


def choose_dataset() -> tuple[str, str]:
    print("\nChoose a URL list to replay:")
    print(f" 1. Sample list ({SAMPLE_URLS_TXT})")
    print(" 2. Enter a path")

    choice = input("Choice [1]: ").strip() or "1"
    if choice != "2":
        if choice != "1":
            print("Invalid choice, using 1.")
        return SAMPLE_URLS_TXT, "url"

    custom = input("Path to .txt or .csv: ").strip()
    column = input("URL column for CSV [url]: ").strip() or "url"
    return custom, column


def main() -> None:
    settings = DedupSettings.from_env()
    configure_logging(settings.log_level)
    print("=== Seen-URL Bloom filter demo ===")
    manager = open_manager(settings)

    while True:
        print("\nMenu:")
        print(" 1. Replay a URL list through the filter")
        print(" 2. Save filter state")
        print(" 3. Reset filter (delete state, start fresh)")
        print(" 4. Quit")
        choice = input("Choice [1/2/3/4]: ").strip()

        if choice == "1" or choice == "":
            path, column = choose_dataset()
            try:
                urls = load_urls(path, column=column)
            except (OSError, ValueError) as exc:
                print(f"Cannot load URL list: {exc}")
                continue
            print(f"[Load] {len(urls)} URLs from {path}")
            verbose = input("Print every row? [y/N]: ").strip().lower() == "y"
            print_stats(run_url_dataset(manager, urls, verbose=verbose))
        elif choice == "2":
            manager.persist()
            print(f"Saved {manager.bloom.size_bytes:,} bytes to {settings.state_path}")
        elif choice == "3":
            manager.store.delete()
            manager = open_manager(settings)
        elif choice == "4":
            print("Bye.")
            break
        else:
            print("Invalid choice.")


if __name__ == "__main__":
    main()
