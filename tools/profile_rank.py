# tools/profile_rank.py
"""
Small profiling harness for AutoCompleter.handle_request.
Usage:
  python tools/profile_rank.py --warm 100 --iters 1000 --budget 10

Prints mean/median/std latency per context fragment and flags fragments whose
worst case goes over the budget.
"""
import argparse
import statistics
import time

from snippet_autocompleter.core.autocompleter import AutoCompleter
from snippet_autocompleter.core.protocols import CompletionRequest
from snippet_autocompleter.host import LocalHost
from snippet_autocompleter.utils.settings_store import MemorySettingsStore

# cursor contexts covering every detector branch
FRAGMENTS = [
    "",
    'local Players = game:GetService("',
    "local part = workspace.Part\npart.Touched:Connect(",
    "print(1)\nfor ",
    'local p = Instance.new("',
    "remote.OnServerEvent:",
    "local function update()\n\tlocal t = {\n\t\tpro",
    "x = 1\n" * 200 + "ser",
]


def measure(engine, fragment, warm, iters):
    request = CompletionRequest(text_before=fragment)
    for _ in range(warm):
        engine.handle_request(request)
    latencies = []
    for _ in range(iters):
        t0 = time.perf_counter()
        engine.handle_request(request)
        latencies.append((time.perf_counter() - t0) * 1000.0)  # ms
    return latencies


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--warm", type=int, default=50, help="warmup iterations")
    parser.add_argument("--iters", type=int, default=500, help="measured iterations")
    parser.add_argument("--budget", type=float, default=10.0, help="latency target in ms")
    args = parser.parse_args()

    # budget far above target so the timer does not log every call
    engine = AutoCompleter(LocalHost(), MemorySettingsStore(), budget_ms=1e9)
    over = 0
    for fragment in FRAGMENTS:
        lat = measure(engine, fragment, args.warm, args.iters)
        label = repr(fragment[-30:])
        flag = "  OVER BUDGET" if max(lat) > args.budget else ""
        over += bool(flag)
        print("%-34s mean=%.3f median=%.3f stdev=%.3f max=%.3f%s" % (
            label,
            statistics.mean(lat),
            statistics.median(lat),
            statistics.pstdev(lat),
            max(lat),
            flag,
        ))
    print(f"{len(FRAGMENTS) - over}/{len(FRAGMENTS)} contexts within {args.budget:g}ms")


if __name__ == "__main__":
    main()
