# 경량 텔레메트리(프로세스 내)
import time
from collections import defaultdict, deque

_METRICS = {
    "calls": defaultdict(int),           # key: f"{module}:{action}"
    "ok": defaultdict(int),
    "fail": defaultdict(int),
    "rows": defaultdict(int),            # QUERY 로 반환된 행 수 누적
    "latency_ms": defaultdict(lambda: deque(maxlen=200)),  # 최근 200개
}

def record(module: str, action: str, ok: bool, ms: float, rows: int = 0):
    key = f"{module}:{action}"
    _METRICS["calls"][key] += 1
    if ok: _METRICS["ok"][key] += 1
    else:  _METRICS["fail"][key] += 1
    _METRICS["rows"][key] += rows
    _METRICS["latency_ms"][key].append(ms)

def reset():
    for series in _METRICS.values():
        series.clear()

def _perc(lat_sorted, p):
    if not lat_sorted: return None
    i = int(len(lat_sorted)*p)
    i = min(max(i, 0), len(lat_sorted)-1)
    return lat_sorted[i]

def snapshot():
    out = []
    for key, calls in _METRICS["calls"].items():
        lat = list(_METRICS["latency_ms"][key])
        lat_sorted = sorted(lat)
        out.append({
            "key": key,
            "calls": calls,
            "ok": _METRICS["ok"][key],
            "fail": _METRICS["fail"][key],
            "rows": _METRICS["rows"][key],
            "p50_ms": _perc(lat_sorted, 0.50),
            "p95_ms": _perc(lat_sorted, 0.95),
            "last_ms": lat[-1] if lat else None,
        })
    return {"ts": time.time(), "series": sorted(out, key=lambda x: x["key"])}
