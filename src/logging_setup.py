from loguru import logger
import sys, json, time, uuid, os
from contextlib import contextmanager
from datetime import timezone
from functools import partial


def compact_json_sink(msg, stream=None):
    r = msg.record
    out = {
        "time": r["time"].astimezone(timezone.utc).isoformat(),
        "level": r["level"].name,
        "module": r["module"],
        "message": r["message"],
    }

    for k, v in r["extra"].items():
        if k not in out:
            out[k] = v

    if r["exception"]:
        out["exception"] = {
            "type": r["exception"].type.__name__,
            "message": str(r["exception"].value),
        }
    print(json.dumps(out, default=str), file=stream or sys.stdout)


def setup_logging(app_name: str, level: str = None, stream=None):
    logger.remove()  # remove default stderr sink
    logger.add(
        partial(compact_json_sink, stream=stream),
        level=level or os.getenv("LOG_LEVEL", "INFO"),
        backtrace=False,
        diagnose=False,
    )
    return logger.bind(run_id=uuid.uuid4().hex[:12], app=app_name)


# timing helper; optional OpenTelemetry histogram gets the same latency
@contextmanager
def span(name: str, hist=None, **fields):
    log = logger.bind(**fields)
    _t0 = time.perf_counter()
    log.info(f"{name}.start")
    try:
        yield log
    except Exception:
        log.exception(f"{name}.error")
        raise
    latency_ms = (time.perf_counter() - _t0) * 1000.0
    if hist is not None:
        hist.record(latency_ms, attributes={"span": name})
    log.info(f"{name}.end", latency_ms=int(latency_ms))
