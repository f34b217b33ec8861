import time
import uuid
from typing import Dict, Tuple, Any, Optional
from pydantic import ValidationError

from core.contract import InEnvelope
from . import telemetry
from .errors import err_schema

class Pipeline:
    """요청 전/후 공통 처리: request id, 봉투 검증, 텔레메트리."""

    def pre(self, headers: Dict[str, str], payload: Any, module_name: str) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        if not isinstance(payload, dict):
            raise err_schema("Envelope must be a JSON object")
        try:
            envelope = InEnvelope.model_validate(payload)
        except ValidationError as ve:
            raise err_schema("Invalid envelope", {"error": str(ve)})
        # 헤더 키는 소문자로 들어온다 (starlette)
        lowered = {k.lower(): v for k, v in headers.items()}
        req_id = envelope.request_id or lowered.get("x-request-id") or str(uuid.uuid4())
        ctx = {"request_id": req_id}
        env = {"start_ts": time.time(), "module": module_name, "action": envelope.action, "mode": envelope.mode}
        return ctx, env

    def finish(self, env: Optional[Dict[str, Any]], ok: bool, out: Optional[Dict[str, Any]] = None):
        if not env or env.get("start_ts") is None:
            return
        dur_ms = (time.time() - env["start_ts"]) * 1000.0
        rows = len(((out or {}).get("data") or {}).get("rows") or [])
        telemetry.record(env["module"], env["action"], ok, dur_ms, rows=rows)

def build_pipeline() -> Pipeline:
    return Pipeline()
