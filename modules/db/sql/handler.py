from typing import Dict, Any, List
from core.contract import OutEnvelope, ResultItem, ErrorObj, Statement
from core.errors import FrameworkError
from modules.db import _store

def _init() -> Dict[str, Any]:
    ex = _store.executor(with_schema=True)
    ex.initialize()
    return {"ok": True, "db_path": ex.db_path}

def _bulk_execute(envelope: Dict[str, Any]) -> OutEnvelope:
    opts = envelope.get("options") or {}
    cont = bool(opts.get("continue_on_error", False))
    items = envelope.get("inputs") or []
    ex = _store.executor()
    results: List[ResultItem] = []
    ok_count = 0
    for idx, item in enumerate(items):
        stmt = Statement.model_validate(item)
        try:
            ex.run_command(stmt.sql, stmt.params)
        except FrameworkError as fe:
            results.append(ResultItem(ok=False, index=idx,
                                      error=ErrorObj(code=fe.code, message=fe.message, details=fe.details)))
            if not cont:
                break
            continue
        results.append(ResultItem(ok=True, data={"ok": True}, index=idx))
        ok_count += 1
    return OutEnvelope(ok=ok_count == len(items), mode="BULK", results=results,
                       partial_ok=0 < ok_count < len(items))

async def run(envelope: Dict[str, Any], ctx=None, env=None) -> Dict[str, Any]:
    act = envelope.get("action")
    mode = envelope.get("mode", "SINGLE")

    if act == "INIT":
        return OutEnvelope(ok=True, mode="SINGLE", data=_init()).dump()

    if act == "QUERY":
        stmt = Statement.model_validate(envelope.get("input") or {})
        rows = _store.executor().run_query(stmt.sql, stmt.params)
        return OutEnvelope(ok=True, mode="SINGLE", data={"rows": rows}).dump()

    if act == "EXECUTE":
        if mode == "BULK":
            return _bulk_execute(envelope).dump()
        stmt = Statement.model_validate(envelope.get("input") or {})
        _store.executor().run_command(stmt.sql, stmt.params)
        return OutEnvelope(ok=True, mode="SINGLE", data={"ok": True}).dump()

    return {"ok": False, "mode": "SINGLE", "error": {"code": "ERR_SCHEMA", "message": "unsupported action"}}
