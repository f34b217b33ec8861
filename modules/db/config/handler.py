from typing import Dict, Any, Optional
from core.contract import OutEnvelope, ConfigKey, ConfigEntry
from modules.db import _store

SETUP_KEY = "setup_completed"

def get_value(key: str) -> Optional[Any]:
    rows = _store.executor().run_query("SELECT value FROM app_config WHERE key = ?", [key])
    return rows[0]["value"] if rows else None

def set_value(key: str, value: str):
    _store.executor().run_command(
        """INSERT INTO app_config (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP)
           ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP""",
        [key, value],
    )

def setup_completed() -> bool:
    # 'true' 텍스트는 읽을 때 JSON true 로 복원된다
    return get_value(SETUP_KEY) in (True, "true")

async def run(envelope: Dict[str, Any], ctx=None, env=None) -> Dict[str, Any]:
    act = envelope.get("action")
    body = envelope.get("input") or {}

    if act == "GET":
        k = ConfigKey.model_validate(body)
        return OutEnvelope(ok=True, mode="SINGLE", data={"key": k.key, "value": get_value(k.key)}).dump()

    if act == "SET":
        e = ConfigEntry.model_validate(body)
        set_value(e.key, e.value)
        return OutEnvelope(ok=True, mode="SINGLE", data={"ok": True}).dump()

    if act == "SETUP_STATUS":
        return OutEnvelope(ok=True, mode="SINGLE", data={"completed": setup_completed()}).dump()

    if act == "SETUP_COMPLETE":
        set_value(SETUP_KEY, "true")
        return OutEnvelope(ok=True, mode="SINGLE", data={"ok": True}).dump()

    return {"ok": False, "mode": "SINGLE", "error": {"code": "ERR_SCHEMA", "message": "unsupported action"}}
