import json
import importlib
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
import yaml
from jsonschema import validate as jsonschema_validate, ValidationError

from .errors import err_schema, err_internal, err_unsupported_mode

class Registry:
    def __init__(self, modules_root: Path | None = None):
        self.modules_root = Path(modules_root or Path(__file__).resolve().parent.parent / "modules")
        self._handlers: Dict[str, Any] = {}
        self._manifests: Dict[str, Dict[str, Any]] = {}
        self._schemas: Dict[Tuple[str, str], Dict[str, Any]] = {}  # (module, action)

    def _module_dir(self, module_name: str) -> Path:
        parts = module_name.split(".")
        if parts[0] != "modules" or len(parts) < 2:
            raise err_schema(f"module name must start with 'modules.': {module_name}")
        return self.modules_root.joinpath(*parts[1:])

    def _load_manifest(self, module_name: str) -> Dict[str, Any]:
        if module_name in self._manifests:
            return self._manifests[module_name]
        moddir = self._module_dir(module_name)
        mani_path = moddir / "manifest.yaml"
        if not mani_path.exists():
            raise err_schema(f"Unknown module {module_name}")
        mani = yaml.safe_load(mani_path.read_text(encoding="utf-8"))
        for k in ("name", "version", "actions"):
            if k not in mani:
                raise err_internal(f"manifest missing {k}", {"module": module_name})
        if mani["name"] != module_name:
            raise err_internal(f"manifest name mismatch: {mani['name']} != {module_name}")
        # preload input schemas
        for act, spec in mani.get("actions", {}).items():
            in_schema_path = (spec or {}).get("input_schema")
            if in_schema_path:
                self._schemas[(module_name, act)] = json.loads((moddir / in_schema_path).read_text(encoding="utf-8"))
        self._manifests[module_name] = mani
        return mani

    def _load_handler(self, module_name: str):
        if module_name in self._handlers:
            return self._handlers[module_name]
        handler_mod_name = f"{module_name}.handler"
        try:
            mod = importlib.import_module(handler_mod_name)
        except Exception as e:
            raise err_internal(f"Failed to import handler for {module_name}: {e}")
        if not hasattr(mod, "run") or not callable(getattr(mod, "run")):
            raise err_internal(f"{handler_mod_name} has no 'run' callable")
        self._handlers[module_name] = mod
        return mod

    async def run(self, module_name: str, envelope: Dict[str, Any], ctx: Optional[Dict[str, Any]] = None, env: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        mani = self._load_manifest(module_name)
        handler = self._load_handler(module_name)

        action = envelope.get("action")
        mode = envelope.get("mode", "SINGLE")
        if action not in mani.get("actions", {}):
            raise err_schema(f"Unknown action '{action}' for {module_name}")
        supported_modes = (mani["actions"][action] or {}).get("modes", ["SINGLE"])
        if mode not in supported_modes:
            raise err_unsupported_mode(f"Action '{action}' does not support mode '{mode}' for {module_name}")

        sch_in = self._schemas.get((module_name, action))
        try:
            if sch_in is not None:
                if mode == "SINGLE":
                    jsonschema_validate(envelope.get("input") or {}, sch_in)
                else:
                    for item in envelope.get("inputs") or []:
                        jsonschema_validate(item, sch_in)
        except ValidationError as ve:
            raise err_schema("Input schema validation failed", {"error": ve.message})

        return await handler.run(envelope, ctx=ctx, env=env)
