import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from core.registry import Registry
from core.interceptor import build_pipeline
from core.errors import FrameworkError
from core import telemetry
from modules.db import _store

log = logging.getLogger(__name__)

# 기동 시 스토어/스키마 보장 (INIT 액션과 동일, 여러 번 호출해도 안전)
@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        _store.executor(with_schema=True).initialize()
    except FrameworkError as fe:
        log.exception("store initialization failed: %s %s", fe.code, fe.message)
    yield

app = FastAPI(title="sqlbridge API", version="1.0.0", lifespan=lifespan)

registry = Registry()
pipeline = build_pipeline()

@app.get("/health")
async def health():
    return {"ok": True}

@app.get("/metrics")
async def metrics():
    return telemetry.snapshot()

@app.post("/run")
async def run(request: Request, name: str):
    env = None
    try:
        envelope = await request.json()
    except ValueError:
        return JSONResponse(status_code=400, content={
            "ok": False,
            "error": {"code": "ERR_SCHEMA", "message": "Body is not valid JSON"}
        })
    try:
        ctx, env = pipeline.pre(dict(request.headers), envelope, name)
        out = await registry.run(name, envelope, ctx=ctx, env=env)
        resp = JSONResponse(out)
        pipeline.finish(env, bool(out.get("ok", True)), out)
        return resp
    except FrameworkError as fe:
        pipeline.finish(env, False)
        return JSONResponse(status_code=fe.http_status, content={
            "ok": False,
            "error": {"code": fe.code, "message": fe.message, "details": fe.details}
        })
    except Exception as e:
        log.exception("unhandled error in %s", name)
        pipeline.finish(env, False)
        return JSONResponse(status_code=500, content={
            "ok": False,
            "error": {"code": "ERR_INTERNAL", "message": str(e)}
        })

if __name__ == "__main__":
    import os
    import uvicorn
    uvicorn.run("server.main:app", host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", "8000")))
