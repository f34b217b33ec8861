import os

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
DEFAULT_DB_URL = "sqlite:///data/app.db"
DEFAULT_SCHEMA = os.path.join(ROOT, "db", "schema.sql")

def _parse_db_url() -> str:
    url = os.getenv("DB_URL", "").strip() or DEFAULT_DB_URL
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "", 1)
    # For now only sqlite is supported
    raise RuntimeError("Only sqlite DB_URL is supported. Use format sqlite:///data/app.db")

def data_dir() -> str:
    return os.path.abspath(os.getenv("APP_DATA_DIR", "").strip() or ROOT)

def store_path() -> str:
    p = _parse_db_url()
    if os.path.isabs(p):
        return p
    return os.path.join(data_dir(), p)

def schema_path() -> str:
    return os.getenv("DB_SCHEMA", "").strip() or DEFAULT_SCHEMA

def load_schema() -> str:
    with open(schema_path(), "r", encoding="utf-8") as f:
        return f.read()

DEFAULT_TIMEOUT = 5.0

def timeout() -> float:
    raw = os.getenv("DB_TIMEOUT", "").strip()
    try:
        return float(raw) if raw else DEFAULT_TIMEOUT
    except ValueError:
        # 잘못된 값은 기본값으로
        return DEFAULT_TIMEOUT
