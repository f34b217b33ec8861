from core import config
from core.errors import StoreIOError
from db.sqlite import StatementExecutor

def executor(with_schema: bool = False) -> StatementExecutor:
    """요청마다 새 executor. 경로/스키마는 호출 시점 환경에서 해석"""
    schema = None
    if with_schema:
        try:
            schema = config.load_schema()
        except OSError as e:
            raise StoreIOError(str(e), {"path": config.schema_path(), "engine": type(e).__name__}) from e
    return StatementExecutor(config.store_path(), schema, timeout=config.timeout())
