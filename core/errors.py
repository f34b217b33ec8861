from typing import Any, Optional, Dict

class FrameworkError(Exception):
    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None, http_status: int = 400):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.http_status = http_status

# 저장소 계열 오류: 엔진 메시지를 그대로 message 에 담는다
class StoreIOError(FrameworkError):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("ERR_IO", message, details, 500)

class SchemaError(FrameworkError):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("ERR_DB_SCHEMA", message, details, 500)

class StoreConnectionError(FrameworkError):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("ERR_DB_CONNECTION", message, details, 503)

class QueryError(FrameworkError):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("ERR_QUERY", message, details, 400)

def err_schema(msg: str, details: Optional[Dict[str, Any]] = None) -> FrameworkError:
    return FrameworkError("ERR_SCHEMA", msg, details, 400)

def err_unsupported_mode(msg: str, details: Optional[Dict[str, Any]] = None) -> FrameworkError:
    return FrameworkError("ERR_UNSUPPORTED_MODE", msg, details, 400)

def err_internal(msg: str, details: Optional[Dict[str, Any]] = None) -> FrameworkError:
    return FrameworkError("ERR_INTERNAL", msg, details, 500)
