from typing import Any, Dict, List, Optional, Literal
from pydantic import BaseModel, Field, JsonValue

Mode = Literal["SINGLE", "BULK"]

class Options(BaseModel):
    continue_on_error: Optional[bool] = None

class InEnvelope(BaseModel):
    action: str
    mode: Mode = "SINGLE"
    input: Optional[Dict[str, Any]] = None
    inputs: Optional[List[Dict[str, Any]]] = None
    options: Optional[Options] = None
    request_id: Optional[str] = None

class ErrorObj(BaseModel):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

class ResultItem(BaseModel):
    ok: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[ErrorObj] = None
    index: Optional[int] = None

class OutEnvelope(BaseModel):
    ok: bool
    mode: Mode
    data: Optional[Dict[str, Any]] = None
    results: Optional[List[ResultItem]] = None
    error: Optional[ErrorObj] = None
    partial_ok: Optional[bool] = None

    def dump(self) -> Dict[str, Any]:
        # 최상위 키만 정리. data 안의 None(NULL 컬럼)은 유지
        return {k: v for k, v in self.model_dump().items() if v is not None}

# 액션 입력
class Statement(BaseModel):
    sql: str
    params: List[JsonValue] = Field(default_factory=list)

class ConfigKey(BaseModel):
    key: str

class ConfigEntry(BaseModel):
    key: str
    value: str
