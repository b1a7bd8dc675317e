"""
core.db.value_codec
-------------------

宿主值与 pipeline 线上带类型值（TypedValue）之间的互转。

规则：
- 整数与浮点数在线上一律以字符串传输，避免 JSON 数字的精度损失；
- 二进制以 base64 字符串承载，接收时还原为 bytes；
- 无法识别的单元格结构降级为 None，而不是报错。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union
import base64
import binascii
import math

from core.logger import get_logger

_logger = get_logger(__name__)

NULL = "null"
INTEGER = "integer"
FLOAT = "float"
TEXT = "text"
BLOB = "blob"

VALUE_TYPES = (NULL, INTEGER, FLOAT, TEXT, BLOB)

SqlParam = Union[None, bool, int, float, str, bytes, bytearray, "TypedValue"]


@dataclass(frozen=True)
class TypedValue:
    """
    单个参数的线上表示。

    type 为 VALUE_TYPES 之一；blob 使用 base64 字段，其余类型（null 除外）使用 value 字段。
    """

    type: str
    value: Optional[str] = None
    base64: Optional[str] = None

    def __post_init__(self) -> None:
        if self.type not in VALUE_TYPES:
            raise ValueError(f"未知的值类型：{self.type!r}")
        if self.type == BLOB and self.base64 is None:
            raise ValueError("blob 类型必须提供 base64 字段。")
        if self.type in (INTEGER, FLOAT, TEXT) and self.value is None:
            raise ValueError(f"{self.type} 类型必须提供 value 字段。")

    def to_wire(self) -> Dict[str, str]:
        out = {"type": self.type}
        if self.type == BLOB:
            out["base64"] = self.base64  # type: ignore[assignment]
        elif self.type != NULL:
            out["value"] = self.value  # type: ignore[assignment]
        return out


def encode_value(value: SqlParam) -> TypedValue:
    """
    将宿主值编码为 TypedValue。

    输入：
        value: None / bool / int / float / str / bytes，或已构造好的 TypedValue。
    输出：
        TypedValue。bool 按 SQLite 惯例编码为整数 1/0。
    异常：
        TypeError: 其他类型一律拒绝，由调用方自行转换（如 date 先格式化为 str）；
        ValueError: nan / inf 等非有限浮点数。
    """
    if isinstance(value, TypedValue):
        return value
    if value is None:
        return TypedValue(NULL)
    if isinstance(value, bool):
        return TypedValue(INTEGER, "1" if value else "0")
    if isinstance(value, int):
        return TypedValue(INTEGER, str(value))
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"不支持非有限浮点数：{value!r}，远端无法解析。")
        return TypedValue(FLOAT, repr(value))
    if isinstance(value, str):
        return TypedValue(TEXT, value)
    if isinstance(value, (bytes, bytearray)):
        return TypedValue(BLOB, base64=base64.b64encode(bytes(value)).decode("ascii"))
    raise TypeError(
        f"不支持的参数类型：{type(value).__name__}。"
        f"仅支持 None/int/float/str/bytes，请先转换后再传入。"
    )


def _b64decode(text: str) -> Optional[bytes]:
    # 远端可能省略 base64 的 padding，也可能使用 url-safe 字母表
    if not isinstance(text, str):
        return None
    padded = text + "=" * (-len(text) % 4)
    for altchars in (None, b"-_"):
        try:
            return base64.b64decode(padded, altchars=altchars, validate=True)
        except (binascii.Error, ValueError):
            continue
    _logger.warning("无法解码 base64 单元格，按 None 处理：%r", text[:50])
    return None


def decode_cell(cell: Any) -> Any:
    """
    将响应中的单元格解码为宿主值。

    - 有 value 字段时优先取 value，并按 type 标签转换为 int/float/str；
    - 否则有 base64 字段时解码为 bytes，无法解码时返回 None；
    - 都没有时返回 None；
    - 非字典单元格原样返回。
    """
    if not isinstance(cell, dict):
        return cell

    cell_type = cell.get("type")
    if "value" in cell:
        raw = cell["value"]
        if raw is None:
            return None
        try:
            if cell_type == INTEGER:
                return int(raw)
            if cell_type == FLOAT:
                return float(raw)
        except (TypeError, ValueError):
            return raw
        if cell_type == TEXT:
            return str(raw)
        if cell_type == NULL:
            return None
        return raw
    if "base64" in cell and cell["base64"] is not None:
        return _b64decode(cell["base64"])
    return None
