"""
core.db.errors: pipeline 客户端的异常体系。

- ConfigurationError: 启动时端点或令牌缺失/非法，致命；
- TransportError: 网络失败、超时或 HTTP 状态码 >= 400；
- ProtocolError: 响应结构不符合 pipeline 协议；
- StatementError: 远端对 execute 步骤返回 error 结果（ProtocolError 的子类）；
- SchemaError: 建表或表结构探查失败，致命。
"""

from __future__ import annotations

from typing import Optional


class PipelineError(RuntimeError):
    """所有 pipeline 相关异常的基类。"""


class ConfigurationError(PipelineError):
    pass


class TransportError(PipelineError):
    """
    传输层失败。

    status_code 为 None 表示没有拿到 HTTP 响应（连接失败、超时等）。
    """

    def __init__(self, message: str, status_code: Optional[int] = None, detail: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class ProtocolError(PipelineError):
    pass


class StatementError(ProtocolError):
    """远端执行语句失败，message/code 取自响应中的 error 字段。"""

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.code = code


class SchemaError(PipelineError):
    pass
