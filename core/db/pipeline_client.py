"""
core.db.pipeline_client
-----------------------

基于 HTTP pipeline 协议的 SQL 执行工具。

设计原则：
- 每次调用都是一次独立的 HTTP POST：请求体为 [execute, close]，不复用连接、不跨调用保持事务；
- 不做重试，失败直接抛给调用方；
- 通过 PipelineConfig 接收调用方注入的端点、令牌与超时。
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

import requests

from core.db.config import PipelineConfig
from core.db.errors import ProtocolError, StatementError, TransportError
from core.db.materializer import QueryResult, empty_result, materialize
from core.db.value_codec import SqlParam, encode_value
from core.logger import get_logger

_logger = get_logger(__name__)

_BODY_PREVIEW = 500


def build_pipeline_body(sql: str, params: Optional[Sequence[SqlParam]] = None) -> Dict[str, Any]:
    """
    构造 pipeline 请求体。

    输入：
        sql: SQL 文本，按位置使用 ? 占位符；
        params: 位置参数序列，可为空。
    输出：
        dict：{"requests": [{"type": "execute", "stmt": {...}}, {"type": "close"}]}。
        params 为空时 stmt 中不出现 args 字段。
    异常：
        ValueError: SQL 为空时抛出；
        TypeError: 参数类型不受支持时由 encode_value 抛出。
    """
    sql_text = (sql or "").strip()
    if not sql_text:
        raise ValueError("传入的 SQL 文本为空。")

    stmt: Dict[str, Any] = {"sql": sql_text}
    if params:
        stmt["args"] = [encode_value(p).to_wire() for p in params]

    return {
        "requests": [
            {"type": "execute", "stmt": stmt},
            {"type": "close"},
        ]
    }


def post_pipeline(body: Dict[str, Any], cfg: PipelineConfig) -> Dict[str, Any]:
    """
    发送 pipeline 请求并返回解析后的 JSON。

    异常：
        TransportError: 网络异常、超时或 HTTP 状态码 >= 400；
        ProtocolError: 响应内容不是 JSON 对象。
    """
    headers = {
        "Authorization": f"Bearer {cfg.token}",
        "Content-Type": "application/json",
    }

    try:
        resp = requests.post(cfg.url, headers=headers, json=body, timeout=cfg.timeout)
    except requests.Timeout as exc:
        msg = f"[transport] 请求 pipeline 超时（{cfg.timeout}s）：{cfg.url}"
        _logger.error(msg)
        raise TransportError(msg, detail=str(exc)) from exc
    except requests.RequestException as exc:
        msg = f"[transport] 请求 pipeline 失败：{cfg.url}，错误：{exc!s}"
        _logger.error(msg)
        raise TransportError(msg, detail=str(exc)) from exc

    if resp.status_code >= 400:
        detail = (resp.text or "")[:_BODY_PREVIEW]
        msg = f"[transport] pipeline 返回异常状态码：{resp.status_code}。响应内容：{detail}"
        _logger.error(msg)
        raise TransportError(msg, status_code=resp.status_code, detail=detail)

    try:
        payload = resp.json()
    except ValueError as exc:
        msg = f"[protocol] pipeline 返回内容不是合法 JSON：{(resp.text or '')[:_BODY_PREVIEW]}"
        _logger.error(msg)
        raise ProtocolError(msg) from exc

    if not isinstance(payload, dict):
        msg = f"[protocol] pipeline 返回的 JSON 不是对象，类型为：{type(payload).__name__}"
        _logger.error(msg)
        raise ProtocolError(msg)
    return payload


def parse_pipeline_response(payload: Dict[str, Any]) -> QueryResult:
    """
    解析 pipeline 响应中第一个（execute）步骤的结果。

    逻辑：
        1. results[0] 缺失时视为协议错误；
        2. results[0] 为 error 类型时抛出 StatementError，携带远端错误信息；
        3. results[0].response 缺失时视为协议错误；
        4. response.type 不是 execute 时返回 executed=False 的空结果；
        5. 否则交给 materialize 物化。
    """
    results = payload.get("results")
    if not isinstance(results, list) or not results or not isinstance(results[0], dict):
        msg = "[protocol] pipeline 响应缺少 results[0]。"
        _logger.error(msg)
        raise ProtocolError(msg)

    first = results[0]
    if first.get("type") == "error":
        error = first.get("error") or {}
        message = error.get("message") or "未知错误"
        msg = f"[statement] 远端执行语句失败：{message}"
        _logger.error(msg)
        raise StatementError(msg, code=error.get("code"))

    response = first.get("response")
    if not isinstance(response, dict) or not response:
        msg = "[protocol] pipeline 响应缺少 results[0].response。"
        _logger.error(msg)
        raise ProtocolError(msg)

    remote_type = response.get("type") or ""
    if remote_type != "execute":
        _logger.warning("pipeline 返回非 execute 结果（type=%r），按空结果处理。", remote_type)
        return empty_result(remote_type)

    return materialize(response.get("result") or {})


def execute_pipeline(
    sql: str,
    params: Optional[Sequence[SqlParam]],
    cfg: PipelineConfig,
) -> QueryResult:
    """
    通过 HTTP pipeline 执行一条 SQL 并返回 QueryResult。

    输入：
        sql: SQL 文本；
        params: 位置参数；
        cfg: PipelineConfig 配置对象。
    输出：
        QueryResult。
    """
    body = build_pipeline_body(sql, params)
    _logger.debug("执行 SQL（参数 %d 个）：%s", len(params or ()), body["requests"][0]["stmt"]["sql"])
    payload = post_pipeline(body, cfg)
    return parse_pipeline_response(payload)
