"""
core.db: 数据库与查询相关的底层工具。

当前实现：
- HTTP pipeline 客户端（基于 requests），通过 SqlClient.execute 执行 SQL 并返回 QueryResult；
- 值编解码（TypedValue）与结果物化；
- 启动时的表结构守护（ensure_schema）。

注意：
- 禁止引用 modules 下的任何内容；
- 不直接读取 configs/*.yaml，由 scripts 或 modules 负责配置注入。
"""

from __future__ import annotations

from .client import SqlClient
from .config import PipelineConfig, build_pipeline_config, normalize_pipeline_url
from .errors import (
    ConfigurationError,
    PipelineError,
    ProtocolError,
    SchemaError,
    StatementError,
    TransportError,
)
from .materializer import QueryResult, materialize
from .pipeline_client import build_pipeline_body, execute_pipeline, parse_pipeline_response
from .schema_guard import (
    ColumnDef,
    ColumnOutcome,
    SchemaColumn,
    SchemaReport,
    TableSchema,
    ensure_schema,
    introspect_columns,
)
from .value_codec import TypedValue, decode_cell, encode_value

__all__ = [
    "ColumnDef",
    "ColumnOutcome",
    "ConfigurationError",
    "PipelineConfig",
    "PipelineError",
    "ProtocolError",
    "QueryResult",
    "SchemaColumn",
    "SchemaError",
    "SchemaReport",
    "SqlClient",
    "StatementError",
    "TableSchema",
    "TransportError",
    "TypedValue",
    "build_pipeline_body",
    "build_pipeline_config",
    "decode_cell",
    "encode_value",
    "ensure_schema",
    "execute_pipeline",
    "introspect_columns",
    "materialize",
    "normalize_pipeline_url",
    "parse_pipeline_response",
]
