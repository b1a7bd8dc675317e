"""
core.db.client: 对外的查询入口 SqlClient。

SqlClient 只持有只读的 PipelineConfig，不保存任何调用间状态，
多线程并发调用 execute 是安全的；每次调用都是独立的一次 HTTP 往返。
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence

from core.db.config import PipelineConfig, build_pipeline_config
from core.db.materializer import QueryResult, Record
from core.db.pipeline_client import execute_pipeline
from core.db.schema_guard import SchemaReport, TableSchema, ensure_schema
from core.db.value_codec import SqlParam


class SqlClient:
    """
    通过 HTTP pipeline 执行 SQL 的客户端。

    Input:
        config: PipelineConfig，构造时已完成校验与端点规范化。
    Output:
        无（构造器）。查询结果通过 execute()/query()/scalar() 返回。
    """

    def __init__(self, config: PipelineConfig) -> None:
        self._config = config

    @property
    def config(self) -> PipelineConfig:
        return self._config

    @classmethod
    def from_env(cls, **kwargs: Any) -> "SqlClient":
        """参数透传给 PipelineConfig.from_env。"""
        return cls(PipelineConfig.from_env(**kwargs))

    @classmethod
    def from_db_config(
        cls,
        db_cfg: Mapping[str, Any],
        environ: Optional[Mapping[str, str]] = None,
    ) -> "SqlClient":
        return cls(build_pipeline_config(db_cfg, environ=environ))

    def execute(self, sql: str, params: Optional[Sequence[SqlParam]] = None) -> QueryResult:
        """
        执行一条 SQL。

        Input:
            sql: SQL 文本，使用 ? 作为位置占位符；
            params: 与占位符顺序一致的参数列表，可为空。
        Output:
            QueryResult：records / affected / last_insert_id 等。
        异常：
            TransportError / ProtocolError: 原样抛给调用方，由调用方决定是否重试。
        """
        return execute_pipeline(sql, params, self._config)

    def query(self, sql: str, params: Optional[Sequence[SqlParam]] = None) -> List[Record]:
        return self.execute(sql, params).records

    def scalar(self, sql: str, params: Optional[Sequence[SqlParam]] = None) -> Any:
        """返回第一行第一列；无结果时返回 None。"""
        result = self.execute(sql, params)
        if not result.rows or not result.rows[0]:
            return None
        return result.rows[0][0]

    def ensure_schema(self, schema: TableSchema) -> SchemaReport:
        return ensure_schema(self, schema)
