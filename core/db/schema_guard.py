"""
core.db.schema_guard
--------------------

启动时的表结构守护：建表（若不存在）+ 补齐缺失列。

策略：
- 建表与表结构探查失败是致命的，抛出 SchemaError；
- 逐列 ADD COLUMN，单列失败（如并发进程已加过该列）只记录，不中断其余列；
- 不做回滚、不维护迁移版本表、不加锁，依赖语句本身的幂等性。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol, Sequence

from core.db.errors import PipelineError, SchemaError
from core.db.materializer import QueryResult
from core.logger import get_logger

_logger = get_logger(__name__)

PRESENT = "present"
ADDED = "added"
FAILED = "failed"


class SqlExecutor(Protocol):
    def execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> QueryResult: ...


@dataclass(frozen=True)
class ColumnDef:
    """
    列定义。

    说明：
    - decl: CREATE TABLE 中的列声明（不含列名），如 "TEXT NOT NULL"；
    - add_decl: ALTER TABLE ADD COLUMN 使用的声明；为空时沿用 decl。
      NOT NULL 列补加到已有表时必须带默认值，因此两者可能不同；
    - primary_key: 主键列只出现在建表语句中，不参与补列。
    """

    name: str
    decl: str
    add_decl: Optional[str] = None
    primary_key: bool = False


@dataclass(frozen=True)
class TableSchema:
    name: str
    columns: Sequence[ColumnDef]

    def create_sql(self) -> str:
        body = ",\n  ".join(f"{c.name} {c.decl}" for c in self.columns)
        return f"CREATE TABLE IF NOT EXISTS {self.name} (\n  {body}\n)"

    def expected_columns(self) -> List[ColumnDef]:
        return [c for c in self.columns if not c.primary_key]

    def add_column_sql(self, column: ColumnDef) -> str:
        return f"ALTER TABLE {self.name} ADD COLUMN {column.name} {column.add_decl or column.decl}"


@dataclass(frozen=True)
class SchemaColumn:
    name: str
    declared_type: str = ""


@dataclass(frozen=True)
class ColumnOutcome:
    name: str
    status: str
    error: Optional[str] = None


@dataclass
class SchemaReport:
    table: str
    outcomes: List[ColumnOutcome] = field(default_factory=list)

    @property
    def added(self) -> List[str]:
        return [o.name for o in self.outcomes if o.status == ADDED]

    @property
    def failed(self) -> List[str]:
        return [o.name for o in self.outcomes if o.status == FAILED]


def introspect_columns(client: SqlExecutor, table: str) -> List[SchemaColumn]:
    """通过 PRAGMA table_info 读取线上表的列清单。"""
    result = client.execute(f"PRAGMA table_info({table})")
    return [
        SchemaColumn(name=str(r.get("name")), declared_type=str(r.get("type") or ""))
        for r in result.records
        if r.get("name") is not None
    ]


def ensure_schema(client: SqlExecutor, schema: TableSchema) -> SchemaReport:
    """
    建表并补齐缺失列。

    输入：
        client: 具备 execute(sql, params) 的执行器（通常为 SqlClient）；
        schema: 目标表结构。
    输出：
        SchemaReport：每个期望列一条结果，状态为 present / added / failed。
    异常：
        SchemaError: 建表或表结构探查失败时抛出。
    """
    try:
        client.execute(schema.create_sql())
        live = {c.name for c in introspect_columns(client, schema.name)}
    except PipelineError as exc:
        msg = f"初始化表 {schema.name} 失败：{exc!s}"
        _logger.error(msg)
        raise SchemaError(msg) from exc

    report = SchemaReport(table=schema.name)
    for column in schema.expected_columns():
        if column.name in live:
            report.outcomes.append(ColumnOutcome(column.name, PRESENT))
            continue
        try:
            client.execute(schema.add_column_sql(column))
        except PipelineError as exc:
            _logger.warning("为表 %s 补加列 %s 失败，已跳过：%s", schema.name, column.name, exc)
            report.outcomes.append(ColumnOutcome(column.name, FAILED, str(exc)))
        else:
            _logger.info("已为表 %s 补加列 %s。", schema.name, column.name)
            report.outcomes.append(ColumnOutcome(column.name, ADDED))
    return report
