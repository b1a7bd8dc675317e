"""
core.db.materializer
--------------------

将 pipeline execute 结果（列描述 + 带类型单元格的行）物化为记录列表。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pandas as pd

from core.db.value_codec import decode_cell
from core.logger import get_logger

_logger = get_logger(__name__)

Record = Dict[Any, Any]


@dataclass
class QueryResult:
    """
    单次 execute 的结果。

    说明：
    - records: 按列顺序构造的字典列表；同名列以后出现的为准；
    - columns / rows: 列名与按位置解码后的行，位置访问不丢信息；
    - affected: 受影响行数，只读语句为 0；
    - last_insert_id: 最近插入行的 rowid，没有则为 None；
    - executed: 远端返回的结果类型是否为 execute；
    - remote_type: 远端声明的结果类型，用于区分“无结果”与“零行”。
    """

    records: List[Record] = field(default_factory=list)
    columns: List[str] = field(default_factory=list)
    rows: List[Tuple[Any, ...]] = field(default_factory=list)
    affected: int = 0
    last_insert_id: Optional[int] = None
    executed: bool = True
    remote_type: str = "execute"

    def to_dataframe(self) -> pd.DataFrame:
        """按 columns/rows 构造 DataFrame；无列时返回空 DataFrame。"""
        if not self.columns and not self.rows:
            return pd.DataFrame()
        width = max([len(self.columns)] + [len(r) for r in self.rows])
        names = list(self.columns) + list(range(len(self.columns), width))
        return pd.DataFrame([list(r) + [None] * (width - len(r)) for r in self.rows], columns=names)


def empty_result(remote_type: str = "execute") -> QueryResult:
    return QueryResult(executed=remote_type == "execute", remote_type=remote_type)


def _column_names(cols: List[Any]) -> Optional[List[str]]:
    """列描述可以是裸列名或含 name 字段的字典；任一列取不到字符串列名时返回 None。"""
    names: List[str] = []
    for col in cols:
        name = col.get("name") if isinstance(col, Mapping) else col
        if not isinstance(name, str):
            return None
        names.append(name)
    return names


def _as_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def materialize(result: Any) -> QueryResult:
    """
    将 execute 结果负载转换为 QueryResult。

    输入：
        result: 响应中的 result 字段，形如
                {"cols": [...], "rows": [[...]], "affected_row_count": n, "last_insert_rowid": "id"}。
    输出：
        QueryResult。cols/rows 缺失或不是列表、或列描述取不到列名时 records 为空；
        affected 缺省为 0，last_insert_id 缺省为 None。
    """
    if not isinstance(result, Mapping):
        return empty_result()

    cols = result.get("cols")
    rows = result.get("rows")
    columns: List[str] = []
    decoded_rows: List[Tuple[Any, ...]] = []
    records: List[Record] = []

    names = _column_names(cols) if isinstance(cols, list) else None
    if names is None and isinstance(cols, list):
        _logger.warning("列描述缺少可用的列名，按空结果处理：%r", cols[:5])

    if names is not None and isinstance(rows, list):
        columns = names
        for row in rows:
            if not isinstance(row, list):
                continue
            values = tuple(decode_cell(cell) for cell in row)
            record: Record = {}
            for idx, value in enumerate(values):
                # 多出的单元格按位置编号作键
                key = columns[idx] if idx < len(columns) else idx
                record[key] = value
            decoded_rows.append(values)
            records.append(record)

    return QueryResult(
        records=records,
        columns=columns,
        rows=decoded_rows,
        affected=_as_int(result.get("affected_row_count")) or 0,
        last_insert_id=_as_int(result.get("last_insert_rowid")),
    )
