from __future__ import annotations

from datetime import datetime
from typing import Callable, Dict, List, Optional

from core.db import SchemaReport, SqlClient
from core.db.materializer import Record
from core.logger import get_logger

from .schema import GROUPABLE_FIELDS, JOBS_TABLE, JobApplication

_logger = get_logger(__name__)

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _now() -> str:
    return datetime.now().strftime(_TIMESTAMP_FORMAT)


class JobRepository:
    """
    jobs 表的增删改查，所有读写都经过 SqlClient。

    Input:
        client: SqlClient；
        clock: 返回时间戳字符串的函数，默认当前本地时间，测试时可注入固定值。
    """

    def __init__(self, client: SqlClient, clock: Callable[[], str] = _now) -> None:
        self._client = client
        self._clock = clock
        self._table = JOBS_TABLE.name

    def ensure_schema(self) -> SchemaReport:
        report = self._client.ensure_schema(JOBS_TABLE)
        if report.added:
            _logger.info("jobs 表补加列：%s", ", ".join(report.added))
        return report

    def create(self, job: JobApplication) -> Optional[int]:
        """插入一条记录，返回新记录 id。"""
        names = JobApplication.field_names() + ["created_at", "updated_at"]
        placeholders = ", ".join("?" for _ in names)
        now = self._clock()
        result = self._client.execute(
            f"INSERT INTO {self._table} ({', '.join(names)}) VALUES ({placeholders})",
            job.as_params() + [now, now],
        )
        return result.last_insert_id

    def update(self, job_id: int, job: JobApplication) -> int:
        """更新一条记录，返回受影响行数。"""
        assignments = ", ".join(f"{name}=?" for name in JobApplication.field_names())
        result = self._client.execute(
            f"UPDATE {self._table} SET {assignments}, updated_at=? WHERE id=?",
            job.as_params() + [self._clock(), int(job_id)],
        )
        return result.affected

    def delete(self, job_id: int) -> int:
        result = self._client.execute(f"DELETE FROM {self._table} WHERE id = ?", [int(job_id)])
        return result.affected

    def get(self, job_id: int) -> Optional[Record]:
        records = self._client.query(f"SELECT * FROM {self._table} WHERE id = ?", [int(job_id)])
        return records[0] if records else None

    def list_all(self) -> List[Record]:
        return self._client.query(f"SELECT * FROM {self._table} ORDER BY id DESC")

    def count(self, status: Optional[str] = None) -> int:
        if status is None:
            n = self._client.scalar(f"SELECT COUNT(*) AS n FROM {self._table}")
        else:
            n = self._client.scalar(
                f"SELECT COUNT(*) AS n FROM {self._table} WHERE status = ?", [status]
            )
        return int(n or 0)

    def count_by(self, field: str) -> Dict[str, int]:
        """
        按分类字段分组计数，空值归入 ""。

        field 仅允许 GROUPABLE_FIELDS 中的列名，防止拼接任意 SQL。
        """
        if field not in GROUPABLE_FIELDS:
            raise ValueError(f"不支持按 {field!r} 分组，可选：{', '.join(GROUPABLE_FIELDS)}")
        records = self._client.query(
            f"SELECT COALESCE({field}, '') AS grp, COUNT(*) AS cnt "
            f"FROM {self._table} GROUP BY grp ORDER BY grp"
        )
        return {str(r["grp"]): int(r["cnt"]) for r in records}
