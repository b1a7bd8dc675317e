from dataclasses import dataclass, fields
from typing import Any, Dict, List, Mapping

from core.db import ColumnDef, TableSchema

# job_type / status 等分类字段为自由文本，不做枚举约束（标签集合会随时间变化）
JOBS_TABLE = TableSchema(
    name="jobs",
    columns=(
        ColumnDef("id", "INTEGER PRIMARY KEY AUTOINCREMENT", primary_key=True),
        ColumnDef("company_name", "TEXT NOT NULL", add_decl="TEXT NOT NULL DEFAULT ''"),
        ColumnDef("job_title", "TEXT NOT NULL", add_decl="TEXT NOT NULL DEFAULT ''"),
        ColumnDef("location", "TEXT"),
        ColumnDef("job_type", "TEXT"),
        ColumnDef("applied_date", "TEXT"),
        ColumnDef("updated_date", "TEXT"),
        ColumnDef("status", "TEXT"),
        ColumnDef("salary", "TEXT"),
        ColumnDef("source_link", "TEXT"),
        ColumnDef("source_text", "TEXT"),
        ColumnDef("created_at", "TEXT"),
        ColumnDef("updated_at", "TEXT"),
    ),
)

# 允许做分组统计的列
GROUPABLE_FIELDS = ("status", "job_type")


@dataclass
class JobApplication:
    """
    一条求职投递记录（不含 id 与时间戳）。

    说明：
    - company_name / job_title: 必填；
    - applied_date / updated_date: 约定为 YYYY-MM-DD 文本；
    - job_type: 如 fulltime、contract、freelance、remote、hybrid；
    - status: 如 applied、interview、rejected、accepted，均为自由文本；
    - salary: 自由文本，可以是数字或区间；
    - source_link / source_text: 来源链接及其展示文字。
    """

    company_name: str
    job_title: str
    location: str = ""
    job_type: str = ""
    applied_date: str = ""
    updated_date: str = ""
    status: str = ""
    salary: str = ""
    source_link: str = ""
    source_text: str = ""

    def as_params(self) -> List[str]:
        return [getattr(self, f.name) for f in fields(self)]

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]


def load_job_application(raw: Mapping[str, Any]) -> JobApplication:
    """
    从表单/字典构造 JobApplication：所有字段转为字符串并去除首尾空白。

    company_name 或 job_title 为空时抛出 ValueError。
    """
    values: Dict[str, str] = {}
    for name in JobApplication.field_names():
        value = raw.get(name)
        values[name] = "" if value is None else str(value).strip()

    if not values["company_name"]:
        raise ValueError("投递记录缺少 company_name。")
    if not values["job_title"]:
        raise ValueError("投递记录缺少 job_title。")

    return JobApplication(**values)
