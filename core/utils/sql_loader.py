"""
core.utils.sql_loader
----------------------

SQL 文件读取工具：
- 按目录列出 .sql 文件；
- 读取单个 .sql 文件内容；
- 批量加载为 SqlScript（跳过空文件）。

注意：
- 不拆分、不校验 SQL，一个文件即一条语句；
- 禁止引用 modules 下的任何内容。
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List


@dataclass(frozen=True)
class SqlScript:
    path: Path
    sql: str

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def stem(self) -> str:
        return self.path.stem


def list_sql_files(sql_dir: str | Path) -> List[Path]:
    """
    列出指定目录下的所有 .sql 文件（不递归），按文件名排序。

    异常：
        FileNotFoundError: 目录不存在时抛出；
        NotADirectoryError: 路径存在但不是目录时抛出。
    """
    dir_path = Path(sql_dir)
    if not dir_path.exists():
        raise FileNotFoundError(f"SQL 目录不存在：{dir_path.absolute()}")
    if not dir_path.is_dir():
        raise NotADirectoryError(f"传入路径不是目录：{dir_path.absolute()}")
    return sorted(dir_path.glob("*.sql"))


def read_sql_file(path: str | Path, encoding: str = "utf-8") -> str:
    """读取单个 .sql 文件，返回去除首尾空白及末尾分号后的文本。"""
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"SQL 文件不存在：{file_path.absolute()}")
    if file_path.is_dir():
        raise IsADirectoryError(f"期望为文件但得到目录：{file_path.absolute()}")
    return file_path.read_text(encoding=encoding).strip().rstrip(";").rstrip()


def load_sql_scripts(sql_dir: str | Path, encoding: str = "utf-8") -> List[SqlScript]:
    """加载目录下的全部 .sql 文件，内容为空的文件被跳过。"""
    scripts: List[SqlScript] = []
    for path in list_sql_files(sql_dir):
        sql = read_sql_file(path, encoding=encoding)
        if sql:
            scripts.append(SqlScript(path=path, sql=sql))
    return scripts
