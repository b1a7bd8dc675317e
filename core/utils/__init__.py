# core.utils: 通用工具（配置加载、.env 加载、SQL 文件读取等）
# 禁止引用 modules 下的任何内容

from core.utils.config_loader import load_env_file, load_yaml
from core.utils.sql_loader import SqlScript, list_sql_files, load_sql_scripts, read_sql_file

__all__ = [
    "SqlScript",
    "list_sql_files",
    "load_env_file",
    "load_sql_scripts",
    "load_yaml",
    "read_sql_file",
]
