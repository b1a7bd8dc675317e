"""
scripts/run_sql_export.py
-------------------------

读取指定目录下的 *.sql，逐个通过 HTTP pipeline 执行，
并将结果保存为 {filename}_res.csv 到同一目录。

使用方式（示例）：
1. 在项目根目录 .env 中设置 TURSO_URL 与 TURSO_TOKEN；
2. 如需修改环境变量名或超时，在 configs/db_local.yaml 中配置 turso 段（可选）；
3. 在项目根目录下运行：
   python -m scripts.run_sql_export path/to/sql_dir
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Tuple

# 将项目根目录加入 sys.path，保证 from core.xxx 可被解析（无论从何处执行脚本）
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from core.db import ConfigurationError, PipelineError, SqlClient  # noqa: E402
from core.logger import get_logger, setup_logging  # noqa: E402
from core.utils import load_env_file, load_sql_scripts, load_yaml  # noqa: E402

_logger = get_logger(__name__)


def build_client(project_root: Path = _project_root) -> SqlClient:
    """
    加载 .env 与 configs/db_local.yaml（可选），构造 SqlClient。

    异常：
        ConfigurationError: 端点或令牌缺失时抛出。
    """
    load_env_file(project_root / ".env")
    db_cfg = load_yaml(project_root / "configs" / "db_local.yaml", required=False)
    return SqlClient.from_db_config(db_cfg)


def export_sql_dir(sql_dir: str | Path, client: SqlClient) -> Tuple[List[str], List[str]]:
    """
    执行目录下全部 .sql 文件并导出 *_res.csv。

    输入：
        sql_dir: 含 .sql 文件的目录；
        client: SqlClient。
    输出：
        (成功文件名列表, 失败文件名列表)。单个文件失败不影响后续文件。
    """
    out_dir = Path(sql_dir)
    scripts = load_sql_scripts(out_dir)
    if not scripts:
        print(f"[提示] 目录中未找到任何非空 .sql 文件：{out_dir}")
        return [], []

    total = len(scripts)
    print(f"[开始] SQL 目录：{out_dir}，待运行 SQL 文件数：{total}")

    success_files: List[str] = []
    failed_files: List[str] = []

    for idx, script in enumerate(scripts, start=1):
        print(f"[执行] 第 {idx}/{total} 个：{script.name}")
        try:
            df = client.execute(script.sql).to_dataframe()
            df.to_csv(out_dir / f"{script.stem}_res.csv", index=False)
        except (PipelineError, OSError) as exc:
            _logger.warning("执行 %s 失败：%s", script.name, exc)
            print(f"[失败] 第 {idx} 个：{script.name}，错误：{exc!s}")
            failed_files.append(script.name)
        else:
            print(f"[完成] 第 {idx} 个：{script.name}")
            success_files.append(script.name)

    print(f"[总结] 共 {total} 个 SQL 文件，成功 {len(success_files)} 个，失败 {len(failed_files)} 个。")
    if success_files:
        print(f"[成功列表] {', '.join(success_files)}")
    if failed_files:
        print(f"[失败列表] {', '.join(failed_files)}")
    return success_files, failed_files


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="执行目录下的 .sql 文件并导出 CSV。")
    parser.add_argument("sql_dir", help="含 .sql 文件的目录")
    args = parser.parse_args(argv)

    setup_logging()
    try:
        client = build_client(_project_root)
    except ConfigurationError as exc:
        print(f"[配置错误] {exc}。请设置 TURSO_URL（libsql:// 或 https://）与 TURSO_TOKEN。")
        return 2
    _, failed = export_sql_dir(args.sql_dir, client)
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
