# scripts/init_db.py
# 启动前执行一次：建 jobs 表并补齐缺失列，打印每列的处理结果
#
#   python -m scripts.init_db

import sys
from pathlib import Path

# 将项目根目录加入 sys.path，保证 from core.xxx 可被解析（无论从何处执行脚本）
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from core.db import ConfigurationError, SchemaError, SqlClient  # noqa: E402
from core.logger import setup_logging  # noqa: E402
from core.utils import load_env_file, load_yaml  # noqa: E402
from modules.jobs import JobRepository  # noqa: E402


def run(client: SqlClient) -> int:
    report = JobRepository(client).ensure_schema()
    for outcome in report.outcomes:
        line = f"[{outcome.status}] {report.table}.{outcome.name}"
        if outcome.error:
            line += f"：{outcome.error}"
        print(line)
    print(f"[总结] 补加 {len(report.added)} 列，失败 {len(report.failed)} 列。")
    return 0


def main() -> int:
    setup_logging()
    load_env_file(_project_root / ".env")
    db_cfg = load_yaml(_project_root / "configs" / "db_local.yaml", required=False)
    try:
        client = SqlClient.from_db_config(db_cfg)
    except ConfigurationError as exc:
        print(f"[配置错误] {exc}。请设置 TURSO_URL（libsql:// 或 https://）与 TURSO_TOKEN。")
        return 2
    try:
        return run(client)
    except SchemaError as exc:
        print(f"[初始化失败] {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
