"""
modules.jobs: 求职投递记录模块。

对外提供：
- JOBS_TABLE: jobs 表结构定义，供启动时 ensure_schema 使用；
- JobApplication / load_job_application: 投递记录及其校验；
- JobRepository: 基于 SqlClient 的增删改查与分组计数。
"""

from .repository import JobRepository
from .schema import GROUPABLE_FIELDS, JOBS_TABLE, JobApplication, load_job_application

__all__ = [
    "GROUPABLE_FIELDS",
    "JOBS_TABLE",
    "JobApplication",
    "JobRepository",
    "load_job_application",
]
