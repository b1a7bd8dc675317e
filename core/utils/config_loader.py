"""
core.utils.config_loader: 配置读取（YAML 配置文件 + .env 环境变量文件）。

禁止引用 modules 下的任何内容。
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv


def load_yaml(path: Union[str, Path], required: bool = True) -> Dict[str, Any]:
    """
    读取 YAML 文件并返回字典。

    输入：
    - path: 文件路径，可为 str 或 Path；
    - required: 为 False 时文件不存在返回空字典，而不是抛异常。

    输出：
    - 解析得到的字典；若文件为空或仅包含空文档，返回空字典。

    异常：
    - FileNotFoundError: required=True 且路径不存在；
    - yaml.YAMLError: 解析失败时由 PyYAML 抛出。
    """
    path = Path(path)
    if not path.exists():
        if not required:
            return {}
        raise FileNotFoundError(f"YAML 文件不存在：{path}")
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data if isinstance(data, dict) else {}


def load_env_file(path: Union[str, Path], override: bool = False) -> Optional[Path]:
    """
    若 .env 文件存在则加载到进程环境变量中。

    输出：
    - 实际加载的文件路径；文件不存在时返回 None。
    """
    env_path = Path(path)
    if not env_path.is_file():
        return None
    load_dotenv(env_path, override=override)
    return env_path
