"""
core.db.config
--------------

pipeline 端点配置：端点地址 + Bearer 令牌 + 请求超时。

设计原则：
- 配置对象在进程启动时构造一次，之后只读；
- 令牌只从环境变量读取，YAML 中只记录环境变量的名称；
- 端点统一规范化为以 /v2/pipeline 结尾的完整 HTTP(S) 地址。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional
import os

from core.db.errors import ConfigurationError
from core.logger import get_logger

_logger = get_logger(__name__)

PIPELINE_PATH = "/v2/pipeline"
DEFAULT_URL_ENV_VAR = "TURSO_URL"
DEFAULT_TOKEN_ENV_VAR = "TURSO_TOKEN"
DEFAULT_TIMEOUT = 30.0

_LIBSQL_SCHEME = "libsql://"
_HTTP_SCHEMES = ("http://", "https://")


def _fail(msg: str) -> ConfigurationError:
    _logger.error(msg)
    return ConfigurationError(msg)


def normalize_pipeline_url(url: str) -> str:
    """
    将端点地址规范化为完整的 pipeline 地址。

    输入：
        url: libsql://host 形式的连接串，或 http(s)://host 形式的地址。
    输出：
        str：形如 https://host/v2/pipeline 的地址。
    异常：
        ConfigurationError: 地址为空或协议不受支持时抛出。
    """
    raw = (url or "").strip()
    if not raw:
        raise _fail("pipeline 端点地址为空。")

    if raw.startswith(_LIBSQL_SCHEME):
        raw = "https://" + raw[len(_LIBSQL_SCHEME):]
    elif not raw.startswith(_HTTP_SCHEMES):
        raise _fail(
            f"不支持的端点地址：{raw}。"
            f"请使用 libsql://... 或 http(s)://... 形式。"
        )

    raw = raw.rstrip("/")
    if not raw.endswith(PIPELINE_PATH):
        raw += PIPELINE_PATH
    return raw


@dataclass(frozen=True)
class PipelineConfig:
    """
    pipeline 端点配置对象。

    输入：
        url: 端点地址，构造时自动规范化；
        token: Bearer 访问令牌；
        timeout: 单次 HTTP 请求的超时时间（秒）。
    异常：
        ConfigurationError: 任一字段缺失或非法时抛出。
    """

    url: str
    token: str
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        object.__setattr__(self, "url", normalize_pipeline_url(self.url))
        if not (self.token or "").strip():
            raise _fail("pipeline 访问令牌为空。")
        if self.timeout is None or self.timeout <= 0:
            raise _fail(f"timeout 必须大于 0，当前为：{self.timeout}")

    def __repr__(self) -> str:
        return f"PipelineConfig(url={self.url!r}, token='***', timeout={self.timeout!r})"

    @classmethod
    def from_env(
        cls,
        url_env_var: str = DEFAULT_URL_ENV_VAR,
        token_env_var: str = DEFAULT_TOKEN_ENV_VAR,
        timeout: float = DEFAULT_TIMEOUT,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "PipelineConfig":
        """
        从环境变量构造配置。

        输入：
            url_env_var / token_env_var: 端点与令牌所在的环境变量名；
            timeout: 请求超时（秒）；
            environ: 用于替代 os.environ 的映射，主要供测试注入。
        输出：
            PipelineConfig。
        异常：
            ConfigurationError: 环境变量缺失时抛出，提示如何设置。
        """
        env = os.environ if environ is None else environ
        url = env.get(url_env_var)
        token = env.get(token_env_var)
        missing = [name for name, val in ((url_env_var, url), (token_env_var, token)) if not val]
        if missing:
            raise _fail(
                f"未在环境变量中找到：{', '.join(missing)}。"
                f"请在终端中设置，例如：export {missing[0]}='...'，"
                f"或在 .env 文件中配置并确保已被加载。"
            )
        return cls(url=url, token=token, timeout=timeout)  # type: ignore[arg-type]


def build_pipeline_config(
    db_cfg: Mapping[str, Any],
    environ: Optional[Mapping[str, str]] = None,
) -> PipelineConfig:
    """
    根据 configs/db_local.yaml 解析出的字典构造 PipelineConfig。

    期望结构（均可省略，省略时使用默认值）：

        turso:
          url_env_var: "TURSO_URL"
          token_env_var: "TURSO_TOKEN"
          timeout: 30
    """
    section = db_cfg.get("turso") or {}
    url_env_var = section.get("url_env_var") or DEFAULT_URL_ENV_VAR
    token_env_var = section.get("token_env_var") or DEFAULT_TOKEN_ENV_VAR
    try:
        timeout = float(section.get("timeout", DEFAULT_TIMEOUT))
    except (TypeError, ValueError) as exc:
        raise _fail(f"turso.timeout 必须为数字，当前为：{section.get('timeout')!r}") from exc

    return PipelineConfig.from_env(
        url_env_var=url_env_var,
        token_env_var=token_env_var,
        timeout=timeout,
        environ=environ,
    )
