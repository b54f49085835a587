"""
Schema 生成配置。

支持从环境变量 (.env) 或代码直接构造。
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


def _to_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class SchemaConfig:
    """Schema 生成配置。"""

    # ── 反射 ──
    detect_cycles: bool = True  # 自引用 dataclass 抛出 CyclicTypeError

    # ── 导出 ──
    strict: bool = False  # FunctionDefinition.strict

    # ── 调试 ──
    debug: bool = False
    log_file: str = ""

    @classmethod
    def from_env(cls, env_file: str = ".env") -> SchemaConfig:
        """
        从 .env 文件和环境变量中加载配置。

        环境变量优先级高于 .env 文件。
        """
        load_dotenv(env_file, override=False)

        return cls(
            detect_cycles=_to_bool(os.getenv("TOOLSCHEMA_DETECT_CYCLES"), default=True),
            strict=_to_bool(os.getenv("TOOLSCHEMA_STRICT")),
            debug=_to_bool(os.getenv("TOOLSCHEMA_DEBUG")),
            log_file=os.getenv("TOOLSCHEMA_LOG_FILE", "").strip(),
        )

    def summary(self) -> str:
        """返回配置摘要。"""
        return (
            f"Detect cycles: {self.detect_cycles}\n"
            f"Strict: {self.strict}\n"
            f"Debug: {self.debug}\n"
            f"Log file: {self.log_file or '未配置'}"
        )
