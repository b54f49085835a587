"""
日志配置工具。

提供标准化的日志初始化，可直接使用 :class:`SchemaConfig` 的调试选项。
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from toolschema.core.config import SchemaConfig

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


def setup_logging(
    level: int = logging.INFO,
    log_file: str = "",
    debug: bool = False,
    config: Optional[SchemaConfig] = None,
) -> logging.Logger:
    """
    初始化统一的日志配置。

    Args:
        level: 默认日志级别。
        log_file: 日志文件路径（为空则仅输出到终端）。
        debug: 是否开启 DEBUG 模式。
        config: 若提供，则使用其 ``debug`` / ``log_file``。

    Returns:
        ``toolschema`` Logger 实例。
    """
    if config is not None:
        debug = debug or config.debug
        log_file = log_file or config.log_file

    if debug:
        level = logging.DEBUG

    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)

    # 文件输出
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        fh = RotatingFileHandler(
            log_file, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
        )
        fh.setFormatter(logging.Formatter(LOG_FORMAT))
        fh.setLevel(level)
        logging.getLogger().addHandler(fh)

    return logging.getLogger("toolschema")
