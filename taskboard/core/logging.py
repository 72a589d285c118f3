"""
统一的日志配置模块
"""
import sys
import logging


def setup_logging(level: int = logging.INFO) -> None:
    """
    配置全局日志格式

    Args:
        level: 日志级别，默认 INFO
    """
    formatter = logging.Formatter(
        fmt="%(asctime)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    # 重复调用时不叠加 handler
    root_logger.handlers.clear()
    root_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """
    获取指定名称的 logger

    Args:
        name: logger 名称，建议使用组件名称，如 "TaskService"

    Returns:
        logger 实例
    """
    return logging.getLogger(name)
