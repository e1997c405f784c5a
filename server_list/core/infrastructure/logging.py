"""Logging configuration with structlog integration.

提供两种日志记录方式：
1. loguru: 用于一般调试日志
2. structlog: 用于关键业务事件的结构化日志
"""

import sys
from typing import Any

import structlog
from loguru import logger

from server_list.core.config import settings


def setup_logging() -> None:
    """Configure application logging with structlog and loguru."""
    _configure_structlog()
    _configure_loguru()

    logger.info(f"Logging configured with level: {settings.LOG_LEVEL}")


def _configure_structlog() -> None:
    """配置 structlog 处理器链。"""
    if settings.ENVIRONMENT == "local":
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.CallsiteParameterAdder(
                [
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _get_log_level_number(settings.LOG_LEVEL)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def _configure_loguru() -> None:
    """配置 loguru。"""
    logger.remove()

    logger.add(
        sys.stderr,
        level=settings.LOG_LEVEL,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    if settings.ENVIRONMENT != "local":
        logger.add(
            "logs/server_list_{time:YYYY-MM-DD}.log",
            rotation="00:00",
            retention="30 days",
            level="INFO",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        )


def _get_log_level_number(level: str) -> int:
    """将日志级别字符串转换为数字。"""
    levels = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    return levels.get(level.upper(), 20)


# ============================================================================
# 业务事件日志记录器
# ============================================================================


class BusinessEvents:
    """业务事件日志助手类。

    Usage:
        from server_list.core.infrastructure.logging import BusinessEvents

        BusinessEvents.catalog_fetch_failed(ordering="Player", error="HTTP 503")
    """

    _log = structlog.get_logger("business.events")

    @classmethod
    def catalog_refreshed(
        cls,
        updated: list[str],
        failed: list[str],
        **extra: Any,
    ) -> None:
        """记录一次完整的刷新周期。"""
        cls._log.info(
            "catalog_refreshed",
            event_type="refresh",
            updated=updated,
            failed=failed,
            **extra,
        )

    @classmethod
    def catalog_fetch_failed(
        cls,
        ordering: str,
        error: str,
        **extra: Any,
    ) -> None:
        """记录单个排序的抓取失败。"""
        cls._log.warning(
            "catalog_fetch_failed",
            event_type="refresh_error",
            ordering=ordering,
            error=error,
            **extra,
        )

    @classmethod
    def subscriber_failed(
        cls,
        subscriber: str,
        error: str,
        **extra: Any,
    ) -> None:
        cls._log.warning(
            "subscriber_failed",
            event_type="notify_error",
            subscriber=subscriber,
            error=error,
            **extra,
        )

    @classmethod
    def views_rebuilt(
        cls,
        ordering: str,
        entry_count: int,
        page_count: int,
        **extra: Any,
    ) -> None:
        cls._log.info(
            "views_rebuilt",
            event_type="menu",
            ordering=ordering,
            entry_count=entry_count,
            page_count=page_count,
            **extra,
        )

    @classmethod
    def player_transferred(
        cls,
        viewer: str,
        ip: str,
        port: int,
        **extra: Any,
    ) -> None:
        """记录玩家转移到其他服务器。"""
        cls._log.info(
            "player_transferred",
            event_type="transfer",
            viewer=viewer,
            ip=ip,
            port=port,
            **extra,
        )

    @classmethod
    def server_status_polled(
        cls,
        total: int,
        online: int,
        **extra: Any,
    ) -> None:
        cls._log.info(
            "server_status_polled",
            event_type="status",
            total=total,
            online=online,
            **extra,
        )

    @classmethod
    def servers_config_invalid(
        cls,
        path: str,
        error: str,
        **extra: Any,
    ) -> None:
        """记录服务器列表配置不可用（降级为保留上次结果）。"""
        cls._log.warning(
            "servers_config_invalid",
            event_type="degradation",
            path=path,
            error=error,
            **extra,
        )
