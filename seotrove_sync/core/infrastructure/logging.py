"""Logging configuration with structlog integration.

提供两种日志记录方式：
1. loguru: 用于一般调试日志
2. structlog: 用于关键业务事件的结构化日志（抓取、写入、同步、调度）
"""

import sys
from typing import Any

import structlog
from loguru import logger

from seotrove_sync.core.config import settings


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

    # Add file handler for production
    if settings.ENVIRONMENT != "local":
        logger.add(
            f"{settings.LOG_DIR}/seotrove_sync_{{time:YYYY-MM-DD}}.log",
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


def get_business_logger(name: str = "business") -> structlog.BoundLogger:
    """获取业务事件日志记录器。

    Usage:
        from seotrove_sync.core.infrastructure.logging import get_business_logger

        log = get_business_logger()
        log.info("content_fetched", domain="example.com", pages=3)
    """
    return structlog.get_logger(name)


class BusinessEvents:
    """业务事件日志助手类。

    提供统一的业务事件日志记录接口，确保事件格式一致。

    Usage:
        BusinessEvents.content_fetched(domain="example.com", variant="new", pages=2)
        BusinessEvents.content_sync_completed(domain="example.com", ...)
    """

    _log = get_business_logger("business.events")

    @classmethod
    def content_fetched(
        cls,
        domain: str,
        variant: str,
        pages: int,
        **extra: Any,
    ) -> None:
        """记录内容抓取成功事件。"""
        cls._log.info(
            "content_fetched",
            event_type="fetch",
            domain=domain,
            variant=variant,
            pages=pages,
            **extra,
        )

    @classmethod
    def content_fetch_failed(
        cls,
        domain: str,
        variant: str,
        error: str,
        status_code: int | None = None,
        **extra: Any,
    ) -> None:
        """记录内容抓取失败事件。"""
        cls._log.warning(
            "content_fetch_failed",
            event_type="fetch_error",
            domain=domain,
            variant=variant,
            error=error,
            status_code=status_code,
            **extra,
        )

    @classmethod
    def content_write_failed(
        cls,
        domain: str,
        item: str,
        error: str,
        **extra: Any,
    ) -> None:
        """记录单个文件写入失败事件。"""
        cls._log.warning(
            "content_write_failed",
            event_type="write_error",
            domain=domain,
            item=item,
            error=error,
            **extra,
        )

    @classmethod
    def content_sync_completed(
        cls,
        domain: str,
        success: bool,
        files_created: int,
        error_count: int,
        duration_ms: int,
        **extra: Any,
    ) -> None:
        """记录同步完成事件。"""
        level = "info" if success else "warning"
        getattr(cls._log, level)(
            "content_sync_completed",
            event_type="sync",
            domain=domain,
            success=success,
            files_created=files_created,
            error_count=error_count,
            duration_ms=duration_ms,
            **extra,
        )

    @classmethod
    def content_sync_skipped(
        cls,
        domain: str,
        reason: str,
        **extra: Any,
    ) -> None:
        """记录同步被跳过事件。"""
        cls._log.info(
            "content_sync_skipped",
            event_type="sync",
            domain=domain,
            reason=reason,
            **extra,
        )

    @classmethod
    def schedule_armed(
        cls,
        source_id: str,
        interval_sec: float,
        **extra: Any,
    ) -> None:
        """记录调度启动事件。"""
        cls._log.info(
            "schedule_armed",
            event_type="schedule",
            source_id=source_id,
            interval_sec=interval_sec,
            **extra,
        )

    @classmethod
    def schedule_disarmed(
        cls,
        source_id: str,
        **extra: Any,
    ) -> None:
        """记录调度停止事件。"""
        cls._log.info(
            "schedule_disarmed",
            event_type="schedule",
            source_id=source_id,
            **extra,
        )

    @classmethod
    def scheduled_sync_failed(
        cls,
        source_id: str,
        trigger: str,
        error: str,
        **extra: Any,
    ) -> None:
        """记录调度触发的同步异常事件。"""
        cls._log.warning(
            "scheduled_sync_failed",
            event_type="schedule_error",
            source_id=source_id,
            trigger=trigger,
            error=error,
            **extra,
        )
