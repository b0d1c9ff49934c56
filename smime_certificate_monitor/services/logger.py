"""
日志服务
"""
import os
import logging
import traceback
from datetime import datetime, timezone
from typing import Callable, Dict, Any, Optional
from ..interfaces import LoggerServiceInterface
from ..models import CertificateRecord, IdentitySummary, Severity


class LoggerService(LoggerServiceInterface):
    """日志服务实现

    日志写到 stderr，标准输出只保留 Nagios 状态行。
    """

    def __init__(self, logger_name: str = "smime_certificate_monitor", log_level: Optional[str] = None,
                 identity_formatter: Optional[Callable[[str], str]] = None):
        """
        初始化日志服务

        Args:
            logger_name: 日志器名称
            log_level: 日志级别，如果为None则从环境变量读取
            identity_formatter: 日志中显示身份的方式，与状态行的隐藏规则一致
        """
        self.identity_formatter = identity_formatter
        self.logger_name = logger_name
        self.log_level = log_level or os.getenv('LOG_LEVEL', 'WARNING')

        self.logger = logging.getLogger(logger_name)
        self._configure_logger()

        self.reset_stats()

    def _configure_logger(self):
        """配置日志器"""
        level = getattr(logging, self.log_level.upper(), logging.WARNING)
        self.logger.setLevel(level)

        # 避免重复添加处理器
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setLevel(level)

            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            handler.setFormatter(formatter)

            self.logger.addHandler(handler)

        self.logger.propagate = False

    def set_identity_formatter(self, identity_formatter: Optional[Callable[[str], str]]):
        """设置日志中显示身份的方式"""
        self.identity_formatter = identity_formatter

    def _display_identity(self, identity: str) -> str:
        if self.identity_formatter is None:
            return identity
        return self.identity_formatter(identity)

    def log_check_start(self, directory: str, file_count: int):
        """
        记录检查开始

        Args:
            directory: 证书目录
            file_count: 目录中的文件数量
        """
        self.execution_stats['start_time'] = datetime.now(timezone.utc)
        self.execution_stats['directory'] = directory
        self.execution_stats['total_files'] = file_count

        self.logger.info(f"开始证书检查，目录 {directory}，共 {file_count} 个文件")

    def log_certificate_record(self, record: CertificateRecord):
        self.execution_stats['parsed_records'] += 1

        if record.expires_at is None:
            self.logger.warning(f"证书过期时间无法解析 - 身份: {self._display_identity(record.identity)}, 文件: {record.source}")
        else:
            expiry_date = datetime.fromtimestamp(record.expires_at, timezone.utc)
            self.logger.debug(
                f"解析证书 - 身份: {self._display_identity(record.identity)}, "
                f"过期时间: {expiry_date.isoformat()}, "
                f"文件: {record.source}"
            )

    def log_skipped_file(self, path: str):
        """记录没有邮箱身份而被跳过的文件"""
        self.execution_stats['skipped_files'] += 1
        self.logger.debug(f"证书主题中没有邮箱地址，跳过: {path}")

    def log_identity_summary(self, summary: IdentitySummary):
        """
        记录身份汇总结果

        Args:
            summary: 身份汇总
        """
        if summary.severity == Severity.CRIT:
            self.logger.warning(f"证书严重告警 - 身份: {self._display_identity(summary.identity)}, 剩余天数: {summary.day_diff}")
        elif summary.severity == Severity.WARN:
            self.logger.warning(f"证书即将过期 - 身份: {self._display_identity(summary.identity)}, 剩余天数: {summary.day_diff}")
        else:
            self.logger.info(f"证书正常 - 身份: {self._display_identity(summary.identity)}, 剩余天数: {summary.day_diff}")

    def log_error(self, error_info: Dict[str, Any]):
        """
        记录解析失败的文件

        Args:
            error_info: 错误处理器返回的错误信息
        """
        self.execution_stats['failed_files'] += 1
        self.execution_stats['errors'].append(error_info)

        self.logger.debug(f"文件 {error_info['path']} 错误堆栈跟踪:\n{traceback.format_exc()}")

    def log_check_end(self):
        """记录检查结束"""
        self.execution_stats['end_time'] = datetime.now(timezone.utc)

        if self.execution_stats['start_time']:
            duration = (self.execution_stats['end_time'] - self.execution_stats['start_time']).total_seconds()
        else:
            duration = 0

        self.logger.info(f"证书检查完成，总执行时间: {duration:.2f} 秒")
        self.logger.info(
            f"检查统计: 总计 {self.execution_stats['total_files']} 个文件, "
            f"解析 {self.execution_stats['parsed_records']} 个, "
            f"跳过 {self.execution_stats['skipped_files']} 个, "
            f"失败 {self.execution_stats['failed_files']} 个"
        )

    def log_configuration_info(self, config: Dict[str, Any]):
        """
        记录配置信息

        Args:
            config: 配置信息字典
        """
        self.logger.info("检查配置信息:")
        for key, value in config.items():
            self.logger.info(f"  {key}: {value}")

    def get_execution_summary(self) -> Dict[str, Any]:
        """
        获取执行摘要

        Returns:
            Dict[str, Any]: 执行摘要信息
        """
        duration = 0
        if self.execution_stats['start_time'] and self.execution_stats['end_time']:
            duration = (self.execution_stats['end_time'] - self.execution_stats['start_time']).total_seconds()

        return {
            'start_time': self.execution_stats['start_time'].isoformat() if self.execution_stats['start_time'] else None,
            'end_time': self.execution_stats['end_time'].isoformat() if self.execution_stats['end_time'] else None,
            'duration_seconds': duration,
            'directory': self.execution_stats['directory'],
            'total_files': self.execution_stats['total_files'],
            'parsed_records': self.execution_stats['parsed_records'],
            'skipped_files': self.execution_stats['skipped_files'],
            'failed_files': self.execution_stats['failed_files'],
            'error_count': len(self.execution_stats['errors']),
            'errors': self.execution_stats['errors']
        }

    def log_execution_summary(self):
        """记录执行摘要"""
        summary = self.get_execution_summary()

        self.logger.debug("=" * 50)
        self.logger.debug("执行摘要")
        self.logger.debug(f"证书目录: {summary['directory']}")
        self.logger.debug(f"执行时长: {summary['duration_seconds']:.2f} 秒")
        self.logger.debug(f"文件总数: {summary['total_files']}")
        self.logger.debug(f"解析成功: {summary['parsed_records']}")
        self.logger.debug(f"无身份跳过: {summary['skipped_files']}")
        self.logger.debug(f"解析失败: {summary['failed_files']}")

        for i, error in enumerate(summary['errors'][:5], 1):  # 只显示前5个错误
            self.logger.debug(f"  错误 {i}: {error['path']} - {error['error_type']}: {error['error_message']}")

        if len(summary['errors']) > 5:
            self.logger.debug(f"  ... 还有 {len(summary['errors']) - 5} 个错误")

        self.logger.debug("=" * 50)

    def reset_stats(self):
        """重置执行统计"""
        self.execution_stats = {
            'start_time': None,
            'end_time': None,
            'directory': None,
            'total_files': 0,
            'parsed_records': 0,
            'skipped_files': 0,
            'failed_files': 0,
            'errors': []
        }
