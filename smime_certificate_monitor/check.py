"""
S/MIME 证书过期检查入口点（Nagios/Check_MK MRPE 插件）
"""
import os
import sys
from typing import List, Optional

from .interfaces import CertificateParserInterface, ClockInterface
from .models import CheckConfig, CheckReport, Severity
from .services.certificate_parser import get_certificate_parser
from .services.certificate_reader import CertificateReader
from .services.clock import SystemClock
from .services.config_validator import ConfigValidator, UsageError
from .services.error_handler import ParseErrorHandler
from .services.expiry_calculator import ExpiryCalculator
from .services.logger import LoggerService
from .services.reporter import NagiosReporter


class CertificateExpiryCheck:
    """证书过期检查主类"""

    def __init__(self,
                 config: CheckConfig,
                 parser: Optional[CertificateParserInterface] = None,
                 clock: Optional[ClockInterface] = None,
                 logger_service: Optional[LoggerService] = None):
        """
        初始化检查

        Args:
            config: 检查配置
            parser: 证书解析器，默认由 CERT_PARSER 环境变量决定
            clock: 时钟，默认使用系统时钟
            logger_service: 日志服务
        """
        self.config = config
        self.reporter = NagiosReporter(obfuscate=config.obfuscate)
        self.logger_service = logger_service or LoggerService()
        self.logger_service.set_identity_formatter(self.reporter.display_identity)
        self.error_handler = ParseErrorHandler()
        self.reader = CertificateReader(
            parser=parser or get_certificate_parser(),
            error_handler=self.error_handler,
            logger_service=self.logger_service
        )
        self.expiry_calculator = ExpiryCalculator(
            warn_days=config.warn_days,
            crit_days=config.crit_days,
            clock=clock or SystemClock()
        )

        self._log_configuration()

    def _log_configuration(self):
        """记录检查配置信息"""
        config = {
            'directory': self.config.directory,
            'warn_days': self.config.warn_days,
            'crit_days': self.config.crit_days,
            'obfuscate': self.config.obfuscate,
            'parser': type(self.reader.parser).__name__,
            'log_level': self.logger_service.log_level
        }

        self.logger_service.log_configuration_info(config)

    def execute(self) -> CheckReport:
        """
        执行证书检查

        Returns:
            CheckReport: 检查结果
        """
        try:
            records = self.reader.read_directory(self.config.directory)

            summaries = self.expiry_calculator.summarize(records)
            for summary in summaries:
                self.logger_service.log_identity_summary(summary)

            report = self.reporter.build_report(summaries)

            self.logger_service.log_check_end()
            self.logger_service.log_execution_summary()

            return report

        except Exception as e:
            self.logger_service.logger.error(f"执行证书检查时发生严重错误: {str(e)}", exc_info=True)
            return self.reporter.unknown_report(e)


def main(argv: Optional[List[str]] = None) -> int:
    """
    命令行入口

    Args:
        argv: 参数列表，默认读取 sys.argv

    Returns:
        int: 退出码（0 OK, 1 WARN, 2 CRIT, 3 UNKNOWN）
    """
    if argv is None:
        argv = sys.argv[1:]

    validator = ConfigValidator(prog=os.path.basename(sys.argv[0]) or "check-smime-certificates")

    try:
        config = validator.parse_arguments(argv)
    except UsageError as e:
        if e.message:
            print(f"{validator.prog}: {e.message}")
        print(validator.format_usage())
        return int(Severity.UNKNOWN)

    validator.validate(config)

    report = CertificateExpiryCheck(config).execute()
    print(report.status_line)
    return report.exit_code


def run():
    """console_scripts 入口"""
    sys.exit(main())
