"""
命令行参数与配置验证服务
"""
import argparse
import os
from typing import List, Optional
import logging

from ..models import CheckConfig

MIN_ARGUMENTS = 3

# (参数, 目标字段, 参数类型或动作, 说明)
FLAGS = [
    ('-w', 'warn_days', int, 'warning threshold in days'),
    ('-c', 'crit_days', int, 'critical threshold in days'),
    ('-d', 'directory', str, 'directory to check for expiring certificates'),
    ('-o', 'obfuscate', 'store_true', 'obfuscate email addresses, replace the user part with xxx'),
    ('-h', 'help', 'store_true', 'print this help'),
]


class UsageError(Exception):
    """参数错误或请求帮助，需要输出用法并以 UNKNOWN 退出"""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "")
        self.message = message


class CheckArgumentParser(argparse.ArgumentParser):
    """参数错误时抛出 UsageError 而不是以退出码 2 退出"""

    def error(self, message):
        raise UsageError(message)


class ConfigValidator:
    """配置验证器"""

    def __init__(self, prog: str = "check-smime-certificates"):
        """
        初始化配置验证器

        Args:
            prog: 用法说明中显示的程序名
        """
        self.prog = prog
        self.logger = logging.getLogger(__name__)
        self.parser = self._build_parser()

    def _build_parser(self) -> CheckArgumentParser:
        parser = CheckArgumentParser(prog=self.prog, add_help=False)
        for flag, dest, kind, help_text in FLAGS:
            if kind == 'store_true':
                parser.add_argument(flag, dest=dest, action='store_true', help=help_text)
            else:
                parser.add_argument(flag, dest=dest, type=kind, required=True, help=help_text)
        return parser

    def format_usage(self) -> str:
        """
        生成用法说明

        Returns:
            str: 多行用法文本
        """
        lines = [f"usage: {self.prog} [ -w value -c value -d $CERT_DIR -o -h ]"]
        for flag, _, _, help_text in FLAGS:
            lines.append(f"  {flag}  {help_text}")
        return "\n".join(lines)

    def parse_arguments(self, argv: List[str]) -> CheckConfig:
        """
        解析命令行参数

        Args:
            argv: 不含程序名的参数列表

        Returns:
            CheckConfig: 不可变的检查配置

        Raises:
            UsageError: 参数不足、未知参数或请求帮助
        """
        # 不依赖默认值，参数不足时直接输出用法
        if len(argv) < MIN_ARGUMENTS:
            raise UsageError()

        if '-h' in argv:
            raise UsageError()

        args = self.parser.parse_args(argv)

        return CheckConfig(
            warn_days=args.warn_days,
            crit_days=args.crit_days,
            directory=args.directory,
            obfuscate=args.obfuscate
        )

    def validate(self, config: CheckConfig) -> List[str]:
        """
        检查配置中不影响运行的问题，逐条记录为警告

        Args:
            config: 检查配置

        Returns:
            List[str]: 警告列表
        """
        warnings = []

        if config.crit_days > config.warn_days:
            warnings.append(
                f"严重阈值 {config.crit_days} 大于警告阈值 {config.warn_days}，不会产生 WARN 状态"
            )

        if not os.path.isdir(config.directory):
            warnings.append(f"证书目录不存在: {config.directory}")

        for warning in warnings:
            self.logger.warning(warning)

        return warnings
