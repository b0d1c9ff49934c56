"""
错误处理服务
"""
import subprocess
from typing import Any, Dict
import logging

from .certificate_parser import CertificateParseError


class ParseErrorHandler:
    """证书解析错误处理器

    单个文件解析失败只影响该文件，不中断整个检查。
    """

    def __init__(self):
        """初始化解析错误处理器"""
        self.logger = logging.getLogger(__name__)

    def handle_parse_error(self, path: str, error: Exception) -> Dict[str, Any]:
        """
        处理证书解析错误

        Args:
            path: 证书文件路径
            error: 异常对象

        Returns:
            Dict[str, Any]: 错误处理结果
        """
        error_info = {
            'path': path,
            'error_type': type(error).__name__,
            'error_message': str(error),
            'suggested_action': self._get_suggested_action(error)
        }

        self.logger.warning(
            f"跳过无法解析的文件 {path}: {error_info['error_type']}: {error_info['error_message']}，"
            f"建议: {error_info['suggested_action']}"
        )

        return error_info

    def _get_suggested_action(self, error: Exception) -> str:
        """
        获取错误的建议处理方案

        Args:
            error: 异常对象

        Returns:
            str: 建议的处理方案
        """
        if isinstance(error, IsADirectoryError):
            return "目录中包含子目录，可以忽略"
        elif isinstance(error, PermissionError):
            return "检查文件权限，确保监控用户可读"
        elif isinstance(error, FileNotFoundError):
            return "文件在检查期间被删除，可以忽略"
        elif isinstance(error, CertificateParseError):
            if isinstance(error.__cause__, subprocess.TimeoutExpired):
                return "openssl 执行超时，检查系统负载"
            if isinstance(error.__cause__, OSError):
                return "无法执行 openssl，检查 OPENSSL_BIN 设置"
            return "文件不是有效的 PEM/DER 证书，检查证书目录内容"
        else:
            return "检查证书文件内容"
