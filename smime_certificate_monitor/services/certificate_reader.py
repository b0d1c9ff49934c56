"""
证书目录读取服务
"""
import os
from typing import List, Optional
import logging

from ..interfaces import CertificateParserInterface
from ..models import CertificateRecord
from .certificate_parser import X509CertificateParser
from .error_handler import ParseErrorHandler
from .logger import LoggerService


class CertificateReader:
    """证书读取器

    目录中的每个条目都视为候选证书，不按扩展名过滤。
    """

    def __init__(self,
                 parser: Optional[CertificateParserInterface] = None,
                 error_handler: Optional[ParseErrorHandler] = None,
                 logger_service: Optional[LoggerService] = None):
        """
        初始化证书读取器

        Args:
            parser: 证书解析器，默认使用 cryptography 解析器
            error_handler: 解析错误处理器
            logger_service: 日志服务
        """
        self.parser = parser or X509CertificateParser()
        self.error_handler = error_handler or ParseErrorHandler()
        self.logger_service = logger_service
        self.logger = logging.getLogger(__name__)

    def list_candidates(self, directory: str) -> List[str]:
        """
        列出目录中的候选证书文件

        Args:
            directory: 证书目录

        Returns:
            List[str]: 按文件名排序的路径列表，目录不存在时为空
        """
        try:
            names = sorted(os.listdir(directory))
        except (FileNotFoundError, NotADirectoryError):
            self.logger.warning(f"证书目录不存在: {directory}")
            return []
        except PermissionError as e:
            self.logger.warning(f"无法读取证书目录 {directory}: {str(e)}")
            return []

        return [os.path.join(directory, name) for name in names]

    def read_directory(self, directory: str) -> List[CertificateRecord]:
        """
        读取目录中所有带邮箱身份的证书

        Args:
            directory: 证书目录

        Returns:
            List[CertificateRecord]: 证书记录列表
        """
        candidates = self.list_candidates(directory)

        if self.logger_service:
            self.logger_service.log_check_start(directory, len(candidates))

        records = []
        for path in candidates:
            record = self.read_file(path)
            if record is not None:
                records.append(record)

        return records

    def read_file(self, path: str) -> Optional[CertificateRecord]:
        """
        读取单个证书文件，解析失败时返回 None 而不中断检查

        Args:
            path: 证书文件路径

        Returns:
            Optional[CertificateRecord]: 证书记录
        """
        try:
            record = self.parser.parse(path)
        except Exception as e:
            error_info = self.error_handler.handle_parse_error(path, e)
            if self.logger_service:
                self.logger_service.log_error(error_info)
            return None

        if record is None:
            if self.logger_service:
                self.logger_service.log_skipped_file(path)
            return None

        if self.logger_service:
            self.logger_service.log_certificate_record(record)

        return record
