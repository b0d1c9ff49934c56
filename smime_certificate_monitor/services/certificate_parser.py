"""
证书解析服务
"""
import os
import re
import subprocess
from datetime import datetime, timezone
from typing import Optional
import logging

from cryptography import x509
from cryptography.x509.oid import NameOID

from ..interfaces import CertificateParserInterface
from ..models import CertificateRecord


class CertificateParseError(Exception):
    """证书无法解析"""


class X509CertificateParser(CertificateParserInterface):
    """基于 cryptography 库的证书解析器"""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def parse(self, path: str) -> Optional[CertificateRecord]:
        """
        解析证书文件（PEM 或 DER）

        Args:
            path: 证书文件路径

        Returns:
            Optional[CertificateRecord]: 证书记录，主题中没有邮箱时返回 None

        Raises:
            CertificateParseError: 文件不是有效的证书
        """
        with open(path, 'rb') as f:
            data = f.read()

        cert = self._load_certificate(data, path)

        identity = self._parse_identity(cert)
        if not identity:
            return None

        return CertificateRecord(
            identity=identity,
            expires_at=self._parse_expiry(cert),
            source=path
        )

    def _load_certificate(self, data: bytes, path: str) -> x509.Certificate:
        try:
            if b'-----BEGIN' in data:
                return x509.load_pem_x509_certificate(data)
            return x509.load_der_x509_certificate(data)
        except ValueError as e:
            raise CertificateParseError(f"无法加载证书 {path}: {str(e)}") from e

    def _parse_identity(self, cert: x509.Certificate) -> Optional[str]:
        """
        读取主题中的 emailAddress 属性

        Args:
            cert: 证书对象

        Returns:
            Optional[str]: 第一个邮箱地址
        """
        attributes = cert.subject.get_attributes_for_oid(NameOID.EMAIL_ADDRESS)
        for attribute in attributes:
            value = str(attribute.value).strip()
            if value:
                return value
        return None

    def _parse_expiry(self, cert: x509.Certificate) -> Optional[int]:
        try:
            return int(cert.not_valid_after_utc.timestamp())
        except (ValueError, OverflowError) as e:
            self.logger.warning(f"证书过期时间无效: {str(e)}")
            return None


class OpenSSLCommandParser(CertificateParserInterface):
    """调用 openssl 命令行工具的证书解析器"""

    DATE_FORMAT = '%b %d %H:%M:%S %Y %Z'

    # 兼容 "emailAddress = a@b.com, CN = x" 与旧版 "/emailAddress=a@b.com/CN=x"
    EMAIL_PATTERN = re.compile(r'emailAddress\s*=\s*([^,/\n]+)')

    def __init__(self, openssl_bin: Optional[str] = None, timeout: int = 10):
        """
        初始化 openssl 解析器

        Args:
            openssl_bin: openssl 可执行文件路径，默认读取 OPENSSL_BIN 环境变量
            timeout: 单次命令超时时间（秒）
        """
        self.openssl_bin = openssl_bin or os.getenv('OPENSSL_BIN', 'openssl')
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

    def parse(self, path: str) -> Optional[CertificateRecord]:
        subject = self._run_x509(path, '-subject')
        identity = self._parse_identity(subject)
        if not identity:
            return None

        end_date = self._run_x509(path, '-enddate')
        return CertificateRecord(
            identity=identity,
            expires_at=self._parse_expiry_date(end_date),
            source=path
        )

    def _run_x509(self, path: str, option: str) -> str:
        """
        执行 openssl x509 命令

        Args:
            path: 证书文件路径
            option: 要输出的字段（-subject 或 -enddate）

        Returns:
            str: 命令标准输出，openssl 返回非零退出码时为空字符串

        Raises:
            CertificateParseError: openssl 无法执行或超时
        """
        try:
            result = subprocess.run(
                [self.openssl_bin, 'x509', option, '-noout', '-in', path],
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise CertificateParseError(f"无法执行 openssl: {str(e)}") from e

        if result.returncode != 0:
            self.logger.debug(
                f"openssl x509 {option} 退出码 {result.returncode} ({path}): {result.stderr.strip()}"
            )
            return ""

        return result.stdout

    def _parse_identity(self, output: str) -> Optional[str]:
        for line in output.splitlines():
            if not line.startswith('subject'):
                continue
            match = self.EMAIL_PATTERN.search(line)
            if match:
                return match.group(1).strip() or None
        return None

    def _parse_expiry_date(self, output: str) -> Optional[int]:
        """
        解析 notAfter 字段

        Args:
            output: openssl -enddate 输出，如 'notAfter=Dec 31 23:59:59 2024 GMT'

        Returns:
            Optional[int]: 过期时间（epoch 秒），无法解析时返回 None
        """
        not_after = None
        for line in output.splitlines():
            if line.startswith('notAfter='):
                not_after = line.split('=', 1)[1].strip()
                break

        if not not_after:
            self.logger.warning("证书中未找到过期时间信息")
            return None

        try:
            expiry_date = datetime.strptime(not_after, self.DATE_FORMAT)
        except ValueError:
            self.logger.warning(f"无法解析证书过期时间: {not_after}")
            return None

        return int(expiry_date.replace(tzinfo=timezone.utc).timestamp())


def get_certificate_parser(name: Optional[str] = None) -> CertificateParserInterface:
    """
    根据名称创建证书解析器

    Args:
        name: 解析器名称（cryptography 或 openssl），默认读取 CERT_PARSER 环境变量

    Returns:
        CertificateParserInterface: 证书解析器
    """
    name = (name or os.getenv('CERT_PARSER', 'cryptography')).strip().lower()

    if name == 'openssl':
        return OpenSSLCommandParser()

    if name != 'cryptography':
        logging.getLogger(__name__).warning(f"未知的证书解析器 {name}，使用 cryptography")

    return X509CertificateParser()
