"""
服务接口定义
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from .models import CertificateRecord, IdentitySummary


class CertificateParserInterface(ABC):
    """证书解析器接口"""

    @abstractmethod
    def parse(self, path: str) -> Optional[CertificateRecord]:
        """解析单个证书文件，没有邮箱身份时返回 None"""
        pass


class ClockInterface(ABC):
    """时钟接口"""

    @abstractmethod
    def now(self) -> int:
        """当前时间（epoch 秒）"""
        pass


class LoggerServiceInterface(ABC):
    """日志服务接口"""

    @abstractmethod
    def log_check_start(self, directory: str, file_count: int):
        """记录检查开始"""
        pass

    @abstractmethod
    def log_certificate_record(self, record: CertificateRecord):
        """记录解析出的证书"""
        pass

    @abstractmethod
    def log_identity_summary(self, summary: IdentitySummary):
        """记录身份汇总结果"""
        pass

    @abstractmethod
    def log_error(self, error_info: Dict[str, Any]):
        """记录解析失败的文件"""
        pass
