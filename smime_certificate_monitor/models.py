"""
数据模型定义
"""
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, List


class Severity(IntEnum):
    """检查状态（数值即 Nagios 退出码）"""
    OK = 0
    WARN = 1
    CRIT = 2
    UNKNOWN = 3

    @property
    def label(self) -> str:
        """状态行前缀"""
        return self.name


@dataclass
class CertificateRecord:
    """单个证书文件解析出的身份与过期时间"""
    identity: str
    expires_at: Optional[int]
    source: str = ""


@dataclass(frozen=True)
class CheckConfig:
    """检查配置（命令行解析后不可变）"""
    warn_days: int
    crit_days: int
    directory: str
    obfuscate: bool = False


@dataclass
class IdentitySummary:
    """按身份汇总的过期信息"""
    identity: str
    latest_expires_at: Optional[int]
    day_diff: Optional[int]
    severity: Severity

    @property
    def is_flagged(self) -> bool:
        """是否需要在摘要中报告（WARN 或 CRIT）"""
        return self.severity in (Severity.WARN, Severity.CRIT)


@dataclass
class CheckReport:
    """检查结果"""
    severity: Severity
    summary: str
    expiring_count: int
    summaries: List[IdentitySummary] = field(default_factory=list)

    @property
    def status_line(self) -> str:
        """Nagios 格式的状态行，带性能数据"""
        if self.severity == Severity.OK:
            return "OK - no certificates to expire soon | expiring_certificates=0"
        return (
            f"{self.severity.label} - {self.summary} "
            f"| expiring_certificates={self.expiring_count}"
        )

    @property
    def exit_code(self) -> int:
        return int(self.severity)
