"""
Nagios 报告服务
"""
from typing import List, Optional

from ..models import CheckReport, IdentitySummary, Severity

OBFUSCATED_LOCAL_PART = "xxx"


class NagiosReporter:
    """Nagios/Check_MK 格式的报告生成器"""

    def __init__(self, obfuscate: bool = False):
        """
        初始化报告生成器

        Args:
            obfuscate: 是否隐藏邮箱地址的用户名部分
        """
        self.obfuscate = obfuscate

    def obfuscate_identity(self, identity: str) -> str:
        """
        用 xxx 替换邮箱地址的用户名部分

        Args:
            identity: 邮箱地址

        Returns:
            str: 隐藏后的地址，没有 @ 时整体替换为 xxx
        """
        if '@' not in identity:
            return OBFUSCATED_LOCAL_PART
        _, domain = identity.rsplit('@', 1)
        return f"{OBFUSCATED_LOCAL_PART}@{domain}"

    def display_identity(self, identity: str) -> str:
        if self.obfuscate:
            return self.obfuscate_identity(identity)
        return identity

    def format_clause(self, summary: IdentitySummary) -> Optional[str]:
        """
        生成单个身份的过期描述

        Args:
            summary: 身份汇总

        Returns:
            Optional[str]: 描述，状态为 OK 时返回 None
        """
        if not summary.is_flagged:
            return None

        identity = self.display_identity(summary.identity)
        day_diff = summary.day_diff

        if day_diff == 0:
            return f"{identity} expires today"
        elif day_diff == 1:
            return f"{identity} expires within 24 hours"
        elif day_diff > 1:
            return f"{identity} expires in {day_diff} days"
        elif day_diff == -1:
            return f"{identity} expired within last 24 hours"
        else:
            return f"{identity} expired {abs(day_diff)} days ago"

    def build_report(self, summaries: List[IdentitySummary]) -> CheckReport:
        """
        汇总所有身份生成检查结果

        Args:
            summaries: 身份汇总列表

        Returns:
            CheckReport: 检查结果
        """
        clauses = []
        for summary in summaries:
            clause = self.format_clause(summary)
            if clause is not None:
                clauses.append(clause)

        severity = max((summary.severity for summary in summaries), default=Severity.OK)

        return CheckReport(
            severity=severity,
            summary=", ".join(clauses),
            expiring_count=len(clauses),
            summaries=summaries
        )

    def unknown_report(self, error: Exception) -> CheckReport:
        """检查本身失败时的 UNKNOWN 结果"""
        return CheckReport(
            severity=Severity.UNKNOWN,
            summary=f"{type(error).__name__}: {str(error)}",
            expiring_count=0
        )
