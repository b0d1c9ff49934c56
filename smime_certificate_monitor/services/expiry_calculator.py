"""
证书过期计算服务
"""
from typing import Dict, List, Optional

from ..interfaces import ClockInterface
from ..models import CertificateRecord, IdentitySummary, Severity
from .clock import SystemClock

SECONDS_PER_DAY = 86400

# 先减去半天再向零取整，结果偏向较晚的日历日
HALF_DAY_OFFSET = 43200


class ExpiryCalculator:
    """证书过期计算器"""

    def __init__(self, warn_days: int, crit_days: int, clock: Optional[ClockInterface] = None):
        """
        初始化过期计算器

        Args:
            warn_days: 警告阈值（天）
            crit_days: 严重阈值（天）
            clock: 时钟，默认使用系统时钟
        """
        self.warn_days = warn_days
        self.crit_days = crit_days
        self.clock = clock or SystemClock()

    def calculate_day_diff(self, expires_at: Optional[int], now: int) -> Optional[int]:
        """
        计算距离过期的天数

        Args:
            expires_at: 过期时间（epoch 秒）
            now: 参考时间（epoch 秒）

        Returns:
            Optional[int]: 剩余天数（负数表示已过期），过期时间未知时为 None
        """
        if expires_at is None:
            return None
        delta = expires_at - now - HALF_DAY_OFFSET
        days = abs(delta) // SECONDS_PER_DAY
        return days if delta >= 0 else -days

    def classify(self, day_diff: Optional[int]) -> Severity:
        """
        根据阈值判断状态，严重阈值优先

        Args:
            day_diff: 剩余天数

        Returns:
            Severity: 状态
        """
        if day_diff is None:
            return Severity.OK
        if day_diff <= self.crit_days:
            return Severity.CRIT
        if day_diff <= self.warn_days:
            return Severity.WARN
        return Severity.OK

    def latest_expirations(self, records: List[CertificateRecord]) -> Dict[str, Optional[int]]:
        """
        按身份分组，保留最晚的过期时间

        Args:
            records: 证书记录列表

        Returns:
            Dict[str, Optional[int]]: 身份到最晚过期时间的映射
        """
        latest: Dict[str, Optional[int]] = {}

        for record in records:
            current = latest.get(record.identity)
            if record.identity not in latest:
                latest[record.identity] = record.expires_at
            elif record.expires_at is not None and (current is None or record.expires_at > current):
                latest[record.identity] = record.expires_at

        return latest

    def summarize(self, records: List[CertificateRecord], now: Optional[int] = None) -> List[IdentitySummary]:
        """
        为每个身份生成汇总

        Args:
            records: 证书记录列表
            now: 参考时间，默认取时钟当前时间

        Returns:
            List[IdentitySummary]: 按身份排序的汇总列表
        """
        if now is None:
            now = self.clock.now()

        summaries = []
        for identity, expires_at in sorted(self.latest_expirations(records).items()):
            day_diff = self.calculate_day_diff(expires_at, now)
            summaries.append(IdentitySummary(
                identity=identity,
                latest_expires_at=expires_at,
                day_diff=day_diff,
                severity=self.classify(day_diff)
            ))

        return summaries
