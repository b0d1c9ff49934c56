"""
时钟服务
"""
import time

from ..interfaces import ClockInterface


class SystemClock(ClockInterface):
    """系统时钟"""

    def now(self) -> int:
        return int(time.time())


class FixedClock(ClockInterface):
    """固定时钟，用于可复现的检查"""

    def __init__(self, instant: int):
        """
        初始化固定时钟

        Args:
            instant: 固定的时间点（epoch 秒）
        """
        self.instant = int(instant)

    def now(self) -> int:
        return self.instant
