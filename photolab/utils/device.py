"""Client device detection from the User-Agent header."""

import re
from dataclasses import dataclass

_MOBILE_RE = re.compile(r"Android|webOS|iPhone|iPad|iPod|BlackBerry|IEMobile|Opera Mini", re.I)
_IOS_RE = re.compile(r"iPhone|iPad|iPod", re.I)


@dataclass(frozen=True)
class DeviceInfo:
    is_mobile: bool = False
    is_ios: bool = False

    @property
    def is_pc(self) -> bool:
        return not self.is_mobile


def detect_device(user_agent: str | None) -> DeviceInfo:
    """Classify the browser by its User-Agent string."""
    ua = user_agent or ""
    return DeviceInfo(
        is_mobile=bool(_MOBILE_RE.search(ua)),
        is_ios=bool(_IOS_RE.search(ua)),
    )
