"""
Preview admission control.

Decides how much of a formatted result a presentation layer should
render: the whole text, a truncated head, a short summary or nothing.
"""

from dataclasses import dataclass
from enum import Enum

from config.constants import PREVIEW_DISABLE_THRESHOLD, PREVIEW_HARD_CAP, PREVIEW_SOFT_CAP

TRUNCATION_NOTICE = "\n\n... [preview truncated: {remaining:,} more characters] ..."
SUMMARY_NOTICE = "\n\n... [document too large to preview: {size:,} characters; showing the opening only] ..."


class PreviewMode(Enum):
    FULL = "full"
    TRUNCATED = "truncated"
    SUMMARY = "summary"
    DISABLED = "disabled"


@dataclass(frozen=True)
class PreviewDecision:
    mode: PreviewMode
    text: str = ""
    truncated: bool = False


@dataclass(frozen=True)
class PreviewPolicy:
    """
    Size caps for previews.

    Up to soft_cap the text is shown in full; up to hard_cap it is cut at
    soft_cap; beyond hard_cap a summary (the opening plus a size notice)
    is shown; at or beyond disable_threshold there is no preview.
    """
    soft_cap: int = PREVIEW_SOFT_CAP
    hard_cap: int = PREVIEW_HARD_CAP
    disable_threshold: int = PREVIEW_DISABLE_THRESHOLD

    def __post_init__(self):
        if not (0 < self.soft_cap <= self.hard_cap <= self.disable_threshold):
            raise ValueError(
                "Preview caps must satisfy 0 < soft_cap <= hard_cap <= disable_threshold"
            )

    @classmethod
    def from_settings(cls, settings) -> "PreviewPolicy":
        return cls(
            soft_cap=settings.preview_soft_cap,
            hard_cap=settings.preview_hard_cap,
            disable_threshold=settings.preview_disable_threshold,
        )

    def decide(self, text: str) -> PreviewDecision:
        size = len(text)
        if size >= self.disable_threshold:
            return PreviewDecision(PreviewMode.DISABLED)
        if size <= self.soft_cap:
            return PreviewDecision(PreviewMode.FULL, text)
        if size <= self.hard_cap:
            head = text[:self.soft_cap]
            return PreviewDecision(
                PreviewMode.TRUNCATED,
                head + TRUNCATION_NOTICE.format(remaining=size - self.soft_cap),
                truncated=True,
            )
        return PreviewDecision(
            PreviewMode.SUMMARY,
            text[:self.soft_cap] + SUMMARY_NOTICE.format(size=size),
            truncated=True,
        )
