"""Studio session state and its transitions."""

import logging
import uuid
from dataclasses import dataclass, field

from photolab.models import GenerationState, ProductImage

logger = logging.getLogger(__name__)

INITIAL_PROGRESS = 5


@dataclass
class StudioSession:
    """State of one studio session.

    Only the active generation sequence mutates it while loading.
    """

    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    source_image: str | None = None
    style_prompt: str = ""
    results: list[ProductImage] = field(default_factory=list)
    status: GenerationState = GenerationState.IDLE
    progress: int = 0
    current_task: str = ""
    error: str | None = None
    next_angle_index: int = 0
    rate_limited: bool = False
    cooldown_until: float | None = None
    upload_token: str | None = None

    @property
    def is_loading(self) -> bool:
        return self.status is GenerationState.LOADING

    @property
    def can_generate(self) -> bool:
        """Whether the run button should be enabled."""
        return bool(self.source_image) and not self.is_loading

    def cooldown_remaining(self, now: float) -> float:
        """Seconds left before a rate-limited sequence may resume."""
        if self.cooldown_until is None:
            return 0.0
        return max(0.0, self.cooldown_until - now)

    def can_resume(self, now: float) -> bool:
        return (
            self.rate_limited
            and not self.is_loading
            and bool(self.source_image)
            and self.cooldown_remaining(now) == 0
        )

    def set_source_image(self, uri: str, token: str | None = None) -> None:
        """Replace the source image; previous results no longer apply."""
        self.source_image = uri
        self.upload_token = token
        self.results = []
        self.error = None
        self.status = GenerationState.IDLE
        self.progress = 0
        self.current_task = ""
        self._clear_resume()
        logger.info(f"[SESSION {self.id}] Source image replaced ({len(uri)} chars)")

    def reject_upload(self, message: str, token: str | None = None) -> None:
        """Record a rejected upload without touching the current source."""
        self.upload_token = token
        self.error = message

    def begin(self, keep_results: bool = False) -> None:
        """Enter LOADING for a fresh run or a resume."""
        if not keep_results:
            self.results = []
            self.next_angle_index = 0
            self.progress = INITIAL_PROGRESS
        self.status = GenerationState.LOADING
        self.error = None
        self.current_task = ""
        self.rate_limited = False
        self.cooldown_until = None

    def complete(self) -> None:
        self.status = GenerationState.SUCCESS
        self.progress = 100
        self.current_task = ""
        self._clear_resume()

    def fail(self, message: str) -> None:
        """Abort the sequence; results obtained so far are kept."""
        self.status = GenerationState.ERROR
        self.error = message
        self.current_task = ""
        self._clear_resume()

    def pause_for_rate_limit(self, cooldown_until: float, message: str) -> None:
        """Abort on a rate limit, keeping the position for a later resume."""
        self.status = GenerationState.ERROR
        self.error = message
        self.current_task = ""
        self.rate_limited = True
        self.cooldown_until = cooldown_until

    def reset(self) -> None:
        """Clear everything and return to IDLE."""
        self.source_image = None
        self.style_prompt = ""
        self.results = []
        self.status = GenerationState.IDLE
        self.progress = 0
        self.current_task = ""
        self.error = None
        self.upload_token = None
        self._clear_resume()
        logger.info(f"[SESSION {self.id}] Session reset")

    def _clear_resume(self) -> None:
        self.next_angle_index = 0
        self.rate_limited = False
        self.cooldown_until = None
