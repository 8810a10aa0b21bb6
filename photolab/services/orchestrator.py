"""Sequential multi-angle generation with pacing and rate-limit cooldown."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol

from photolab.config import GenerationConfig, get_config
from photolab.errors import (
    CooldownActiveError,
    MissingSourceImageError,
    NothingToResumeError,
    RateLimitError,
    StudioError,
)
from photolab.models import ANGLES, Angle, ProductImage
from photolab.session import StudioSession

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[StudioSession], None]


class AngleGenerator(Protocol):
    async def generate_angle(
        self, source_image: str, angle_prompt: str, style_prompt: str = ""
    ) -> str: ...


def progress_after(index: int) -> int:
    """Progress percentage once the angle at ``index`` has completed."""
    return min(100, 10 + (index + 1) * 30)


class GenerationOrchestrator:
    """Runs the three-angle generation sequence for a session."""

    def __init__(
        self,
        client: AngleGenerator,
        config: GenerationConfig | None = None,
        angles: Sequence[Angle] = ANGLES,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize orchestrator.

        Args:
            client: Wrapper performing one generation call per angle
            config: Pacing configuration. If None, uses global config.
            angles: Angle presets to render, in order
            sleep: Awaitable delay, replaced in tests
            clock: Monotonic clock used for cooldown deadlines
        """
        self.client = client
        self.config = config or get_config().generation
        self.angles = tuple(angles)
        self._sleep = sleep
        self._clock = clock

    async def run(
        self, session: StudioSession, on_progress: ProgressCallback | None = None
    ) -> list[ProductImage]:
        """Start a fresh sequence, discarding previous results.

        Returns:
            Results obtained by this run (possibly partial)
        """
        if not session.source_image:
            session.fail(MissingSourceImageError().message)
            self._notify(session, on_progress)
            return []

        logger.info(
            f"[SESSION {session.id}] Starting generation: {len(self.angles)} angles, "
            f"style: {session.style_prompt[:50] or 'default'}"
        )
        session.begin()
        self._notify(session, on_progress)
        return await self._run_from(session, 0, on_progress)

    async def resume(
        self, session: StudioSession, on_progress: ProgressCallback | None = None
    ) -> list[ProductImage]:
        """Continue a rate-limited sequence from the last completed angle.

        Raises:
            NothingToResumeError: If the session was not interrupted by a rate limit
            CooldownActiveError: If the cooldown has not elapsed yet
        """
        if not session.rate_limited or session.next_angle_index >= len(self.angles):
            raise NothingToResumeError()

        remaining = session.cooldown_remaining(self._clock())
        if remaining > 0:
            raise CooldownActiveError(remaining)

        start = session.next_angle_index
        logger.info(f"[SESSION {session.id}] Resuming generation at angle {start + 1}/{len(self.angles)}")
        session.begin(keep_results=True)
        self._notify(session, on_progress)
        return await self._run_from(session, start, on_progress)

    async def _run_from(
        self,
        session: StudioSession,
        start: int,
        on_progress: ProgressCallback | None,
    ) -> list[ProductImage]:
        produced: list[ProductImage] = []

        try:
            for index in range(start, len(self.angles)):
                angle = self.angles[index]
                session.current_task = f"Rendering {angle.label}..."
                self._notify(session, on_progress)

                # Pace consecutive calls to stay under the provider rate limit
                if index > start:
                    await self._sleep(self.config.request_delay_seconds)

                url = await self.client.generate_angle(
                    session.source_image, angle.prompt, session.style_prompt
                )
                image = ProductImage.from_angle(angle, url)
                session.results.append(image)
                produced.append(image)
                session.next_angle_index = index + 1
                session.progress = progress_after(index)
                logger.info(f"[SESSION {session.id}] Angle {index + 1}/{len(self.angles)} done: {angle.label}")
                self._notify(session, on_progress)

        except RateLimitError as e:
            cooldown = self.config.rate_limit_cooldown_seconds
            logger.warning(
                f"[SESSION {session.id}] Rate limited at angle {session.next_angle_index + 1}, "
                f"cooldown {cooldown}s, {len(session.results)} result(s) kept"
            )
            session.pause_for_rate_limit(self._clock() + cooldown, e.message)
            self._notify(session, on_progress)
            return produced

        except StudioError as e:
            logger.warning(f"[SESSION {session.id}] Generation aborted: {type(e).__name__}: {e}")
            session.fail(e.message)
            self._notify(session, on_progress)
            return produced

        except Exception as e:
            logger.error(f"[SESSION {session.id}] Generation failed: {e}", exc_info=True)
            session.fail(str(e) or StudioError.default_message)
            self._notify(session, on_progress)
            return produced

        session.complete()
        logger.info(f"[SESSION {session.id}] Generation complete: {len(session.results)} image(s)")
        self._notify(session, on_progress)
        return produced

    @staticmethod
    def _notify(session: StudioSession, on_progress: ProgressCallback | None) -> None:
        if on_progress is not None:
            on_progress(session)
