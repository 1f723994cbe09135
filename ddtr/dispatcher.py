"""Fan one source text out to every target language under a shared rate limit."""
import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from aiolimiter import AsyncLimiter
from tqdm.asyncio import tqdm

from ddtr.errors import BaiduApiError
from ddtr.languages import LanguageCode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TranslationJob:
    """One request: ``source_text`` from ``from_language`` into ``to_language``."""
    index: int
    source_text: str
    from_language: LanguageCode
    to_language: LanguageCode


@dataclass(frozen=True)
class Success:
    to_language: LanguageCode
    variants: Tuple[str, ...]

    @property
    def translated_text(self) -> str:
        """
        The text that gets written to the resource file.

        When the service returns several candidate translations only the first
        one is kept.
        """
        return self.variants[0]


@dataclass(frozen=True)
class Failure:
    to_language: LanguageCode
    reason: str


TranslationOutcome = Union[Success, Failure]


async def _run_job(
        translator,
        job: TranslationJob,
        semaphore: asyncio.Semaphore,
        rate_limiter: AsyncLimiter
) -> Tuple[int, TranslationOutcome]:
    """
    Run a single translation job and convert every error into a Failure.

    Returns:
        Tuple[int, TranslationOutcome]: The job index and its outcome.
    """
    target = job.to_language
    async with semaphore, rate_limiter:
        logger.debug("Requesting '%s' translation (job %d).", target.code, job.index)
        try:
            variants = await translator.translate(job.source_text, job.from_language, target)
        except BaiduApiError as api_exc:
            logger.error("API error while translating to '%s': %s", target.code, api_exc)
            return job.index, Failure(target, str(api_exc))
        except Exception as general_exc:
            logger.error("Unexpected error while translating to '%s': %s", target.code, general_exc, exc_info=True)
            return job.index, Failure(target, f"{general_exc.__class__.__name__}: {general_exc}")

    if not variants:
        logger.error("Translation service returned no result for '%s'.", target.code)
        return job.index, Failure(target, "empty translation result")

    if len(variants) > 1:
        logger.debug("Received %d variants for '%s'; keeping the first.", len(variants), target.code)
    return job.index, Success(target, tuple(variants))


async def dispatch(
        translator,
        text: str,
        from_language: LanguageCode,
        targets: Sequence[LanguageCode],
        *,
        max_concurrent_api_calls: int = 1,
        request_interval: float = 1.0,
        show_progress: bool = False
) -> List[TranslationOutcome]:
    """
    Translate ``text`` into every language in ``targets``.

    At most ``max_concurrent_api_calls`` requests are in flight at any time, and
    successive requests start at least ``request_interval`` seconds apart. Jobs
    are started in target order. A failing job never cancels the others.

    Args:
        translator: Object exposing ``async translate(text, from_language, to_language) -> List[str]``.
        text (str): The source text.
        from_language (LanguageCode): The language of ``text``.
        targets (Sequence[LanguageCode]): Target languages, in output order.
        max_concurrent_api_calls (int): Maximum number of outstanding requests.
        request_interval (float): Minimum number of seconds between request starts.
        show_progress (bool): Display a tqdm progress bar.

    Returns:
        List[TranslationOutcome]: One outcome per target, in the order of ``targets``.
    """
    if max_concurrent_api_calls < 1:
        raise ValueError("max_concurrent_api_calls must be at least 1")
    if request_interval <= 0:
        raise ValueError("request_interval must be positive")

    jobs = [
        TranslationJob(index, text, from_language, target)
        for index, target in enumerate(targets)
    ]
    if not jobs:
        return []

    semaphore = asyncio.Semaphore(max_concurrent_api_calls)
    # A bucket of size one drains in request_interval seconds, so each
    # acquisition waits until that long after the previous one.
    rate_limiter = AsyncLimiter(max_rate=1, time_period=request_interval)

    # Create the tasks up front so requests are issued in target order.
    tasks = [
        asyncio.create_task(_run_job(translator, job, semaphore, rate_limiter))
        for job in jobs
    ]

    outcomes: List[Optional[TranslationOutcome]] = [None] * len(jobs)
    for coro in tqdm.as_completed(tasks, desc="Translating", unit="language", disable=not show_progress):
        index, outcome = await coro
        outcomes[index] = outcome

    return outcomes  # type: ignore[return-value]
