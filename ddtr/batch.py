"""End-to-end translation of one key into every configured resource file."""
import logging
import os
import time
from dataclasses import dataclass, field
from typing import List, Optional

from ddtr.app_config import AppConfig
from ddtr.dispatcher import Failure, dispatch
from ddtr.errors import OutputDirectoryError
from ddtr.languages import LanguageCode
from ddtr.properties_file import append_entry, resolve_properties_path

logger = logging.getLogger(__name__)

STATUS_WRITTEN = 'written'
STATUS_TRANSLATION_FAILED = 'translation_failed'
STATUS_WRITE_FAILED = 'write_failed'


@dataclass
class LanguageReport:
    """What happened to one language during a batch."""
    language: LanguageCode
    status: str
    path: str
    detail: Optional[str] = None


@dataclass
class BatchReport:
    """Outcome of one run: a row per target language, the default file write, and wall-clock seconds."""
    key: str
    languages: List[LanguageReport] = field(default_factory=list)
    default_file: Optional[LanguageReport] = None
    elapsed: float = 0.0

    @property
    def failed(self) -> List[LanguageReport]:
        return [report for report in self.languages if report.status != STATUS_WRITTEN]


def _write(output_dir: str, file_base_name: str, language: LanguageCode, suffix: Optional[str],
           key: str, value: str) -> LanguageReport:
    """Append one entry, turning I/O and encoding errors into a report instead of an exception."""
    path = resolve_properties_path(output_dir, file_base_name, suffix)
    try:
        append_entry(output_dir, file_base_name, suffix, key, value)
    except (OSError, ValueError) as io_exc:
        logger.error("Failed to write %r=%r to '%s': %s", key, value, path, io_exc)
        return LanguageReport(language, STATUS_WRITE_FAILED, path, str(io_exc))
    return LanguageReport(language, STATUS_WRITTEN, path)


async def run_batch(
        config: AppConfig,
        text: str,
        key: str,
        translator,
        *,
        show_progress: bool = False
) -> BatchReport:
    """
    Translate ``text`` into every target language and append the results under ``key``.

    Successful translations go to ``{base_filename}_{code}.properties``. Failed
    languages are logged and nothing is written for them. The source text is
    always written to ``{default_filename}.properties`` once, after every
    language has been handled.

    Args:
        config (AppConfig): The loaded configuration.
        text (str): The text to translate, in the default language.
        key (str): The resource key.
        translator: Object exposing ``async translate(text, from_language, to_language)``.
        show_progress (bool): Display a progress bar while translating.

    Returns:
        BatchReport: Per-language status and elapsed wall-clock time.

    Raises:
        OutputDirectoryError: If the output directory has disappeared since the
            configuration was loaded. Nothing is translated or written in that case.
    """
    start = time.perf_counter()

    if not os.path.isdir(config.output_dir):
        raise OutputDirectoryError(config.output_dir)

    report = BatchReport(key=key)
    logger.info(
        "Translating key '%s' from '%s' into %d language(s).",
        key, config.default_language.code, len(config.target_languages)
    )

    outcomes = await dispatch(
        translator,
        text,
        config.default_language,
        config.target_languages,
        max_concurrent_api_calls=config.max_concurrent_api_calls,
        request_interval=config.request_interval,
        show_progress=show_progress,
    )

    for outcome in outcomes:
        language = outcome.to_language
        if isinstance(outcome, Failure):
            path = resolve_properties_path(config.output_dir, config.base_filename, language.code)
            logger.error("Translation failed for language '%s': %s", language.code, outcome.reason)
            report.languages.append(LanguageReport(language, STATUS_TRANSLATION_FAILED, path, outcome.reason))
            continue
        report.languages.append(
            _write(config.output_dir, config.base_filename, language, language.code, key, outcome.translated_text)
        )

    report.default_file = _write(
        config.output_dir, config.default_filename, config.default_language, None, key, text
    )

    report.elapsed = time.perf_counter() - start
    logger.info(
        "Finished key '%s' in %.2f seconds (%d of %d language(s) written).",
        key, report.elapsed, len(report.languages) - len(report.failed), len(report.languages)
    )
    return report
