"""Supported language codes for the Baidu translation service."""
from enum import Enum
from typing import Iterable, List

from ddtr.errors import UnknownLanguageError


class LanguageCode(Enum):
    """
    Closed set of languages accepted by the configuration and the translation API.

    Each member carries two encodings: the code used in the configuration file
    and in resource file names (e.g. ``ja``), and the code sent on the wire to
    the translation service (e.g. ``jp``).
    """
    AUTO = ("auto", "auto")
    ZH = ("zh", "zh")
    EN = ("en", "en")
    YUE = ("yue", "yue")
    WYW = ("wyw", "wyw")
    JP = ("ja", "jp")
    KOR = ("ko", "kor")
    FRA = ("fra", "fra")
    SPA = ("spa", "spa")
    TH = ("th", "th")
    ARA = ("ara", "ara")
    RU = ("ru", "ru")
    PT = ("pt", "pt")
    DE = ("de", "de")
    IT = ("it", "it")
    EL = ("el", "el")
    NL = ("nl", "nl")
    PL = ("pl", "pl")
    BUL = ("bul", "bul")
    EST = ("est", "est")
    DAN = ("dan", "dan")
    FIN = ("fin", "fin")
    CS = ("cs", "cs")
    ROM = ("rom", "rom")
    SLO = ("slo", "slo")
    SWE = ("swe", "swe")
    HU = ("hu", "hu")
    CHT = ("hk", "cht")
    VIE = ("vie", "vie")

    @property
    def code(self) -> str:
        """The configuration code, also used as the resource file suffix."""
        return self.value[0]

    @property
    def api_code(self) -> str:
        """The code understood by the translation service."""
        return self.value[1]

    @classmethod
    def from_code(cls, code: str) -> "LanguageCode":
        """
        Look up a language by its configuration code.

        Args:
            code (str): The code as written in the configuration (e.g. "ja").

        Returns:
            LanguageCode: The matching member.

        Raises:
            UnknownLanguageError: If the code is not supported.
        """
        for member in cls:
            if member.code == code:
                return member
        raise UnknownLanguageError(code)

    def __str__(self) -> str:
        return self.code


def parse_language_codes(codes: Iterable[str]) -> List[LanguageCode]:
    """Map every code to a LanguageCode, failing on the first unknown one."""
    return [LanguageCode.from_code(code) for code in codes]
