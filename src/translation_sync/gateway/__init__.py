"""Translation gateways."""

from .base import EchoGateway, TranslationGateway
from .google import GoogleTranslateGateway, parse_translation

__all__ = [
    "EchoGateway",
    "GoogleTranslateGateway",
    "TranslationGateway",
    "parse_translation",
]
