from .aggregator import AggregatorClientPort, AggregatorResult
from .keyboard import KeyboardPort, KeyListener
from .source_resolver import FallbackGeneratorPort, SourceResolverPort
from .subtitles import SubtitleServicePort

__all__ = [
    "AggregatorClientPort",
    "AggregatorResult",
    "FallbackGeneratorPort",
    "KeyListener",
    "KeyboardPort",
    "SourceResolverPort",
    "SubtitleServicePort",
]
