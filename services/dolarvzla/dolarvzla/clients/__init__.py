"""
Upstream rate sources for dolarvzla.
"""
from .ai_rates import AiRatesClient
from .dolarapi import DolarApiClient
from .dolarvzla import DolarVzlaClient
from .yadio import YadioClient

__all__ = [
    "AiRatesClient",
    "DolarApiClient",
    "DolarVzlaClient",
    "YadioClient",
]
