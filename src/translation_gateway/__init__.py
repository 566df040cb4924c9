"""
Translation Gateway

GitHub 브랜치/PR 기반 번역 파일 동기화 게이트웨이
"""

__version__ = "1.0.0"

from .api import TranslationGatewayAPI, GatewaySession

__all__ = ["TranslationGatewayAPI", "GatewaySession"]
