"""gopls integration."""

from goinspect.gopls.client import CodeIntelligence, GoplsClient

__all__ = ["CodeIntelligence", "GoplsClient"]
