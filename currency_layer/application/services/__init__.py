from .rate_normalizer import RateNormalizer
from .rate_service import RateService

__all__ = ['RateNormalizer', 'RateService']
