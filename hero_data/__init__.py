"""
Hero catalog package
"""
from .data_loader import HeroDataError, HeroDataLoader
from .data_models import AttackKind, HeroTemplate

__all__ = [
    'HeroDataLoader',
    'HeroDataError',
    'HeroTemplate',
    'AttackKind',
]
