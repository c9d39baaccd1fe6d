"""Fusion of acoustic and linguistic emotion estimates"""

from emotion_engine.fusion.fusion_engine import FusionEngine, combine_scores

__all__ = ['FusionEngine', 'combine_scores']
