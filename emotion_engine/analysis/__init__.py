"""Analysis modules for acoustic and linguistic emotion scoring"""

from emotion_engine.analysis.acoustic import AcousticAnalyzer, AcousticAnalysis
from emotion_engine.analysis.linguistic import LinguisticEmotionScorer, TransformerSentimentAnalyzer
from emotion_engine.analysis.model_scorer import ModelEmotionScorer, build_scorer
from emotion_engine.analysis.scoring import AcousticEmotionScorer

__all__ = [
    'AcousticAnalyzer',
    'AcousticAnalysis',
    'AcousticEmotionScorer',
    'LinguisticEmotionScorer',
    'ModelEmotionScorer',
    'TransformerSentimentAnalyzer',
    'build_scorer',
]
