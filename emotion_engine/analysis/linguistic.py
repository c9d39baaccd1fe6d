"""Linguistic Emotion Scoring

Scores emotions from a transcript supplied by the speech-to-text layer. A
paragraph-level sentiment score seeds baseline category scores and a weighted
emotion lexicon adds evidence for individual categories.

Requirements:
    - Empty transcripts fail with NoSpeechDetectedError
    - Transcripts shorter than three words fail with InsufficientSpeechError
    - Final scores are normalized to sum to 1
    - Confidence averages sentiment confidence and mean matched keyword weight
"""

import logging
from typing import Dict, List, Optional, Tuple
import torch
from transformers import AutoTokenizer, AutoModelForSequenceClassification

from emotion_engine.config.config_loader import config as default_config, load_data_table
from emotion_engine.models.enums import EmotionCategory, SentimentPolarity
from emotion_engine.models.errors import (
    InsufficientSpeechError,
    LinguisticProcessingError,
    NoSpeechDetectedError,
)
from emotion_engine.models.interfaces import SentimentAnalyzer
from emotion_engine.models.results import EmotionalKeyword, EmotionScores, LinguisticResult, normalize_scores


logger = logging.getLogger(__name__)


class TransformerSentimentAnalyzer(SentimentAnalyzer):
    """Sentiment scoring with a DistilBERT SST-2 classifier.

    The model is loaded lazily on first use. The score is the positive class
    probability minus the negative class probability.

    Attributes:
        model_name: Hugging Face model identifier
        tokenizer: Loaded tokenizer (None until first use)
        model: Loaded classifier (None until first use)
    """

    def __init__(self, config=None):
        config = config or default_config
        self.model_name = config.get('linguistic.sentiment_model',
                                     'distilbert-base-uncased-finetuned-sst-2-english')
        self.device = "cuda" if config.get('model.use_gpu', False) and torch.cuda.is_available() else "cpu"
        self.tokenizer: Optional[AutoTokenizer] = None
        self.model: Optional[AutoModelForSequenceClassification] = None

    def _load_model(self):
        """Load tokenizer and classifier and switch to evaluation mode.

        Raises:
            LinguisticProcessingError: If loading fails
        """
        try:
            logger.info(f"Loading sentiment model: {self.model_name}")
            self.tokenizer = AutoTokenizer.from_pretrained(self.model_name)
            self.model = AutoModelForSequenceClassification.from_pretrained(self.model_name)
            self.model.to(self.device)
            self.model.eval()
            logger.info("Sentiment model loaded successfully")
        except Exception as e:
            logger.error(f"Failed to load sentiment model: {e}", exc_info=True)
            raise LinguisticProcessingError(f"Failed to load sentiment model: {e}") from e

    def sentiment_score(self, text: str) -> float:
        if self.model is None or self.tokenizer is None:
            self._load_model()

        try:
            inputs = self.tokenizer(
                text,
                return_tensors="pt",
                truncation=True,
                max_length=512,
                padding=True
            )
            inputs = {k: v.to(self.device) for k, v in inputs.items()}

            with torch.no_grad():
                outputs = self.model(**inputs)
                probs = torch.nn.functional.softmax(outputs.logits, dim=-1)

            # SST-2 outputs: [negative, positive]
            probs_np = probs.cpu().numpy()[0]
            return float(probs_np[1]) - float(probs_np[0])
        except Exception as e:
            logger.error(f"Sentiment analysis failed: {e}")
            raise LinguisticProcessingError(f"Failed to analyze sentiment: {e}") from e


class EmotionLexicon:
    """Weighted keyword lexicon loaded from config/lexicon.yaml

    An entry matches wherever it occurs in the text, including inside longer
    words ("sad" matches "sadness"); each entry counts at most once per
    transcript.
    """

    def __init__(self, entries: Dict[EmotionCategory, Dict[str, float]]):
        self.entries = entries

    @classmethod
    def load(cls, name: str = "lexicon.yaml") -> "EmotionLexicon":
        table = load_data_table(name)
        entries = {}
        for category in EmotionCategory:
            words = table.get(category.value) or {}
            entries[category] = {str(word).lower(): float(weight) for word, weight in words.items()}
        logger.info(f"Loaded emotion lexicon v{table.get('version')} "
                    f"with {sum(len(w) for w in entries.values())} entries")
        return cls(entries)

    def find(self, text: str, context_words: int = 2) -> List[EmotionalKeyword]:
        """Find lexicon entries in lowercased text, with surrounding context"""
        words = text.split()
        keywords = []
        for category, entries in self.entries.items():
            for word, weight in entries.items():
                position = text.find(word)
                if position < 0:
                    continue
                index = len(text[:position].split())
                # A match inside a longer word takes that word's position
                if position > 0 and not text[position - 1].isspace():
                    index -= 1
                span = len(word.split())
                context = " ".join(words[max(0, index - context_words):index + span + context_words])
                keywords.append(EmotionalKeyword(word=word, emotion=category,
                                                 weight=weight, context=context))
        return keywords


class LinguisticEmotionScorer:
    """Scores emotions from transcript sentiment and lexicon keywords.

    Attributes:
        sentiment_analyzer: Paragraph-level sentiment scorer
        lexicon: Weighted emotion keyword lexicon
        min_words: Minimum word count for analysis
        keyword_weight: Fraction of a keyword's weight added to its category
        polarity_threshold: Sentiment magnitude separating neutral from polar text
        context_words: Words of context kept either side of a keyword
    """

    def __init__(
        self,
        config=None,
        sentiment_analyzer: Optional[SentimentAnalyzer] = None,
        lexicon: Optional[EmotionLexicon] = None
    ):
        config = config or default_config
        self.sentiment_analyzer = sentiment_analyzer or TransformerSentimentAnalyzer(config)
        self.lexicon = lexicon or EmotionLexicon.load()
        self.min_words = config.get('linguistic.min_words', 3)
        self.keyword_weight = config.get('linguistic.keyword_weight', 0.4)
        self.polarity_threshold = config.get('linguistic.polarity_threshold', 0.1)
        self.context_words = config.get('linguistic.context_words', 2)

        logger.info("LinguisticEmotionScorer initialized")

    def analyze(self, transcript: str) -> LinguisticResult:
        """Score a transcript.

        Args:
            transcript: Text from the speech-to-text layer

        Returns:
            LinguisticResult with normalized scores and confidence

        Raises:
            NoSpeechDetectedError: If the transcript is empty after trimming
            InsufficientSpeechError: If the transcript has fewer than min_words words
            LinguisticProcessingError: If the sentiment model fails
        """
        text = (transcript or "").strip()
        if not text:
            raise NoSpeechDetectedError()
        if len(text.split()) < self.min_words:
            raise InsufficientSpeechError(
                f"Transcript has {len(text.split())} words, at least {self.min_words} required"
            )

        polarity, sentiment_confidence = self._classify_sentiment(text)
        scores = self._baseline_scores(polarity, sentiment_confidence)

        keywords = self.lexicon.find(text.lower(), self.context_words)
        for keyword in keywords:
            scores[keyword.emotion] += keyword.weight * self.keyword_weight

        keyword_confidence = (
            sum(k.weight for k in keywords) / len(keywords) if keywords else 0.0
        )
        confidence = min(1.0, (sentiment_confidence + keyword_confidence) / 2.0)

        result = LinguisticResult(
            transcript=text,
            emotion_scores=normalize_scores(scores),
            confidence=confidence,
            polarity=polarity,
            sentiment_confidence=sentiment_confidence,
            keywords=tuple(keywords),
        )
        logger.info(f"Linguistic analysis: polarity={polarity.value}, "
                    f"keywords={len(keywords)}, confidence={confidence:.3f}")
        return result

    def _classify_sentiment(self, text: str) -> Tuple[SentimentPolarity, float]:
        score = max(-1.0, min(1.0, self.sentiment_analyzer.sentiment_score(text)))
        if score > self.polarity_threshold:
            polarity = SentimentPolarity.POSITIVE
        elif score < -self.polarity_threshold:
            polarity = SentimentPolarity.NEGATIVE
        else:
            polarity = SentimentPolarity.NEUTRAL
        return polarity, abs(score)

    @staticmethod
    def _baseline_scores(polarity: SentimentPolarity, confidence: float) -> EmotionScores:
        scores = {category: 0.0 for category in EmotionCategory}
        if polarity is SentimentPolarity.POSITIVE:
            scores[EmotionCategory.JOY] = confidence * 0.6
        elif polarity is SentimentPolarity.NEGATIVE:
            scores[EmotionCategory.SADNESS] = confidence * 0.4
            scores[EmotionCategory.ANGER] = confidence * 0.3
        else:
            scores[EmotionCategory.NEUTRAL] = 0.5
        return scores
