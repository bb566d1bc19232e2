import os
from dataclasses import asdict, dataclass, field
from typing import List, Optional, Tuple

import joblib
import numpy as np
import pandas as pd
import structlog
from scipy import sparse
from sklearn.compose import ColumnTransformer
from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.linear_model import LogisticRegression
from sklearn.pipeline import FeatureUnion, Pipeline
from sklearn.preprocessing import FunctionTransformer, LabelEncoder

from issue_classifier import config
from issue_classifier.data import (
    DataSchema,
    GitHubIssue,
    IssuePrediction,
    check_columns,
    issues_to_frame,
)
from issue_classifier.errors import ModelFormatError
from issue_classifier.preprocessing import normalize_texts

logger = structlog.get_logger(__name__)


@dataclass
class FeaturizerConfig:
    word_ngram_range: Tuple[int, int] = config.WORD_NGRAM_RANGE
    char_ngram_range: Tuple[int, int] = config.CHAR_NGRAM_RANGE
    max_features: Optional[int] = config.MAX_FEATURES
    min_df: int = config.MIN_DF
    lowercase: bool = True
    sublinear_tf: bool = True
    stop_words: Optional[str] = None


@dataclass
class TrainerConfig:
    C: float = config.TRAINER_C
    max_iter: int = config.TRAINER_MAX_ITER
    tol: float = config.TRAINER_TOL
    class_weight: Optional[str] = None
    random_state: int = config.TRAINER_RANDOM_STATE


@dataclass
class PipelineConfig:
    featurizer: FeaturizerConfig = field(default_factory=FeaturizerConfig)
    trainer: TrainerConfig = field(default_factory=TrainerConfig)
    # Directory for caching fitted feature transformers; None disables caching
    cache_dir: Optional[str] = None


class TextColumnVectorizer(TfidfVectorizer):
    """TfidfVectorizer that gives one all-zero column when the texts hold no tokens."""

    def fit(self, raw_documents, y=None):
        self.fit_transform(raw_documents, y)
        return self

    def fit_transform(self, raw_documents, y=None):
        docs = list(raw_documents)
        analyze = self.build_analyzer()
        self.no_tokens_ = not any(analyze(doc) for doc in docs)
        if self.no_tokens_:
            logger.warning("Text column has no tokens", analyzer=self.analyzer, rows=len(docs))
            return sparse.csr_matrix((len(docs), 1))
        return super().fit_transform(docs, y)

    def transform(self, raw_documents):
        if self.no_tokens_:
            return sparse.csr_matrix((len(list(raw_documents)), 1))
        return super().transform(raw_documents)


def text_featurizer(cfg: FeaturizerConfig) -> Pipeline:
    """normalize -> word n-grams + character n-grams, each TF-IDF weighted."""
    words = TextColumnVectorizer(
        analyzer="word",
        ngram_range=cfg.word_ngram_range,
        max_features=cfg.max_features,
        min_df=cfg.min_df,
        lowercase=cfg.lowercase,
        sublinear_tf=cfg.sublinear_tf,
        stop_words=cfg.stop_words,
    )
    chars = TextColumnVectorizer(
        analyzer="char_wb",
        ngram_range=cfg.char_ngram_range,
        max_features=cfg.max_features,
        min_df=cfg.min_df,
        lowercase=cfg.lowercase,
        sublinear_tf=cfg.sublinear_tf,
    )
    return Pipeline(
        [
            ("normalize", FunctionTransformer(normalize_texts)),
            ("ngrams", FeatureUnion([("words", words), ("chars", chars)])),
        ]
    )


def build_pipeline(cfg: Optional[PipelineConfig] = None) -> Pipeline:
    cfg = cfg or PipelineConfig()
    # Each text column is featurized on its own; the blocks are concatenated
    features = ColumnTransformer(
        [
            ("title", text_featurizer(cfg.featurizer), config.TITLE_COLUMN),
            ("description", text_featurizer(cfg.featurizer), config.DESCRIPTION_COLUMN),
        ],
        remainder="drop",
    )
    trainer = LogisticRegression(
        C=cfg.trainer.C,
        max_iter=cfg.trainer.max_iter,
        tol=cfg.trainer.tol,
        class_weight=cfg.trainer.class_weight,
        random_state=cfg.trainer.random_state,
        solver="lbfgs",
    )
    return Pipeline(
        [("features", features), ("trainer", trainer)],
        memory=cfg.cache_dir,
    )


def text_frame(df: pd.DataFrame) -> pd.DataFrame:
    check_columns(df, config.TEXT_COLUMNS)
    return df[config.TEXT_COLUMNS].fillna("").astype(str)


@dataclass
class TrainedModel:
    pipeline: Pipeline
    label_encoder: LabelEncoder
    schema: DataSchema
    format_version: int = config.MODEL_FORMAT_VERSION

    @property
    def labels(self) -> List[str]:
        # Class order of the fitted trainer, decoded back to area names
        keys = self.pipeline.classes_
        return [str(a) for a in self.label_encoder.inverse_transform(keys)]

    def encode_labels(self, areas) -> np.ndarray:
        return self.label_encoder.transform(list(areas))

    def predict_proba(self, df: pd.DataFrame) -> np.ndarray:
        return self.pipeline.predict_proba(text_frame(df))

    def predict(self, df: pd.DataFrame) -> List[str]:
        proba = self.predict_proba(df)
        idx = np.argmax(proba, axis=1)
        labels = self.labels
        return [labels[i] for i in idx]

    def predict_issue(self, issue: GitHubIssue) -> IssuePrediction:
        proba = self.predict_proba(issues_to_frame([issue]))[0]
        labels = self.labels
        return IssuePrediction(
            predicted_area=labels[int(np.argmax(proba))],
            labels=labels,
            scores=[float(p) for p in proba],
        )

    def topk(self, issue: GitHubIssue, k: int = config.TOP_K) -> List[Tuple[str, float]]:
        return self.predict_issue(issue).top(k)


def train_model(df: pd.DataFrame, cfg: Optional[PipelineConfig] = None) -> TrainedModel:
    check_columns(df)

    encoder = LabelEncoder()
    y = encoder.fit_transform(df[config.AREA_COLUMN].astype(str))

    pipeline = build_pipeline(cfg)
    pipeline.fit(text_frame(df), y)

    logger.info(
        "Issue area model trained",
        rows=len(df),
        areas=len(encoder.classes_),
    )
    return TrainedModel(
        pipeline=pipeline,
        label_encoder=encoder,
        schema=DataSchema.from_frame(df),
    )


def save_bundle(model: TrainedModel, path: str) -> None:
    parent = os.path.dirname(str(path))
    if parent:
        os.makedirs(parent, exist_ok=True)
    joblib.dump(
        {
            "format_version": model.format_version,
            "pipeline": model.pipeline,
            "label_encoder": model.label_encoder,
            "schema": asdict(model.schema),
        },
        path,
    )
    logger.info("Model saved", path=str(path))


def load_bundle(path: str) -> TrainedModel:
    obj = joblib.load(path)
    if not isinstance(obj, dict) or "format_version" not in obj:
        raise ModelFormatError(f"{path} is not an issue area model file.")
    if obj["format_version"] != config.MODEL_FORMAT_VERSION:
        raise ModelFormatError(
            f"{path} has model format {obj['format_version']}, "
            f"expected {config.MODEL_FORMAT_VERSION}."
        )
    logger.info("Model loaded", path=str(path))
    return TrainedModel(
        pipeline=obj["pipeline"],
        label_encoder=obj["label_encoder"],
        schema=DataSchema(**obj["schema"]),
        format_version=obj["format_version"],
    )
