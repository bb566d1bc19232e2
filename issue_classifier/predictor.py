from enum import Enum
from typing import Optional

import pandas as pd
import structlog

from issue_classifier import config
from issue_classifier.data import GitHubIssue, IssuePrediction, load_issues
from issue_classifier.errors import DataNotLoadedError, ModelNotReadyError
from issue_classifier.metrics import MulticlassMetrics, evaluate_multiclass
from issue_classifier.model import (
    PipelineConfig,
    TrainedModel,
    load_bundle,
    save_bundle,
    train_model,
)

logger = structlog.get_logger(__name__)


class PredictorState(Enum):
    UNINITIALIZED = "uninitialized"
    DATA_LOADED = "data_loaded"
    MODEL_READY = "model_ready"


class Predictor:
    def __init__(self, pipeline_config: Optional[PipelineConfig] = None):
        self.pipeline_config = pipeline_config or PipelineConfig()
        self._train_data: Optional[pd.DataFrame] = None
        self._test_data: Optional[pd.DataFrame] = None
        self._model: Optional[TrainedModel] = None

    @property
    def state(self) -> PredictorState:
        if self._model is not None:
            return PredictorState.MODEL_READY
        if self._train_data is not None or self._test_data is not None:
            return PredictorState.DATA_LOADED
        return PredictorState.UNINITIALIZED

    @property
    def train_data(self) -> Optional[pd.DataFrame]:
        return self._train_data

    @property
    def test_data(self) -> Optional[pd.DataFrame]:
        return self._test_data

    @property
    def model(self) -> TrainedModel:
        if self._model is None:
            raise ModelNotReadyError(
                "No model. Call build_and_train_model() or load_model() first."
            )
        return self._model

    def load_train_data(self, path: str) -> pd.DataFrame:
        # Replaces whatever was loaded before
        self._train_data = load_issues(path)
        return self._train_data

    def load_test_data(self, path: str) -> pd.DataFrame:
        self._test_data = load_issues(path)
        return self._test_data

    def build_and_train_model(self) -> TrainedModel:
        if self._train_data is None:
            raise DataNotLoadedError("Training data not loaded. Call load_train_data() first.")
        self._model = train_model(self._train_data, self.pipeline_config)
        return self._model

    def evaluate_model_metrics(self) -> MulticlassMetrics:
        model = self.model
        if self._test_data is None:
            raise DataNotLoadedError("Test data not loaded. Call load_test_data() first.")

        test = self._test_data
        areas = test[config.AREA_COLUMN].astype(str)
        # Rows whose area the model never saw have no label key and are skipped
        known = areas.isin(model.labels)
        skipped = int((~known).sum())
        if skipped:
            logger.warning(
                "Test rows with unknown area skipped",
                skipped=skipped,
                areas=sorted(areas[~known].unique().tolist()),
            )
        test = test[known]
        if test.empty:
            raise ValueError("No test rows have an area the model was trained on.")

        y_true = model.encode_labels(test[config.AREA_COLUMN].astype(str))
        proba = model.predict_proba(test)
        metrics = evaluate_multiclass(y_true, proba, model.labels, top_k=config.TOP_K)

        logger.info(
            "Model evaluated",
            rows=metrics.n_samples,
            micro_accuracy=round(metrics.micro_accuracy, 4),
            macro_accuracy=round(metrics.macro_accuracy, 4),
            log_loss=round(metrics.log_loss, 4),
            log_loss_reduction=round(metrics.log_loss_reduction, 4),
        )
        return metrics

    def predict_with_scores(self, title: str, description: str) -> IssuePrediction:
        return self.model.predict_issue(GitHubIssue(title=title, description=description))

    def predict(self, title: str, description: str) -> str:
        return self.predict_with_scores(title, description).predicted_area

    def save_model(self, path: str) -> None:
        save_bundle(self.model, path)

    def load_model(self, path: str) -> TrainedModel:
        self._model = load_bundle(path)
        return self._model
