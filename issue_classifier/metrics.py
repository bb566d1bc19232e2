from dataclasses import asdict, dataclass
from typing import Dict, List

import numpy as np
from sklearn.metrics import accuracy_score, balanced_accuracy_score, confusion_matrix

_EPS = 1e-15


@dataclass
class MulticlassMetrics:
    micro_accuracy: float
    macro_accuracy: float
    log_loss: float
    log_loss_reduction: float
    top_k_accuracy: float
    top_k: int
    per_class_log_loss: List[float]
    confusion_matrix: List[List[int]]
    labels: List[str]
    n_samples: int

    def as_dict(self) -> Dict:
        return asdict(self)

    def summary(self) -> str:
        return (
            f"MicroAccuracy:{self.micro_accuracy:.2%}, "
            f"MacroAccuracy:{self.macro_accuracy:.2%}, "
            f"LogLoss:{self.log_loss:.4f}, "
            f"LogLossReduction:{self.log_loss_reduction:.2%}"
        )


def prior_log_loss(y_true: np.ndarray, n_classes: int) -> float:
    """Log-loss of always predicting the class frequencies of y_true."""
    counts = np.bincount(y_true, minlength=n_classes).astype(np.float64)
    p = counts[counts > 0] / counts.sum()
    return float(-np.sum(p * np.log(p)))


def top_k_hits(y_true: np.ndarray, proba: np.ndarray, k: int) -> np.ndarray:
    k = min(k, proba.shape[1])
    top = np.argsort(-proba, axis=1)[:, :k]
    return np.any(top == y_true[:, None], axis=1)


def evaluate_multiclass(
    y_true,
    proba: np.ndarray,
    labels: List[str],
    top_k: int = 3,
) -> MulticlassMetrics:
    """
    y_true holds label keys (indices into labels); proba is (n, len(labels))
    with columns in the same order.
    """
    y_true = np.asarray(y_true, dtype=int)
    proba = np.asarray(proba, dtype=np.float64)
    if len(y_true) == 0:
        raise ValueError("Cannot evaluate on an empty dataset.")
    n_classes = len(labels)

    y_pred = np.argmax(proba, axis=1)

    # Negative log-likelihood of the true class, per row
    true_p = np.clip(proba[np.arange(len(y_true)), y_true], _EPS, 1.0)
    nll = -np.log(true_p)
    ll = float(nll.mean())

    prior = prior_log_loss(y_true, n_classes)
    reduction = (prior - ll) / prior if prior > 0 else 0.0

    per_class = []
    for c in range(n_classes):
        mask = y_true == c
        per_class.append(float(nll[mask].mean()) if mask.any() else float("nan"))

    cm = confusion_matrix(y_true, y_pred, labels=list(range(n_classes)))

    return MulticlassMetrics(
        micro_accuracy=float(accuracy_score(y_true, y_pred)),
        # mean recall over the classes that occur in y_true
        macro_accuracy=float(balanced_accuracy_score(y_true, y_pred)),
        log_loss=ll,
        log_loss_reduction=float(reduction),
        top_k_accuracy=float(top_k_hits(y_true, proba, top_k).mean()),
        top_k=top_k,
        per_class_log_loss=per_class,
        confusion_matrix=cm.tolist(),
        labels=list(labels),
        n_samples=int(len(y_true)),
    )
