import os

import numpy as np
from matplotlib.figure import Figure
from sklearn.metrics import ConfusionMatrixDisplay

from issue_classifier.metrics import MulticlassMetrics


def save_confusion_matrix(metrics: MulticlassMetrics, out_path: str) -> None:
    n = len(metrics.labels)
    fig = Figure(figsize=(max(6, n * 0.6), max(5, n * 0.5)))
    ax = fig.subplots()
    display = ConfusionMatrixDisplay(
        confusion_matrix=np.array(metrics.confusion_matrix),
        display_labels=metrics.labels,
    )
    display.plot(ax=ax, xticks_rotation=45, colorbar=False, values_format="d")
    ax.set(xlabel="Predicted area", ylabel="True area", title="Confusion Matrix (Test)")
    fig.tight_layout()

    parent = os.path.dirname(str(out_path))
    if parent:
        os.makedirs(parent, exist_ok=True)
    fig.savefig(out_path, dpi=200)
