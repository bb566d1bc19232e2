import os
import time

from sklearn.metrics import classification_report

from issue_classifier.config import AREA_COLUMN, MODEL_PATH, TEST_DATA_PATH, TRAIN_DATA_PATH
from issue_classifier.plots import save_confusion_matrix
from issue_classifier.predictor import Predictor

SAMPLE_TITLE = "DataTable not updating Database with DataAdapter"
SAMPLE_DESCRIPTION = (
    "I am trying to update a database with info from a WinForm. "
    "The DataTable is getting the new textbox values, "
    "but those updates aren't going to the Database."
)


def main():
    for path in (TRAIN_DATA_PATH, TEST_DATA_PATH):
        if not os.path.exists(path):
            raise FileNotFoundError(f"Missing {path}. Put the issue TSV files under data/.")

    predictor = Predictor()
    predictor.load_test_data(TEST_DATA_PATH)

    if os.path.exists(MODEL_PATH):
        predictor.load_model(MODEL_PATH)
        print(f"Loaded model from: {MODEL_PATH}")
    else:
        predictor.load_train_data(TRAIN_DATA_PATH)
        start = time.perf_counter()
        predictor.build_and_train_model()
        print(f"Trained model in {(time.perf_counter() - start) * 1000:.0f} ms")

    metrics = predictor.evaluate_model_metrics()

    print("\n" + "=" * 80)
    print("TEST METRICS")
    print("=" * 80)
    print(f"Micro accuracy:      {metrics.micro_accuracy:.4f}")
    print(f"Macro accuracy:      {metrics.macro_accuracy:.4f}")
    print(f"Log-loss:            {metrics.log_loss:.4f}")
    print(f"Log-loss reduction:  {metrics.log_loss_reduction:.4f}")
    print(f"Top-{metrics.top_k} accuracy:      {metrics.top_k_accuracy:.4f}")

    test = predictor.test_data
    pred = predictor.model.predict(test)
    print("\nClassification report:")
    print(classification_report(test[AREA_COLUMN].tolist(), pred, digits=4, zero_division=0))

    out_png = "artifacts/confusion_matrix_test.png"
    save_confusion_matrix(metrics, out_png)
    print(f"\nSaved confusion matrix to: {out_png}")

    start = time.perf_counter()
    area = predictor.predict(SAMPLE_TITLE, SAMPLE_DESCRIPTION)
    print(f'\nPrediction for "{SAMPLE_TITLE}": {area} ({(time.perf_counter() - start) * 1000:.1f} ms)')


if __name__ == "__main__":
    main()
