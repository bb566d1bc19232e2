import os

from issue_classifier.config import MODEL_PATH, TRAIN_DATA_PATH
from issue_classifier.predictor import Predictor


def main():
    if not os.path.exists(TRAIN_DATA_PATH):
        raise FileNotFoundError(f"Missing {TRAIN_DATA_PATH}. Put the issue TSV files under data/.")

    predictor = Predictor()
    df = predictor.load_train_data(TRAIN_DATA_PATH)
    print(f"Training on {len(df):,} issues, {df['Area'].nunique()} areas")

    predictor.build_and_train_model()
    predictor.save_model(MODEL_PATH)
    print(f"Saved model to: {MODEL_PATH}")


if __name__ == "__main__":
    main()
