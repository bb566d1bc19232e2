from typing import List, Optional, Tuple


# Column layout of the issue TSV files
TITLE_COLUMN = "Title"
DESCRIPTION_COLUMN = "Description"
AREA_COLUMN = "Area"

TEXT_COLUMNS: List[str] = [TITLE_COLUMN, DESCRIPTION_COLUMN]
REQUIRED_COLUMNS: List[str] = [TITLE_COLUMN, DESCRIPTION_COLUMN, AREA_COLUMN]

DATA_DIR = "data"
TRAIN_DATA_PATH = "data/issues_train.tsv"
TEST_DATA_PATH = "data/issues_test.tsv"

MODEL_DIR = "artifacts"
MODEL_PATH = "artifacts/issue_area_model.joblib"

# Bump when the saved artifact layout changes
MODEL_FORMAT_VERSION = 1

# Text featurization (applied to Title and Description separately)
WORD_NGRAM_RANGE: Tuple[int, int] = (1, 2)
CHAR_NGRAM_RANGE: Tuple[int, int] = (3, 3)
MAX_FEATURES: Optional[int] = None
MIN_DF = 1

# Maximum-entropy trainer
TRAINER_C = 10.0
TRAINER_MAX_ITER = 2000
TRAINER_TOL = 1e-4
TRAINER_RANDOM_STATE = 42

TOP_K = 3
