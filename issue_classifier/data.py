import csv
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd
import structlog

from issue_classifier.config import (
    AREA_COLUMN,
    DESCRIPTION_COLUMN,
    REQUIRED_COLUMNS,
    TITLE_COLUMN,
)
from issue_classifier.errors import SchemaError

logger = structlog.get_logger(__name__)


@dataclass
class GitHubIssue:
    title: str
    description: str
    area: Optional[str] = None


@dataclass
class DataSchema:
    columns: List[str]
    dtypes: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "DataSchema":
        return cls(
            columns=[str(c) for c in df.columns],
            dtypes={str(c): str(t) for c, t in df.dtypes.items()},
        )


def check_columns(df: pd.DataFrame, required: Iterable[str] = REQUIRED_COLUMNS) -> None:
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise SchemaError(
            f"Missing columns: {missing}. Expected a header with {list(required)}."
        )


def load_issues(path: str) -> pd.DataFrame:
    """
    Reads an issue TSV (first line is the header) into a DataFrame.

    Every cell is read as text and empty cells stay "" rather than NaN.
    Quotes are not interpreted; descriptions routinely contain them.
    """
    df = pd.read_csv(
        path,
        sep="\t",
        dtype=str,
        keep_default_na=False,
        quoting=csv.QUOTE_NONE,
    )
    check_columns(df)
    logger.info("Issues loaded", path=str(path), rows=len(df), areas=df[AREA_COLUMN].nunique())
    return df


def issues_to_frame(issues: Iterable[GitHubIssue]) -> pd.DataFrame:
    rows = [
        {
            TITLE_COLUMN: issue.title or "",
            DESCRIPTION_COLUMN: issue.description or "",
            AREA_COLUMN: issue.area or "",
        }
        for issue in issues
    ]
    return pd.DataFrame(rows, columns=REQUIRED_COLUMNS)


@dataclass
class IssuePrediction:
    predicted_area: str
    labels: List[str]
    scores: List[float]

    def top(self, k: int = 3) -> List[Tuple[str, float]]:
        order = sorted(range(len(self.scores)), key=lambda i: -self.scores[i])[:k]
        return [(self.labels[i], float(self.scores[i])) for i in order]
