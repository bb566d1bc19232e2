import os

import streamlit as st

from issue_classifier.config import MODEL_PATH, TOP_K
from issue_classifier.data import GitHubIssue
from issue_classifier.model import load_bundle
from issue_classifier.preprocessing import normalize


@st.cache_resource
def get_model(path: str):
    return load_bundle(path)


st.set_page_config(page_title="Issue Area Classifier", layout="wide")
st.title("GitHub Issue Area Classifier")
st.caption("Title + Description → Area label")

with st.sidebar:
    st.header("Settings")
    if not os.path.exists(MODEL_PATH):
        st.warning("Model not found. Run: `python -m scripts.train_model`")
    show_topk = st.checkbox(f"Show top-{TOP_K} areas", value=True)

title = st.text_input("Issue title:", placeholder="Example: DataTable not updating Database with DataAdapter")
description = st.text_area(
    "Issue description:",
    height=170,
    placeholder="Example: I am trying to update a database with info from a WinForm...",
)

col1, col2 = st.columns([1, 1])

has_input = bool(title.strip() or description.strip())

if st.button("Predict area", type="primary", disabled=not os.path.exists(MODEL_PATH) or not has_input):
    model = get_model(MODEL_PATH)
    prediction = model.predict_issue(GitHubIssue(title=title, description=description))
    top = prediction.top(TOP_K)

    with col1:
        st.subheader("Prediction")
        st.metric("Area", prediction.predicted_area)
        st.metric("Score", f"{top[0][1]:.3f}")

    with col2:
        if show_topk:
            st.subheader(f"Top-{TOP_K} areas")
            for label, score in top:
                st.write(f"- {label}: {score:.2f}")

    st.divider()
    st.write("**Normalized text:**")
    st.code(normalize(title) + "\n\n" + normalize(description))
