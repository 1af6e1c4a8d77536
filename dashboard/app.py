import os

import pandas as pd
import streamlit as st

from statement_report.config import load_config
from statement_report.pandas_pipeline import read_table
from statement_report.reports import REPORT_NAMES


st.set_page_config(page_title="Statement Report Dashboard", layout="wide")

st.title("Statement Reports")

settings = load_config(os.environ.get("STATEMENT_REPORT_CONFIG"))
warehouse = st.sidebar.text_input("Warehouse folder", settings.warehouse_dir)
settings = settings.model_copy(update={"warehouse_dir": warehouse})

if not os.path.isdir(warehouse):
    st.warning(f"No report tables found under {warehouse}. Run the reports with --engine pandas first.")
    st.stop()

table = st.sidebar.selectbox("Report", REPORT_NAMES, index=0)
df = read_table(table, settings)
if df.empty:
    st.warning(f"{table} has no rows yet.")
    st.stop()

dates = sorted(df["date_report"].unique().tolist(), reverse=True)
date_report = st.sidebar.selectbox("Execution date", dates, index=0)
run = df[df["date_report"] == date_report]

st.subheader(f"{table} - {date_report}")
st.dataframe(run.drop(columns=["year", "month", "day"]), use_container_width=True)

chart_cols = {
    "total_amount_by_day": ("transaction_day", "total_amount"),
    "total_amount_by_bank": ("bank", "total_amount"),
    "transaction_count_by_code": ("no_or_code", "transaction_count"),
    "user_transaction_report": ("name", "total_credit"),
}
key, value = chart_cols[table]
st.bar_chart(run.groupby(key)[value].sum())

batches = df.groupby("date_report").size().rename("rows")
st.caption("Rows appended per execution date")
st.dataframe(pd.DataFrame(batches), use_container_width=True)
