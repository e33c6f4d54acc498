from pathlib import Path
from typing import Dict, List

import streamlit as st
from dotenv import load_dotenv

from hotel_analysis.cli import run_analysis
from hotel_analysis.config import load_analysis_config
from hotel_analysis.models import GroupScore


ROOT = Path(__file__).resolve().parents[1]
CONFIG_DIR = ROOT / "config"


def score_rows(scores: List[GroupScore]) -> List[Dict[str, object]]:
    rows = []
    for s in scores:
        rows.append(
            {
                "Country": s.metrics.destination_country,
                "Hotel": s.metrics.hotel_name,
                "City": s.metrics.destination_city,
                "Bookings": s.metrics.transaction_count,
                "Avg price": round(s.metrics.avg_price, 2),
                "Final score": round(s.final_score, 2),
                "Price score": round(s.price_score, 2),
                "Profit score": round(s.profit_score, 2),
                "Discount score": round(s.discount_score, 2),
            }
        )
    return rows


def main():
    st.set_page_config(
        page_title="Hotel Booking Analysis",
        layout="wide",
    )

    st.title("Hotel Booking Analysis")
    st.caption(
        "Busiest destination, best overall value and most profitable hotel "
        "locations from a booking export. Same engine as the CLI."
    )

    load_dotenv()
    cfg = load_analysis_config(CONFIG_DIR / "analysis.yaml")

    with st.sidebar:
        st.header("Dataset")

        dataset = st.text_input("Booking CSV path", value=str(cfg.dataset_path))
        encoding = st.text_input("Encoding", value=cfg.encoding)

        top_n = st.slider(
            "Top groups to show",
            min_value=1,
            max_value=max(50, cfg.top_n),
            value=max(1, cfg.top_n),
        )
        bottom_n = st.slider(
            "Bottom groups to show",
            min_value=0,
            max_value=max(50, cfg.bottom_n),
            value=max(0, cfg.bottom_n),
        )

        run_btn = st.button("Run analysis")

    if not run_btn:
        st.info("Pick a dataset in the sidebar and click **Run analysis**.")
        return

    dataset_path = Path(dataset)
    if not dataset_path.is_absolute():
        dataset_path = ROOT / dataset_path
    if not dataset_path.exists():
        st.error(f"Dataset not found: {dataset_path}")
        return

    with st.spinner("Parsing and scoring bookings..."):
        report, ctx = run_analysis(dataset_path, encoding=encoding)

    st.caption(
        f"Loaded {ctx['record_count']} bookings, skipped {ctx['skipped_lines']} lines."
    )

    if report is None:
        st.warning("No valid bookings found in this file.")
        return

    st.success("Analysis complete.")

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric(
            "Most booked destination",
            report.top_country.country,
            f"{report.top_country.bookings} bookings",
        )
    with col2:
        st.metric(
            "Best overall value",
            report.best_value.metrics.hotel_name,
            f"score {report.best_value.final_score:.2f}",
        )
    with col3:
        st.metric(
            "Most profitable (rooms x margin)",
            report.most_profitable.key,
            f"{report.most_profitable.estimated_profit:.2f}",
        )

    st.subheader("Normalization ranges")
    st.table(
        [
            {"Metric": r.name, "Min": round(r.minimum, 4), "Max": round(r.maximum, 4)}
            for r in report.ranges.values()
        ]
    )

    left, right = st.columns(2)
    with left:
        st.markdown(f"**Top {top_n} hotel groups by final score**")
        st.dataframe(score_rows(report.ranked[:top_n]), use_container_width=True)
    with right:
        st.markdown(f"**Bottom {bottom_n} hotel groups by final score**")
        bottom = report.ranked[-bottom_n:] if bottom_n > 0 else []
        st.dataframe(score_rows(bottom), use_container_width=True)

    st.subheader("Bookings per destination country")
    counts = sorted(report.country_counts.items(), key=lambda item: (-item[1], item[0]))
    st.dataframe(
        [{"Country": c, "Bookings": n} for c, n in counts],
        use_container_width=True,
    )


if __name__ == "__main__":
    main()
