"""
Streamlit UI for the Expert Pricing engine.

Features:
- Quote calculator with page/word sizing and deadline-based urgency
- Commission split preview for a reviewer's custom quote
- Pricing guide across every tier, urgency and complexity
- Export of the guide to CSV
"""
import streamlit as st
import sys
from pathlib import Path
from datetime import datetime, timedelta

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from expert_pricing.config.loader import load_pricing_config
from expert_pricing.engine import JobParameters, QuoteCalculator, QuoteStatus, SizingMode
from expert_pricing.engine.models import Pages, Words
from expert_pricing.engine.pricing_guide import build_pricing_guide, summarize_by_tier


st.set_page_config(
    page_title="Expert Pricing",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_calculator():
    """Get cached calculator instance."""
    return QuoteCalculator(load_pricing_config())


try:
    calculator = get_calculator()
    config = calculator.config
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()


def money(value: float) -> str:
    return f"${value:,.2f}"


# ============================================================================
# SIDEBAR: Job Selections
# ============================================================================
with st.sidebar:
    st.header("📝 Job Details")

    with st.container(border=True):
        tier_id = st.selectbox(
            "Service Tier",
            options=[t.id for t in config.tiers],
            format_func=lambda i: config.get_tier(i).name,
        )
        complexity_id = st.selectbox(
            "Complexity",
            options=[c.id for c in config.complexities],
            format_func=lambda i: config.get_complexity(i).name,
        )
        examples = config.get_complexity(complexity_id).examples
        if examples:
            st.caption("e.g. " + ", ".join(examples))

    with st.container(border=True):
        use_deadline = st.toggle("Derive urgency from deadline")
        if use_deadline:
            deadline_date = st.date_input("Deadline", value=datetime.now().date() + timedelta(days=3))
            deadline = datetime.combine(deadline_date, datetime.max.time())
            urgency_id = calculator.urgency_for_deadline(deadline).id
            st.markdown(f"**Urgency:** {config.get_urgency(urgency_id).name}")
        else:
            urgency_id = st.selectbox(
                "Urgency",
                options=[u.id for u in config.urgencies],
                format_func=lambda i: f"{config.get_urgency(i).name} (×{config.get_urgency(i).multiplier})",
            )

    st.divider()
    st.caption(
        f"Split: executor {config.executor_percentage:g}% · "
        f"reviewer {config.reviewer_percentage:g}% · platform {config.platform_percentage:g}%"
    )


# ============================================================================
# MAIN CONTENT: TABBED INTERFACE
# ============================================================================
st.title("Expert Pricing")
st.caption(f"Quote Engine Active | {datetime.now().strftime('%Y-%m-%d')}")

tab1, tab2, tab3 = st.tabs(["⚡ Quote", "💬 Custom Quote", "📊 Pricing Guide"])


# ============================================================================
# TAB 1: QUOTE
# ============================================================================
with tab1:
    col1, col2 = st.columns([1.2, 1.8], gap="large")

    with col1:
        st.subheader("Size")
        mode = st.radio("Calculate by", options=[m.value for m in SizingMode], horizontal=True)
        count = st.text_input(f"Number of {mode}", value="")

    params = JobParameters.from_form(
        tier_id=tier_id,
        urgency_id=urgency_id,
        complexity_id=complexity_id,
        mode=mode,
        pages=count if mode == SizingMode.PAGES.value else None,
        words=count if mode == SizingMode.WORDS.value else None,
    )
    result = calculator.calculate(params)

    with col2:
        st.subheader("Quote Summary")
        with st.container(border=True):
            if result.status is QuoteStatus.OK:
                b = result.breakdown
                m1, m2 = st.columns(2)
                m1.metric("Total", money(b.total_price))
                m2.metric("Base", money(b.base_price))
                st.caption(f"Urgency ×{b.urgency_multiplier} · Complexity ×{b.complexity_multiplier}")

                st.divider()
                s1, s2, s3 = st.columns(3)
                s1.metric("Executor Payout", money(b.executor_payout))
                s2.metric("Reviewer Commission", money(b.reviewer_commission))
                s3.metric("Platform Fee", money(b.platform_fee))
            elif result.status is QuoteStatus.NOT_COMPUTABLE:
                st.info(f"Enter the number of {mode} to see a quote.")
            else:
                st.error(result.reason)

    with st.expander("🔍 Calculation Details"):
        for t in result.trace:
            if t.value:
                st.caption(f"**{t.step}**: {t.description} = `{t.value}`")
            else:
                st.caption(f"**{t.step}**: {t.description}")


# ============================================================================
# TAB 2: CUSTOM QUOTE
# ============================================================================
with tab2:
    suggested = result.breakdown.total_price if result.is_ok else 0.0
    quoted = st.number_input("Quoted price", min_value=0.0, value=float(round(suggested, 2)), step=1.0)
    custom = calculator.price_custom_quote(quoted)

    if custom.is_ok:
        b = custom.breakdown
        c1, c2, c3 = st.columns(3)
        c1.metric("Executor Payout", money(b.executor_payout))
        c2.metric("Reviewer Commission", money(b.reviewer_commission))
        c3.metric("Platform Fee", money(b.platform_fee))
        if suggested:
            diff = b.total_price - suggested
            st.caption(f"Difference from suggested quote: {money(diff)}")
    else:
        st.info("Enter a quoted price above zero.")


# ============================================================================
# TAB 3: PRICING GUIDE
# ============================================================================
with tab3:
    g1, g2 = st.columns([1, 3])
    with g1:
        guide_mode = st.radio("Guide by", options=[m.value for m in SizingMode], key="guide_mode")
        default_count = 1 if guide_mode == SizingMode.PAGES.value else 250
        guide_count = st.number_input("Quantity", min_value=1, value=default_count, step=1)

    sizing = Pages(guide_count) if guide_mode == SizingMode.PAGES.value else Words(guide_count)
    guide = build_pricing_guide(config, sizing)

    with g2:
        st.dataframe(summarize_by_tier(guide), hide_index=True, use_container_width=True)

    st.dataframe(guide, hide_index=True, use_container_width=True)
    st.download_button(
        "📥 CSV",
        data=guide.to_csv(index=False),
        file_name=f"pricing_guide_{guide_mode}_{guide_count}.csv",
        mime="text/csv",
    )
