"""
Streamlit UI for the duct cleaning quote tool.

Features:
- Quote builder with itemized breakdown and Clean & Seal option
- Job request form that prices the job and shows the CRM payload
- Read-only views of the zipcode surcharges and add-on services
"""
import json
from datetime import datetime

import pandas as pd
import streamlit as st

from duct_quote.config.logging_config import configure_logging
from duct_quote.engine import PricingEngine, QuoteInputError, parse_quote_form
from duct_quote.engine.display import breakdown_rows, format_currency
from duct_quote.services.job_request import JobRequest, build_job_payload


st.set_page_config(
    page_title="Duct Cleaning Quotes",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_engine():
    """Get cached engine instance."""
    configure_logging()
    return PricingEngine()


try:
    engine = get_engine()
except (FileNotFoundError, ValueError) as e:
    st.error(f"System Error: {e}")
    st.stop()

config = engine.config


# ============================================================================
# SIDEBAR: Config snapshot
# ============================================================================
with st.sidebar:
    st.header("Pricing Snapshot")
    st.caption(f"Version `{config.version}`")
    st.metric("Partner Discount", f"{config.partner_discount_percent:g}%")
    st.metric("Per Additional HVAC", format_currency(config.per_additional_hvac_charge))
    st.metric("Clean & Seal Per Unit", format_currency(config.clean_and_seal_per_unit))

    if st.button("Reload Pricing Tables"):
        engine.reload_data()
        st.rerun()


st.title("Duct Cleaning Quotes")
st.caption(f"Quote Engine Active | {datetime.now().strftime('%Y-%m-%d')}")

tab1, tab2, tab3 = st.tabs(["Quote", "Job Request", "Pricing Tables"])


def quote_form(prefix: str):
    """Shared quote inputs; returns a request or None after showing the error."""
    c1, c2, c3 = st.columns(3)
    sqft = c1.text_input("Square Footage", placeholder="e.g. 1500", key=f"{prefix}_sqft")
    hvac = c2.text_input("Additional HVAC Systems", placeholder="e.g. 0", key=f"{prefix}_hvac")
    zipcode = c3.text_input("Zipcode", placeholder="e.g. 84101", max_chars=10, key=f"{prefix}_zip")

    add_on_labels = {f"{s.description} ({format_currency(s.price)})": s.service_name
                     for s in config.visible_add_ons()}
    selected = st.multiselect("Add-On Services", list(add_on_labels), key=f"{prefix}_addons")

    try:
        return parse_quote_form(sqft, hvac, zipcode, [add_on_labels[s] for s in selected])
    except QuoteInputError as e:
        if sqft or hvac or zipcode:
            st.warning(f"**{e.title}**: {e.message}")
        return None


# ============================================================================
# TAB 1: QUOTE
# ============================================================================
with tab1:
    request = quote_form("quote")

    if request is not None:
        result = engine.calculate(request)

        col1, col2 = st.columns(2, gap="large")
        with col1:
            with st.container(border=True):
                st.subheader("Duct Cleaning")
                st.metric("Estimated Quote", format_currency(result.total))
                st.dataframe(
                    pd.DataFrame(breakdown_rows(request, result, config), columns=["Item", "Amount"]),
                    use_container_width=True,
                    hide_index=True,
                )
        with col2:
            with st.container(border=True):
                st.subheader("Clean & Seal")
                st.metric(
                    "Partner Price",
                    format_currency(result.clean_and_seal_total),
                    delta=f"-{format_currency(result.clean_and_seal_discount)}",
                    delta_color="off",
                )
                st.caption(f"List price {format_currency(result.clean_and_seal_price)}")
                if result.add_ons:
                    st.caption(f"Add-ons: {format_currency(result.add_on_total)}")

        for warning in result.warnings:
            st.warning(warning)

        with st.expander("Resolution Details"):
            st.text(result.get_trace_text())

        st.caption("This is an estimated quote based on the provided information")


# ============================================================================
# TAB 2: JOB REQUEST
# ============================================================================
with tab2:
    with st.form("job_request"):
        st.markdown("##### Customer Information")
        customer_name = st.text_input("Customer Name *")
        phone = st.text_input("Phone Number *", placeholder="(555)123-4567")
        email = st.text_input("Email Address *", placeholder="customer@example.com")
        st.markdown("##### Job Details")
        address = st.text_area("Service Address *", placeholder="123 Main St, City, State, ZIP")
        description = st.text_area("Job Description *", placeholder="Describe the service needed...")
        preferred_date = st.text_input("Preferred Date (Optional)", placeholder="MM/DD/YYYY")
        submitted = st.form_submit_button("Submit Job Request", type="primary")

    job_request = quote_form("job")

    if submitted:
        if job_request is None:
            st.error("Enter square footage, HVAC systems and zipcode to price the job.")
        else:
            job = JobRequest(
                customer_name=customer_name,
                phone=phone,
                email=email,
                address=address,
                job_description=description,
                preferred_date=preferred_date or None,
            )
            try:
                payload = build_job_payload(
                    job, job_request, engine.calculate(job_request), config_version=config.version
                )
            except ValueError as e:
                st.error(str(e))
            else:
                st.success("Job request ready to send")
                st.code(json.dumps(payload, indent=2), language="json")


# ============================================================================
# TAB 3: PRICING TABLES
# ============================================================================
with tab3:
    c1, c2 = st.columns(2)
    with c1:
        st.subheader("Square Footage Tiers")
        st.dataframe(
            pd.DataFrame([{"Range": t.label, "Price": t.price} for t in config.sqft_tiers]),
            use_container_width=True, hide_index=True,
        )
        st.subheader("Clean & Seal Tiers")
        st.dataframe(
            pd.DataFrame([{"Range": t.label, "Price": t.price} for t in config.clean_and_seal_tiers]),
            use_container_width=True, hide_index=True,
        )
    with c2:
        st.subheader("Zipcode Surcharges")
        zip_df = pd.DataFrame(
            sorted(config.zipcode_charges.items()), columns=["Zipcode", "Charge"]
        )
        st.dataframe(zip_df, use_container_width=True, hide_index=True, height=400)
        st.caption(f"Total zipcodes: {len(zip_df):,}")
        st.subheader("Add-On Services")
        st.dataframe(
            pd.DataFrame([
                {"Service": s.description, "Price": s.price, "Hidden": s.hidden}
                for s in config.add_on_services.values()
            ]),
            use_container_width=True, hide_index=True,
        )
