import os
import requests
import pandas as pd
import streamlit as st

API_URL = os.getenv("API_URL", "http://localhost:8000")

st.set_page_config(page_title="AI Trading Assistant", layout="wide")
st.title("📈 AI Trading Assistant")

# Health
try:
    h = requests.get(f"{API_URL}/health", timeout=3).json()
    st.success(f"API: {h['status']}")
except Exception as e:
    st.error(f"API not reachable at {API_URL}: {e}")
    st.stop()

left, right = st.columns([1, 2])

# Daily pick + portfolio
with left:
    st.subheader("Good Morning, Trader")
    if st.button("✨ Get daily pick"):
        with st.spinner("Scanning the watchlist..."):
            pick = requests.get(f"{API_URL}/api/magic", timeout=120).json().get("pick")
        if pick:
            st.metric(
                label=f"{pick['symbol']} · {pick['action']}",
                value=f"${pick['price']:.2f}",
                delta=f"{pick['change']:+.2f}%",
            )
            st.caption(f"RSI {pick['rsi']:.1f} · score {pick['score']}")
            st.info(pick["ai_analysis"])
        else:
            st.warning("No quotes available right now.")

    st.subheader("My Portfolio")
    hcol1, hcol2 = st.columns([2, 1])
    new_symbol = hcol1.text_input("Symbol", placeholder="e.g. AAPL")
    if hcol2.button("+ Add") and new_symbol:
        requests.post(f"{API_URL}/api/holdings", json={"symbol": new_symbol})
        st.rerun()

    holdings = requests.get(f"{API_URL}/api/holdings", timeout=60).json()["holdings"]
    df = pd.DataFrame(holdings)
    if df.empty:
        st.caption("No holdings yet.")
    else:
        st.dataframe(
            df[["symbol", "name", "price", "price_change", "rsi", "volume", "gap"]],
            use_container_width=True,
        )
        to_remove = st.selectbox("Remove holding", df["symbol"].tolist())
        if st.button("Remove"):
            requests.delete(f"{API_URL}/api/holdings", json={"symbol": to_remove})
            st.rerun()

# Personality, filters and scan results
with right:
    presets = requests.get(f"{API_URL}/api/presets").json()["presets"]
    personality = st.radio("AI Personality", list(presets), horizontal=True, format_func=str.upper)
    p = presets[personality]

    fcol1, fcol2, fcol3, fcol4 = st.columns(4)
    rsi_min = fcol1.number_input("RSI min", value=float(p["rsiMin"]), key=f"rsiMin-{personality}")
    rsi_max = fcol1.number_input("RSI max", value=float(p["rsiMax"]), key=f"rsiMax-{personality}")
    mcap_min = fcol2.number_input("MCap min ($M)", value=float(p["marketCapMin"]), key=f"mcapMin-{personality}")
    mcap_max = fcol2.number_input("MCap max ($M)", value=float(p["marketCapMax"]), key=f"mcapMax-{personality}")
    change_min = fcol3.number_input("Change min %", value=float(p["priceChangeMin"]), key=f"chMin-{personality}")
    change_max = fcol3.number_input("Change max %", value=float(p["priceChangeMax"]), key=f"chMax-{personality}")
    vol_mult = fcol4.number_input("Volume x", value=float(p["volumeMultiplier"]), key=f"vol-{personality}")

    if st.button("RUN SCANNER"):
        filters = {
            "rsiMin": rsi_min,
            "rsiMax": rsi_max,
            "marketCapMin": mcap_min,
            "marketCapMax": mcap_max,
            "priceChangeMin": change_min,
            "priceChangeMax": change_max,
            "volumeMultiplier": vol_mult,
            "minSignals": p["minSignals"],
        }
        with st.spinner("Scanning market..."):
            r = requests.post(f"{API_URL}/api/scan", json={"preset": personality, "filters": filters}, timeout=120)
        if r.status_code == 200:
            st.session_state["scan"] = r.json()["results"]
        else:
            st.error(r.text)

    st.subheader("Live Opportunities")
    results = st.session_state.get("scan")
    if not results:
        st.caption("Select a personality and run the scanner.")
    else:
        sdf = pd.DataFrame(results).sort_values("signals", ascending=False)
        sdf["marketCap"] = sdf["marketCap"] / 1_000_000
        st.dataframe(
            sdf[["symbol", "name", "price", "priceChange", "rsi", "volumeRatio", "marketCap", "signals", "signalDetails"]],
            use_container_width=True,
        )
        labels = {f"{row['symbol']} ({row['name']})": row for row in sdf.to_dict("records")}
        choice = st.selectbox("Verify with AI", list(labels))
        if st.button("Get AI insight"):
            row = labels[choice]
            payload = {"symbol": row["symbol"], "name": row["name"], "stockId": int(row["stockId"])}
            with st.spinner("Asking the analyst..."):
                v = requests.post(f"{API_URL}/api/verify", json=payload, timeout=120).json()
            st.info(v["verdict"])

st.subheader("AI Log")
logs = requests.get(f"{API_URL}/api/logs").json()["logs"]
if logs:
    st.dataframe(pd.DataFrame(logs)[["created_at", "symbol", "price", "verdict"]], use_container_width=True)
else:
    st.caption("No AI verdicts yet.")
