import streamlit as st
import pandas as pd
import time
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from data_backend import DashboardData
from visualization import GraphViz, composite_bar_chart, metric_bar_chart, metric_history_chart

from observatory import config
from observatory.constants import CATEGORIES, METRICS
from observatory.driver import ObservatoryDriver
from observatory.logging_config import setup_logging
from observatory.viewport import ViewController, Viewport
from observatory.weighting import WeightingMethod

CANVAS_W, CANVAS_H = 800, 600
TICKS_PER_RERUN = 30
ANIMATION_FRAMES = 120
PAN_STEP = 60

st.set_page_config(
    page_title="market integration observatory",
    layout="wide",
    initial_sidebar_state="expanded",
)

if 'data' not in st.session_state:
    setup_logging()
    st.session_state.data = None
    st.session_state.driver = None
    st.session_state.view = ViewController(Viewport(width=CANVAS_W, height=CANVAS_H))

st.sidebar.title("market integration observatory")
st.sidebar.caption("discrete structure analysis of market integration & temporal price dynamics")
st.sidebar.markdown("---")

if st.sidebar.button("Load Data") or st.session_state.data is None:
    with st.spinner("loading..."):
        data = DashboardData().load()
        st.session_state.data = data
        st.session_state.driver = ObservatoryDriver(data.series, width=CANVAS_W, height=CANVAS_H)
        st.session_state.viz = GraphViz(data.labels)
    if data.source == 'mock':
        st.sidebar.warning("backend not reachable, using mock data")
    else:
        st.sidebar.success(f"loaded {len(data.months)} months from {data.source}")

data = st.session_state.data
driver = st.session_state.driver
viz = st.session_state.viz
view = st.session_state.view

if not data.months:
    st.title("market integration observatory")
    st.info("no months in the data source")
    st.stop()

# ---------------- sidebar controls ----------------

st.sidebar.subheader("configuration")

category = st.sidebar.selectbox("Product Category", CATEGORIES)

time_index = st.sidebar.slider("Month", 0, len(data.months) - 1, driver.time_index,
                               format="%d")
st.sidebar.caption(f"**{data.months[time_index]}**")

play = st.sidebar.toggle("Play timeline", value=False, help="advance one month per rerun")
if play:
    time_index = (time_index + 1) % len(data.months)

threshold = st.sidebar.slider("Similarity Threshold", 0.0, 1.0, float(driver.threshold), 0.01)

stats = data.get_similarity_stats(data.months[time_index])
s1, s2, s3 = st.sidebar.columns(3)
s1.metric("min", f"{stats['min']:.2f}")
s2.metric("avg", f"{stats['avg']:.2f}")
s3.metric("max", f"{stats['max']:.2f}")

method = WeightingMethod.from_label(
    st.sidebar.selectbox("Weighting Method", WeightingMethod.labels())
)
custom_weights = None
if method is WeightingMethod.INTERACTIVE:
    custom_weights = {m: st.sidebar.slider(m.title(), 0.0, 1.0, 0.25, 0.05, key=f"w_{m}") for m in METRICS}

# only push changes through the driver, a refresh recomputes centrality
if time_index != driver.time_index:
    driver.set_time_index(time_index)
if threshold != driver.threshold:
    driver.set_threshold(threshold)
driver.set_method(method, custom_weights)

month = driver.month
ranking_df = data.get_ranking(month, driver.threshold, method, custom_weights)

tab_network, tab_ranking, tab_history = st.tabs(["Network Topology", "Composite Ranking", "City History"])

# ---------------- network ----------------

with tab_network:
    st.header(f"Network Topology - {month}")
    st.caption(f"{category} · threshold {driver.threshold:.2f} · {method.label}")

    graph_stats = data.get_graph_stats(month, driver.threshold)
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Edges", graph_stats['num_edges'])
    c2.metric("Density", f"{graph_stats['density']:.2f}")
    c3.metric("Components", graph_stats['num_components'])
    c4.metric("Isolated", len(graph_stats['isolated']))

    tools = st.columns(8)
    if tools[0].button("Zoom In"):
        view.zoom_in()
    if tools[1].button("Zoom Out"):
        view.zoom_out()
    if tools[2].button("Fit"):
        view.fit(driver.positions())
    if tools[3].button("Reset"):
        view.reset()
    if tools[4].button("←"):
        view.pan_by(-PAN_STEP, 0)
    if tools[5].button("→"):
        view.pan_by(PAN_STEP, 0)
    if tools[6].button("↑"):
        view.pan_by(0, -PAN_STEP)
    if tools[7].button("↓"):
        view.pan_by(0, PAN_STEP)

    animate = st.toggle("Animate layout", value=False)

    composite = driver.composite()
    placeholder = st.empty()

    if animate:
        for _ in range(ANIMATION_FRAMES):
            driver.tick()
            fig = viz.network_figure(driver.positions(), driver.simulator.edges(), view.viewport,
                                     values=composite)
            placeholder.plotly_chart(fig, use_container_width=False)
            time.sleep(config.frame_interval())
    else:
        for _ in range(TICKS_PER_RERUN):
            driver.tick()
        fig = viz.network_figure(driver.positions(), driver.simulator.edges(), view.viewport,
                                 values=composite)
        placeholder.plotly_chart(fig, use_container_width=False)

    st.caption(f"zoom {view.viewport.k:.2f}x · pan ({view.viewport.x:.0f}, {view.viewport.y:.0f})"
               + ("" if view.viewport.labels_visible() else " · labels hidden"))

    d1, d2 = st.columns(2)
    d1.download_button(
        "Screenshot (svg)",
        viz.snapshot_svg(driver.positions(), driver.simulator.edges(), view.viewport),
        file_name="network_topology.svg",
        mime="image/svg+xml",
    )
    with d2.expander("Interactive (pyvis)"):
        net = viz.create_graph(driver.positions(), driver.simulator.edges(), values=composite)
        net.save_graph("dashboard/temp_graph.html")
        with open("dashboard/temp_graph.html", "r") as f:
            st.components.v1.html(f.read(), height=620, scrolling=True)

# ---------------- ranking ----------------

with tab_ranking:
    st.header("Composite Score Ranking")

    st.plotly_chart(composite_bar_chart(ranking_df), use_container_width=True)

    cols = st.columns(2)
    for i, metric in enumerate(['Degree', 'Closeness', 'Betweenness', 'Eigenvector']):
        with cols[i % 2]:
            st.plotly_chart(metric_bar_chart(ranking_df, metric), use_container_width=True)

    st.dataframe(ranking_df.round(4), use_container_width=True)
    st.download_button(
        "Download CSV",
        data.ranking_csv(month, driver.threshold, method, custom_weights),
        file_name="composite_ranking.csv",
        mime="text/csv",
    )

# ---------------- history ----------------

with tab_history:
    st.header("City History")
    city = st.selectbox("City", data.labels)
    history = data.get_metric_history(city, driver.threshold)
    st.plotly_chart(metric_history_chart(history, city), use_container_width=True)

    top_by_month = []
    for m in data.months:
        ranked = data.get_ranking(m, driver.threshold, method, custom_weights)
        top_by_month.append({'Month': m, 'Top City': ranked.loc[0, 'City'],
                             'Composite': round(ranked.loc[0, 'Composite'], 4)})
    st.dataframe(pd.DataFrame(top_by_month), use_container_width=True)

# timeline playback: next month every couple of seconds
if play:
    time.sleep(2.0)
    st.rerun()
