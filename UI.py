import streamlit as st
import yaml
import pandas as pd
import os
import sys

# ==========================================
# 0. Page Configuration
# ==========================================
st.set_page_config(
    page_title="Monkey Simulator",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
    <style>
        .stImage > img {
            border-radius: 10px;
            box-shadow: 0 4px 8px 0 rgba(0, 0, 0, 0.2);
        }

        .block-container {
            padding-top: 2rem;
        }
    </style>
""", unsafe_allow_html=True)

st.title("Infinite Monkey Simulator")
st.caption("Selective breeding of typing monkeys with a genetic algorithm")

# ==========================================
# 1. Helper Functions
# ==========================================

SAMPLE_TYPES = ["fittest", "fitness", "diversity", "distribution"]


def get_default_sampling():
    return {"type": "fittest", "interval": 1}


# ==========================================
# 2. Session State Initialization
# ==========================================

if "config" not in st.session_state:
    st.session_state.config = {
        "target": "METHINKS IT IS LIKE A WEASEL",
        "alphabet": " ABCDEFGHIJKLMNOPQRSTUVWXYZ",
        "seed": None,
        "population": {
            "size": 1000,
            "survival_threshold": 0.2,
            "mutation_rate": 0.01
        },
        "sampling": [get_default_sampling(), {"type": "distribution", "interval": 1}]
    }

config = st.session_state.config

# ==========================================
# 3. Sidebar: Global Settings
# ==========================================

st.sidebar.title("🐒 Simulation Config")
st.sidebar.markdown("---")

st.sidebar.header("1. Target")
config["target"] = st.sidebar.text_area(
    "Target Sequence",
    value=config["target"],
    height=100,
    help="The text we want a monkey to type. Converted to upper case."
).strip().upper()

config["alphabet"] = st.sidebar.text_input(
    "Alphabet",
    value=config["alphabet"],
    help="Every symbol a monkey can type."
)

st.sidebar.header("2. Population")
config["population"]["size"] = st.sidebar.number_input(
    "Population Size",
    min_value=1,
    value=config["population"]["size"]
)
config["population"]["survival_threshold"] = st.sidebar.slider(
    "Survival Threshold", 0.01, 1.0,
    float(config["population"]["survival_threshold"]),
    help="Fraction of the fittest monkeys kept as parents."
)
config["population"]["mutation_rate"] = st.sidebar.number_input(
    "Mutation Rate", min_value=0.0, max_value=1.0, step=0.001, format="%.4f",
    value=float(config["population"]["mutation_rate"])
)

use_seed = st.sidebar.checkbox("Fixed Seed", value=config["seed"] is not None)
if use_seed:
    config["seed"] = int(st.sidebar.number_input("Seed", min_value=0, value=config["seed"] or 0))
else:
    config["seed"] = None

# ==========================================
# 4. Sampling Configuration
# ==========================================

st.header("Sampling & Outputs")

sampling_remove_indices = []

for j, sample in enumerate(config["sampling"]):
    cols = st.columns([2, 1, 0.5])

    current_samp_type = sample.get("type", "fittest")
    if current_samp_type not in SAMPLE_TYPES:
        current_samp_type = "fittest"

    sample["type"] = cols[0].selectbox(
        "Type",
        SAMPLE_TYPES,
        index=SAMPLE_TYPES.index(current_samp_type),
        key=f"samp_type_{j}",
        label_visibility="collapsed"
    )
    sample["interval"] = cols[1].number_input(
        "Interval",
        min_value=1,
        value=int(sample.get("interval", 1)),
        key=f"samp_int_{j}",
        label_visibility="collapsed"
    )
    sample["file"] = f"output/{sample['type']}.csv"

    if cols[2].button("x", key=f"rm_samp_{j}"):
        sampling_remove_indices.append(j)

if sampling_remove_indices:
    for index in sorted(sampling_remove_indices, reverse=True):
        del config["sampling"][index]
    st.rerun()

if st.button("➕ Add Output"):
    config["sampling"].append(get_default_sampling())
    st.rerun()

# ==========================================
# 5. Export & Run
# ==========================================

base_dir = os.path.dirname(os.path.abspath(__file__))
src_path = os.path.join(base_dir, 'src')
if src_path not in sys.path: sys.path.append(src_path)

from monkeysim.cli import run_simulation_from_config

st.divider()
st.subheader("Actions")

col_actions1, col_actions2 = st.columns(2)

with col_actions1:
    st.download_button(
        label="💾 Download Config YAML",
        data=yaml.dump(config, sort_keys=False),
        file_name="config.yaml",
        mime="text/yaml"
    )

with col_actions2:
    if st.button("Run Simulation!", type="primary"):
        with st.status("Running Simulation...", expanded=True) as status:
            try:
                st.session_state.result = run_simulation_from_config(config)
                status.update(label="Simulation Complete!", state="complete", expanded=False)
            except ValueError as e:
                st.error(f"Simulation Failed: {e}")
                status.update(label="Error Occurred", state="error")
                st.stop()

# ==========================================
# 6. Results
# ==========================================
st.divider()
st.header("Simulation Results")

result = st.session_state.get("result")
if result is None:
    st.info("Run the simulation to see results.")
    st.stop()

m1, m2, m3 = st.columns(3)
m1.metric("Generations", result.generations)
m2.metric("Elapsed (s)", f"{result.elapsed:.2f}")
m3.metric("Typing Speed (wpm)", f"{result.words_per_minute:,}")
st.code(result.genome)

tab_live, tab_plots, tab_data = st.tabs(["Progress", "Plots", "Raw Data"])

with tab_live:
    history = pd.DataFrame(result.history).set_index("generation")
    st.subheader("Fittest Score per Generation")
    st.line_chart(history["score"])
    st.subheader("Fitness Distribution (All Generations)")
    st.bar_chart(pd.Series(result.distribution, name="count"))

with tab_plots:
    has_plots = False
    for sample in config["sampling"]:
        png_path = sample["file"].replace(".csv", ".png")
        if os.path.exists(png_path):
            has_plots = True
            st.subheader(sample["type"].title())
            st.image(png_path, use_container_width=True)
    if not has_plots:
        st.info("No plots found.")

with tab_data:
    for sample in config["sampling"]:
        if os.path.exists(sample["file"]):
            st.subheader(sample["file"])
            st.dataframe(pd.read_csv(sample["file"], keep_default_na=False))
