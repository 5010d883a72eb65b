#!/usr/bin/env python3
"""
AI Gym Coach - Streamlit Web Interface
Main entry point for the web application.
"""

import streamlit as st
import os
import sys
import importlib

# Ensure pages directory is in Python path
sys.path.insert(0, os.path.dirname(__file__))

# Only reload modules in development mode (set DEV_MODE=1 in environment)
DEV_MODE = os.environ.get('DEV_MODE', '0') == '1'

try:
    import pages

    generate_plan = importlib.import_module('pages.generate_plan')

    if DEV_MODE:
        importlib.reload(generate_plan)
except ImportError as e:
    st.error(f"Critical error loading pages: {e}")
    st.code(f"Python path: {sys.path}")
    st.stop()

# Configure the page
st.set_page_config(
    page_title="AI Gym Coach",
    page_icon="🏋️",
    layout="centered",
    initial_sidebar_state="collapsed"
)

st.markdown("""
    <style>
    /* Page header styles */
    .main-header {
        font-size: 2.5rem;
        font-weight: 700;
        margin-bottom: 0.5rem;
    }

    .sub-header {
        font-size: 1.125rem;
        color: #6E6E73;
        margin-bottom: 2rem;
    }

    /* Mobile responsive styles */
    @media (max-width: 768px) {
        .main-header {
            font-size: 1.75rem;
        }

        .sub-header {
            font-size: 1rem;
        }

        /* Full width buttons on mobile */
        .stButton button {
            width: 100% !important;
        }
    }
    </style>
""", unsafe_allow_html=True)

generate_plan.show()

st.markdown("---")
st.caption("AI Gym Coach - Your personal fitness architect 🏋️‍♂️")
