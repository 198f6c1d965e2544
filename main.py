import streamlit as st
from dotenv import load_dotenv

from src.blogsmith.client import (
    BlogGenerationController,
    can_submit,
)
from src.blogsmith.domain.blog_models import PERSPECTIVE_LABELS, Perspective

st.set_page_config(page_title="AI Blog Generator", page_icon="📝", layout="centered")

st.markdown(
    """
    <style>
      .block-container { padding-top: 2rem; max-width: 820px; }
      h1 { font-weight: 700; letter-spacing: .2px; text-align: center; }
      div.stButton > button { width: 100%; }
      div.stButton > button:focus-visible { outline: 3px solid #1a73e8; outline-offset: 2px; }
      .blogsmith-post p { line-height: 1.6; margin-bottom: 1rem; }
      @media (prefers-reduced-motion: reduce) {
        * { scroll-behavior: auto !important; animation: none !important; transition: none !important; }
      }
    </style>
    """,
    unsafe_allow_html=True,
)

# ---------- Config & state ----------
load_dotenv()

if "controller" not in st.session_state:
    st.session_state.controller = BlogGenerationController()
if "active_request" not in st.session_state:
    st.session_state.active_request = None

controller: BlogGenerationController = st.session_state.controller
active = st.session_state.active_request

st.title("AI Blog Generator")

title = st.text_input("Blog Title", placeholder="Enter blog title...", disabled=bool(active))
keywords = st.text_input("Keywords (comma-separated)", placeholder="Enter keywords...", disabled=bool(active))
perspective = st.selectbox(
    "Writing Perspective",
    options=[p.value for p in Perspective],
    index=0,
    format_func=lambda value: PERSPECTIVE_LABELS[Perspective(value)],
    disabled=bool(active),
)

label = "Stop Generating" if active else "Generate Blog Post"
# Fixed key so a click survives the label change between reruns
clicked = st.button(
    label,
    key="primary_action",
    type="primary",
    disabled=not active and not can_submit(title, keywords),
)
if clicked:
    if active:
        controller.stop()
        st.session_state.active_request = None
    else:
        st.session_state.active_request = {
            "title": title,
            "keywords": keywords,
            "perspective": perspective,
        }
    st.rerun()

if controller.error:
    st.error(controller.error)

if active or controller.content:
    st.subheader("Generated Blog Post")
post_area = st.empty()


def _render(text: str) -> None:
    paragraphs = [p for p in text.split("\n\n") if p]
    with post_area.container():
        for paragraph in paragraphs:
            st.markdown(paragraph)


if active:
    with st.spinner("Generating..."):
        controller.generate(on_update=_render, **active)
    st.session_state.active_request = None
    st.rerun()

if controller.content:
    _render(controller.content)
    st.caption("Copy the post:")
    st.code(controller.content, language=None)
